from __future__ import annotations

import random

import pytest

from huffzip.core.codec_huffman import (
    CodecHuffman,
    encoded_bit_length,
    huffman_compress,
    huffman_decompress,
)
from huffzip.core.code_table import is_prefix_free
from huffzip.core.huffman_tree import build_freq_table
from huffzip.engine.container import Engine, pack_container, unpack_container
from huffzip.errors import BadMagic, CorruptPayload, UnsupportedVersion


def _random_bytes(n: int, seed: int) -> bytes:
    rng = random.Random(seed)
    return bytes(rng.getrandbits(8) for _ in range(n))


CASES = {
    "empty": b"",
    "one_byte": b"x",
    "single_repeated": b"\x07" * 1000,
    "all_256": bytes(range(256)),
    "abc": b"AAAAABBBCC",
    "text": ("HELLO 123\nRIGA ARTICOLO: vite M3 qty=10 prezzo=1.20\n" * 20).encode("utf-8"),
    "random_10k": _random_bytes(10 * 1024, 1),
    "skewed": b"a" * 5000 + b"b" * 10 + b"c",
}


@pytest.mark.parametrize("name", sorted(CASES))
def test_roundtrip(name: str) -> None:
    data = CASES[name]
    codec = CodecHuffman()
    res = codec.compress(data)
    assert res.n_symbols == len(data)
    assert is_prefix_free(res.codes)
    assert codec.decompress(res.packed, res.codes, res.n_symbols) == data


def test_single_symbol_regression() -> None:
    data = bytes([7]) * 1000
    res = huffman_compress(data)
    assert res.codes == {7: "0"}
    assert res.nbits == 1000
    assert res.packed == b"\x00" * 125
    assert huffman_decompress(res.packed, res.codes, 1000) == data


def test_abc_scenario() -> None:
    data = b"AAAAABBBCC"
    res = huffman_compress(data)
    a, b, c = (len(res.codes[ord(ch)]) for ch in "ABC")
    assert a < c
    bits = 5 * a + 3 * b + 2 * c
    assert res.nbits == bits == encoded_bit_length(build_freq_table(data), res.codes)
    assert len(res.packed) == (bits + 7) // 8
    assert huffman_decompress(res.packed, res.codes, len(data)) == data


def test_compress_is_deterministic() -> None:
    data = _random_bytes(4096, 99) + b"zzzz" * 300
    r1 = huffman_compress(data)
    r2 = huffman_compress(bytearray(data))
    assert r1 == r2


def test_compression_beats_raw_on_skewed_input() -> None:
    res = huffman_compress(CASES["skewed"])
    assert res.bits_per_symbol < 1.1
    assert len(res.packed) < len(CASES["skewed"]) // 7


def test_engine_container_roundtrip() -> None:
    eng = Engine.default()
    data = CASES["text"]
    blob, codes = eng.compress(data)
    n, payload = unpack_container(blob)
    assert n == len(data)
    assert eng.decompress(blob, codes) == data


def test_container_errors() -> None:
    blob = pack_container(3, b"\x00")
    assert unpack_container(blob) == (3, b"\x00")

    with pytest.raises(BadMagic):
        unpack_container(b"XYZ" + blob[3:])
    with pytest.raises(UnsupportedVersion):
        unpack_container(blob[:3] + b"\x02" + blob[4:])
    with pytest.raises(CorruptPayload):
        unpack_container(blob[:6])
    with pytest.raises(CorruptPayload):
        unpack_container(b"HZ")
    with pytest.raises(ValueError):
        pack_container(-1, b"")

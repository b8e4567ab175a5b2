from __future__ import annotations

from huffzip.core.bitpack import pack_bits, unpack_bits
from huffzip.core.code_table import CodeTable, build_code_table, build_decode_trie
from huffzip.core.codec_base import Codec, Packed
from huffzip.core.huffman_tree import build_freq_table, build_huffman_tree


def huffman_compress(data: bytes) -> Packed:
    """
    Core riusabile: data -> (packed, codes, n_symbols, nbits)
    """
    data = bytes(data)
    freq = build_freq_table(data)
    root = build_huffman_tree(freq)
    codes = build_code_table(root)
    packed, nbits = pack_bits(data, codes)
    return Packed(packed=packed, codes=codes, n_symbols=len(data), nbits=nbits)


def huffman_decompress(packed: bytes, codes: CodeTable, n_symbols: int) -> bytes:
    """
    Core riusabile: (packed, codes, n_symbols) -> data

    Decoding goes through a trie rebuilt from ``codes``; the encoder tree is
    never needed.
    """
    trie = build_decode_trie(codes)
    return unpack_bits(bytes(packed), trie, n_symbols)


def encoded_bit_length(freq: dict[int, int], codes: CodeTable) -> int:
    return sum(f * len(codes[sym]) for sym, f in freq.items())


class CodecHuffman(Codec):
    codec_id = "huffman"

    def compress(self, data: bytes) -> Packed:
        return huffman_compress(data)

    def decompress(self, packed: bytes, codes: CodeTable, n_symbols: int) -> bytes:
        return huffman_decompress(packed, codes, n_symbols)

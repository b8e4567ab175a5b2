from __future__ import annotations

from dataclasses import dataclass

from huffzip.core.code_table import CodeTable
from huffzip.core.codec_huffman import CodecHuffman
from huffzip.errors import BadMagic, CorruptPayload, UnsupportedVersion

MAGIC = b"HZP"
VERSION_CONTAINER_V1 = 1

# MAGIC(3) + VER(1) + N(8)
HEADER_LEN = 3 + 1 + 8


# -------------------
# Container v1
# [MAGIC(3)|VER(1)|N(u64 big)|PAYLOAD]
#
# N = number of original symbols; the decoder stops after N symbols, so the
# zero padding of the last payload byte is never decoded.
# -------------------
def pack_container(n_symbols: int, payload: bytes) -> bytes:
    if n_symbols < 0 or n_symbols > 0xFFFFFFFFFFFFFFFF:
        raise ValueError(f"n_symbols fuori range (u64): {n_symbols}")
    out = bytearray()
    out += MAGIC
    out.append(VERSION_CONTAINER_V1)
    out += n_symbols.to_bytes(8, "big")
    out += payload
    return bytes(out)


def unpack_container(blob: bytes) -> tuple[int, bytes]:
    if len(blob) < 4:
        raise CorruptPayload("blob troppo corto per container")
    if blob[:3] != MAGIC:
        raise BadMagic("Magic number non valido")
    ver = blob[3]
    if ver != VERSION_CONTAINER_V1:
        raise UnsupportedVersion(f"Versione container non supportata: {ver}")
    if len(blob) < HEADER_LEN:
        raise CorruptPayload("container troncato (header)")
    n_symbols = int.from_bytes(blob[4:HEADER_LEN], "big")
    return n_symbols, bytes(blob[HEADER_LEN:])


# -------------------
# Engine
# -------------------
@dataclass
class Engine:
    codec: CodecHuffman

    @classmethod
    def default(cls) -> "Engine":
        return cls(codec=CodecHuffman())

    def compress(self, data: bytes) -> tuple[bytes, CodeTable]:
        """data -> (container blob, codebook)"""
        res = self.codec.compress(data)
        return pack_container(res.n_symbols, res.packed), res.codes

    def decompress(self, blob: bytes, codes: CodeTable) -> bytes:
        n_symbols, payload = unpack_container(blob)
        return self.codec.decompress(payload, codes, n_symbols)

from __future__ import annotations

from huffzip.core.code_table import CodeTable
from huffzip.core.huffman_tree import HuffmanTree
from huffzip.errors import CorruptPayload, MissingCode


def pack_bits(data: bytes, codes: CodeTable) -> tuple[bytes, int]:
    """
    data -> (packed, nbits)

    Codes are concatenated MSB-first; the last byte is zero-padded in its low
    bits. nbits = number of meaningful bits (0 if data is empty).
    """
    if not data:
        return b"", 0

    lut: dict[int, tuple[int, int]] = {sym: (int(code, 2), len(code)) for sym, code in codes.items()}

    out_bytes = bytearray()
    acc = 0
    acc_bits = 0
    total_bits = 0

    for b in data:
        entry = lut.get(b)
        if entry is None:
            raise MissingCode(b)
        value, length = entry
        acc = (acc << length) | value
        acc_bits += length
        total_bits += length
        while acc_bits >= 8:
            acc_bits -= 8
            out_bytes.append((acc >> acc_bits) & 0xFF)
        acc &= (1 << acc_bits) - 1

    if acc_bits > 0:
        out_bytes.append((acc << (8 - acc_bits)) & 0xFF)

    return bytes(out_bytes), total_bits


def unpack_bits(packed: bytes, tree: HuffmanTree | None, n_symbols: int) -> bytes:
    """
    Decodifica esattamente n_symbols simboli camminando sull'albero/trie.

    The walk stops on the last symbol, so padding bits are never decoded.
    """
    if n_symbols < 0:
        raise ValueError(f"n_symbols negativo: {n_symbols}")
    if n_symbols == 0:
        if packed:
            raise CorruptPayload(f"payload non vuoto ({len(packed)} byte) per 0 simboli")
        return b""
    if tree is None:
        raise CorruptPayload(f"nessun codice disponibile per decodificare {n_symbols} simboli")

    nodes = tree.nodes
    root = tree.root
    node = root
    out = bytearray()
    last = len(packed) - 1

    for i, byte in enumerate(packed):
        for shift in range(7, -1, -1):
            cur = nodes[node]
            nxt = cur.right if (byte >> shift) & 1 else cur.left
            if nxt is None:
                raise CorruptPayload(f"bit path senza foglia (byte {i}, bit {7 - shift})")
            child = nodes[nxt]
            if not child.is_leaf:
                node = nxt
                continue
            out.append(child.symbol)  # type: ignore[arg-type]
            node = root
            if len(out) == n_symbols:
                if i != last:
                    raise CorruptPayload(f"payload con {last - i} byte in eccesso dopo l'ultimo simbolo")
                return bytes(out)

    raise CorruptPayload(f"payload troncato: attesi {n_symbols} simboli, decodificati {len(out)}")

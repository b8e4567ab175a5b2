"""Code table (byte -> bit string) and its text persistence.

Codebook text format (one entry per line, sorted by byte value):

    <byte-value> <bit-string>

Byte values are written unsigned (0..255). The loader also accepts the
signed form -128..-1 and folds it with ``& 0xFF``, so codebooks written by a
signed-byte implementation load to the same table.
"""

from __future__ import annotations

import hashlib
import re
from pathlib import Path

from huffzip.atomic import atomic_write_bytes
from huffzip.core.huffman_tree import HuffmanNode, HuffmanTree
from huffzip.errors import CodebookError, InputError

CodeTable = dict[int, str]

_BITS = frozenset("01")
_BYTE_RE = re.compile(r"-?[0-9]+")


def build_code_table(tree: HuffmanTree | None) -> CodeTable:
    """Root-to-leaf paths of ``tree``: left edge = "0", right edge = "1"."""
    if tree is None:
        return {}
    codes: CodeTable = {}
    for sym, path in tree.leaf_paths():
        if not path:
            # only a root-leaf would get here; build_huffman_tree never makes one
            raise CodebookError(f"codice vuoto per il byte {sym}")
        codes[sym] = path
    return dict(sorted(codes.items()))


def is_prefix_free(codes: CodeTable) -> bool:
    # after sorting, a code that prefixes others sits right before one of them
    ordered = sorted(codes.values())
    for a, b in zip(ordered, ordered[1:]):
        if b.startswith(a):
            return False
    return True


def _check_code(sym: int, code: str) -> None:
    if not 0 <= sym <= 0xFF:
        raise CodebookError(f"codebook: byte fuori range: {sym}")
    if not code:
        raise CodebookError(f"codebook: codice vuoto per il byte {sym}")
    if not set(code) <= _BITS:
        raise CodebookError(f"codebook: codice non binario per il byte {sym}: {code!r}")


def build_decode_trie(codes: CodeTable) -> HuffmanTree | None:
    """Rebuild a decode trie straight from (byte, bit string) pairs.

    The trie may be incomplete (e.g. a single-symbol table only has the "0"
    branch); decoding through a missing branch is a corruption error.
    """
    if not codes:
        return None

    left: list[int | None] = [None]
    right: list[int | None] = [None]
    symbol: list[int | None] = [None]

    for sym, code in sorted(codes.items()):
        _check_code(sym, code)
        cur = 0
        for bit in code:
            if symbol[cur] is not None:
                raise CodebookError(f"codebook non prefix-free: il codice di {symbol[cur]} prefissa quello di {sym}")
            children = left if bit == "0" else right
            nxt = children[cur]
            if nxt is None:
                left.append(None)
                right.append(None)
                symbol.append(None)
                nxt = len(symbol) - 1
                children[cur] = nxt
            cur = nxt
        if symbol[cur] is not None or left[cur] is not None or right[cur] is not None:
            raise CodebookError(f"codebook non prefix-free: codice di {sym} in conflitto ({code})")
        symbol[cur] = sym

    nodes = [
        HuffmanNode(freq=0, symbol=symbol[i], left=left[i], right=right[i]) for i in range(len(symbol))
    ]
    return HuffmanTree(nodes=nodes, root=0)


# -------------------
# Persistenza testuale
# -------------------
def dump_codebook(codes: CodeTable) -> str:
    for sym, code in codes.items():
        _check_code(sym, code)
    return "".join(f"{sym} {code}\n" for sym, code in sorted(codes.items()))


def load_codebook(text: str) -> CodeTable:
    codes: CodeTable = {}
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line:
            continue
        parts = line.split()
        if len(parts) != 2:
            raise CodebookError(f"codebook: riga {lineno} malformata: {raw!r}")
        if not _BYTE_RE.fullmatch(parts[0]):
            raise CodebookError(f"codebook: riga {lineno}: byte non numerico: {parts[0]!r}")
        value = int(parts[0])
        if not -128 <= value <= 0xFF:
            raise CodebookError(f"codebook: riga {lineno}: byte fuori range: {value}")
        sym = value & 0xFF
        if sym in codes:
            raise CodebookError(f"codebook: riga {lineno}: byte {sym} duplicato")
        _check_code(sym, parts[1])
        codes[sym] = parts[1]

    if not is_prefix_free(codes):
        raise CodebookError("codebook non prefix-free")
    return dict(sorted(codes.items()))


def codebook_sha256(codes: CodeTable) -> str:
    return hashlib.sha256(dump_codebook(codes).encode("utf-8")).hexdigest()


def read_codebook(path: Path) -> CodeTable:
    p = Path(path)
    if not p.is_file():
        raise InputError(f"codebook non trovato: {p}")
    try:
        raw = p.read_bytes()
    except OSError as e:
        raise InputError(f"codebook non leggibile: {p}: {e}") from e
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise CodebookError(f"codebook non UTF-8: {p} (pos={e.start})") from e
    return load_codebook(text)


def write_codebook(path: Path, codes: CodeTable) -> None:
    atomic_write_bytes(Path(path), dump_codebook(codes).encode("utf-8"))

"""
Source collection for compress.

A path argument is either a regular file (read as-is) or a directory. By
default a directory contributes only its direct regular-file children, one
level deep; subdirectories are skipped. ``recursive=True`` walks the whole
tree instead. Order is deterministic: arguments in the given order, children
sorted by relative path.
"""

from __future__ import annotations

import hashlib
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from huffzip.errors import CorruptPayload, InputError, UsageError
from huffzip.source_index import SourceEntry


@dataclass(frozen=True)
class Source:
    name: str
    data: bytes


def _sha256_bytes(b: bytes) -> str:
    return hashlib.sha256(b).hexdigest()


def _read_bytes(p: Path) -> bytes:
    try:
        return p.read_bytes()
    except OSError as e:
        raise InputError(f"sorgente non leggibile: {p}: {e}") from e


def _iter_dir_files(root: Path, *, recursive: bool) -> list[Path]:
    it = root.rglob("*") if recursive else root.iterdir()
    files = [p for p in it if p.is_file()]
    files.sort(key=lambda p: p.relative_to(root).as_posix())
    return files


def collect_sources(paths: Iterable[Path | str], *, recursive: bool = False) -> list[Source]:
    out: list[Source] = []
    seen: set[str] = set()

    def _add(name: str, p: Path) -> None:
        if name in seen:
            raise UsageError(f"nome sorgente duplicato: {name}")
        seen.add(name)
        out.append(Source(name=name, data=_read_bytes(p)))

    for raw in paths:
        p = Path(raw)
        if p.is_file():
            _add(p.name, p)
        elif p.is_dir():
            base = p.resolve().name or "root"
            for child in _iter_dir_files(p, recursive=recursive):
                _add(f"{base}/{child.relative_to(p).as_posix()}", child)
        else:
            raise InputError(f"sorgente non trovata: {p}")

    return out


def concat_sources(sources: Sequence[Source]) -> tuple[bytes, list[SourceEntry]]:
    buf = bytearray()
    entries: list[SourceEntry] = []
    for s in sources:
        entries.append(
            SourceEntry(name=s.name, offset=len(buf), length=len(s.data), sha256=_sha256_bytes(s.data))
        )
        buf += s.data
    return bytes(buf), entries


def safe_relpath(name: str) -> PurePosixPath:
    """Validate an index name before using it as a restore path."""
    rel = PurePosixPath(name)
    if rel.is_absolute() or not rel.parts or any(part in ("", ".", "..") for part in rel.parts):
        raise CorruptPayload(f"nome sorgente non sicuro per il restore: {name!r}")
    return rel

"""File-level compress/decompress.

compress:   paths -> concatenated buffer -> HZP container in a ZIP archive,
            codebook written to its own text file.
decompress: archive + codebook -> concatenated buffer (one output file), or
            every source restored under an output directory (split mode).

The codebook path is always explicit (or derived from the archive path by the
config); nothing is shared between calls. The outputs of one call are
written as a group (all land or none), and every integrity check runs
before the first write.
"""

from __future__ import annotations

import hashlib
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from huffzip.archive import build_archive, read_archive
from huffzip.atomic import atomic_write_bytes, atomic_write_group
from huffzip.config import ConfigV1
from huffzip.core.code_table import CodeTable, codebook_sha256, dump_codebook, read_codebook
from huffzip.engine.container import Engine, unpack_container
from huffzip.errors import CorruptPayload, HashMismatch, UsageError
from huffzip.source_index import SourceIndex
from huffzip.sources import collect_sources, concat_sources, safe_relpath


def _sha256_bytes(b: bytes) -> str:
    return hashlib.sha256(b).hexdigest()


@dataclass(frozen=True)
class CompressStats:
    archive: Path
    codebook: Path
    files: int
    size_in: int
    size_payload: int
    size_archive: int
    distinct_symbols: int

    @property
    def ratio(self) -> float:
        if self.size_in == 0:
            return 0.0
        return self.size_archive / self.size_in

    @property
    def bits_per_symbol(self) -> float:
        if self.size_in == 0:
            return 0.0
        return (self.size_payload * 8) / self.size_in


def resolve_codebook_path(archive: Path, codebook: Path | None, config: ConfigV1 | None) -> Path:
    if codebook is not None:
        return Path(codebook)
    return (config or ConfigV1()).codebook_path_for(Path(archive))


def compress_paths(
    inputs: Iterable[Path | str],
    archive: Path,
    codebook: Path | None = None,
    *,
    config: ConfigV1 | None = None,
) -> CompressStats:
    cfg = config or ConfigV1()
    inputs = list(inputs)
    if not inputs:
        raise UsageError("compress: nessun input")

    archive = Path(archive)
    codebook_path = resolve_codebook_path(archive, codebook, cfg)
    if codebook_path.resolve() == archive.resolve():
        raise UsageError("compress: archivio e codebook devono essere file diversi")

    sources = collect_sources(inputs, recursive=cfg.recursive)
    data, entries = concat_sources(sources)

    eng = Engine.default()
    blob, codes = eng.compress(data)

    index = SourceIndex(
        entry=cfg.entry_name,
        codec=eng.codec.codec_id,
        n_symbols=len(data),
        concat_sha256=_sha256_bytes(data),
        codebook_sha256=codebook_sha256(codes),
        files=entries,
    )

    # everything is built in memory before the first write
    archive_blob = build_archive(blob, index)

    # both land or neither does; a previous codebook is restored on failure
    atomic_write_group({codebook_path: dump_codebook(codes).encode("utf-8"), archive: archive_blob})

    _, payload = unpack_container(blob)
    return CompressStats(
        archive=archive,
        codebook=codebook_path,
        files=len(sources),
        size_in=len(data),
        size_payload=len(payload),
        size_archive=len(archive_blob),
        distinct_symbols=len(codes),
    )


def load_archive_codebook(
    archive: Path, codebook: Path | None = None, *, config: ConfigV1 | None = None
) -> tuple[bytes, SourceIndex, CodeTable]:
    """Read archive + codebook and check that they belong together."""
    blob, index = read_archive(Path(archive))
    codes = read_codebook(resolve_codebook_path(Path(archive), codebook, config))
    if codebook_sha256(codes) != index.codebook_sha256:
        raise HashMismatch("codebook non corrisponde all'archivio (codebook_sha256)")
    return blob, index, codes


def decode_archive(blob: bytes, index: SourceIndex, codes: CodeTable) -> bytes:
    n_symbols, _ = unpack_container(blob)
    if n_symbols != index.n_symbols:
        raise CorruptPayload(f"n_symbols mismatch: container={n_symbols} index={index.n_symbols}")
    data = Engine.default().decompress(blob, codes)
    if _sha256_bytes(data) != index.concat_sha256:
        raise HashMismatch("concat sha256 mismatch (index vs payload decodificato)")
    return data


def split_sources(data: bytes, index: SourceIndex) -> list[tuple[Path, bytes]]:
    out: list[tuple[Path, bytes]] = []
    for e in index.iter_entries():
        rel = safe_relpath(e.name)
        chunk = data[e.offset : e.offset + e.length]
        if len(chunk) != e.length:
            raise CorruptPayload(f"slice fuori range: {e.name}")
        if _sha256_bytes(chunk) != e.sha256:
            raise HashMismatch(f"file hash mismatch: {e.name}")
        out.append((Path(*rel.parts), chunk))
    return out


def decompress_archive(
    archive: Path,
    output: Path,
    codebook: Path | None = None,
    *,
    split: bool = False,
    config: ConfigV1 | None = None,
) -> int:
    """Returns the number of bytes restored."""
    blob, index, codes = load_archive_codebook(archive, codebook, config=config)
    data = decode_archive(blob, index, codes)

    output = Path(output)
    if not split:
        atomic_write_bytes(output, data)
        return len(data)

    if output.exists() and not output.is_dir():
        raise UsageError(f"decompress --split: output non è una directory: {output}")
    atomic_write_group({output / rel: chunk for rel, chunk in split_sources(data, index)})
    return len(data)

"""Verification helpers.

Policy: light by default, ``full=True`` decodes the payload and recomputes
every sha256.

light:
  - archive is a valid ZIP with index + payload entry
  - index schema, payload container header, n_symbols consistency
  - codebook loads, is prefix-free and matches the index codebook_sha256
  - payload size fits the code lengths (n * min_len .. n * max_len bits)
full:
  - everything above, plus decode + concat sha256 + per-source sha256
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from huffzip.config import ConfigV1
from huffzip.engine.container import unpack_container
from huffzip.errors import CorruptPayload
from huffzip.zipper import decode_archive, load_archive_codebook, split_sources


@dataclass(frozen=True)
class VerifyReport:
    archive: Path
    files: int
    n_symbols: int
    distinct_symbols: int
    payload_bytes: int
    full: bool


def _check_payload_size(n_symbols: int, payload: bytes, min_len: int, max_len: int) -> None:
    if n_symbols == 0:
        if payload:
            raise CorruptPayload(f"payload non vuoto ({len(payload)} byte) per 0 simboli")
        return
    lo = (n_symbols * min_len + 7) // 8
    hi = (n_symbols * max_len + 7) // 8
    if not lo <= len(payload) <= hi:
        raise CorruptPayload(f"payload di {len(payload)} byte fuori dal range atteso [{lo}, {hi}]")


def verify_archive(
    archive: Path,
    codebook: Path | None = None,
    *,
    full: bool = False,
    config: ConfigV1 | None = None,
) -> VerifyReport:
    blob, index, codes = load_archive_codebook(Path(archive), codebook, config=config)

    n_symbols, payload = unpack_container(blob)
    if n_symbols != index.n_symbols:
        raise CorruptPayload(f"n_symbols mismatch: container={n_symbols} index={index.n_symbols}")
    if n_symbols > 0 and not codes:
        raise CorruptPayload(f"codebook vuoto per {n_symbols} simboli")

    lengths = [len(c) for c in codes.values()] or [0]
    _check_payload_size(n_symbols, payload, min(lengths), max(lengths))

    if full:
        data = decode_archive(blob, index, codes)
        split_sources(data, index)

    return VerifyReport(
        archive=Path(archive),
        files=len(index.files),
        n_symbols=n_symbols,
        distinct_symbols=len(codes),
        payload_bytes=len(payload),
        full=full,
    )

"""Archive wrapper.

This is *not* a compression format: it is a plain ZIP file used as a
carrier. Layout:

  <entry_name>   payload container (HZP v1), stored as-is
  index.json     SourceIndex (JSON), deflated

The payload is already Huffman-packed, so the ZIP layer does not compress it
again.
"""

from __future__ import annotations

import io
import zipfile
from pathlib import Path
from typing import Final

from huffzip.errors import CorruptPayload, HashMismatch, InputError
from huffzip.source_index import SourceIndex

INDEX_ENTRY: Final[str] = "index.json"

# fixed timestamp: identical inputs give byte-identical archives
_ZIP_DATE_TIME = (1980, 1, 1, 0, 0, 0)


def _zip_info(name: str, compress_type: int) -> zipfile.ZipInfo:
    zi = zipfile.ZipInfo(name, date_time=_ZIP_DATE_TIME)
    zi.compress_type = compress_type
    zi.external_attr = 0o644 << 16
    return zi


def build_archive(container_blob: bytes, index: SourceIndex) -> bytes:
    if index.entry == INDEX_ENTRY:
        raise ValueError(f"entry name riservato: {INDEX_ENTRY}")
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        zf.writestr(_zip_info(index.entry, zipfile.ZIP_STORED), container_blob)
        zf.writestr(_zip_info(INDEX_ENTRY, zipfile.ZIP_DEFLATED), index.serialize())
    return buf.getvalue()


def _read_entry(zf: zipfile.ZipFile, name: str) -> bytes:
    try:
        return zf.read(name)
    except KeyError as e:
        raise CorruptPayload(f"archivio senza entry '{name}'") from e
    except zipfile.BadZipFile as e:
        if "CRC" in str(e):
            raise HashMismatch(f"archivio: CRC mismatch per '{name}'") from e
        raise CorruptPayload(f"archivio: entry '{name}' illeggibile: {e}") from e


def read_archive(path: Path) -> tuple[bytes, SourceIndex]:
    """archive -> (container blob, index)"""
    p = Path(path)
    if not p.is_file():
        raise InputError(f"archivio non trovato: {p}")
    try:
        with zipfile.ZipFile(p, "r") as zf:
            index = SourceIndex.deserialize(_read_entry(zf, INDEX_ENTRY))
            blob = _read_entry(zf, index.entry)
    except zipfile.BadZipFile as e:
        raise CorruptPayload(f"archivio ZIP non valido: {p}: {e}") from e
    except OSError as e:
        raise InputError(f"archivio non leggibile: {p}: {e}") from e
    return blob, index

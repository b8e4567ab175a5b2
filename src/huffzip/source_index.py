from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Final, Iterable

from huffzip.errors import CorruptPayload, UnsupportedVersion

SPEC_INDEX_V1: Final[str] = "huffzip.source_index.v1"


@dataclass(frozen=True)
class SourceEntry:
    name: str
    offset: int
    length: int
    sha256: str

    @staticmethod
    def from_dict(raw: Any) -> "SourceEntry":
        if not isinstance(raw, dict):
            raise CorruptPayload(f"index entry invalida (non dict): {raw}")

        name = raw.get("name")
        off = raw.get("offset")
        ln = raw.get("length")
        sha = raw.get("sha256")

        if not isinstance(name, str) or not name:
            raise CorruptPayload(f"index entry invalida (name): {raw}")

        try:
            off_i = int(off)
            ln_i = int(ln)
        except Exception as e:
            raise CorruptPayload(f"index entry invalida (offset/length): {raw}") from e

        if off_i < 0 or ln_i < 0:
            raise CorruptPayload(f"index entry invalida (offset/length negative): {raw}")

        if not isinstance(sha, str) or not sha:
            raise CorruptPayload(f"index entry invalida (sha256): {raw}")

        return SourceEntry(name=name, offset=off_i, length=ln_i, sha256=sha)

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "offset": self.offset, "length": self.length, "sha256": self.sha256}


@dataclass
class SourceIndex:
    """
    Index of an archive: where each source sits inside the concatenated buffer.

    Stable JSON schema:
      {
        "spec": "huffzip.source_index.v1",
        "entry": "<archive entry holding the payload container>",
        "codec": "huffman",
        "n_symbols": <int>,
        "count": <int>,
        "files": [{"name","offset","length","sha256"}, ...],
        "concat_sha256": "<hex>",
        "codebook_sha256": "<hex>"
      }
    """

    entry: str
    codec: str
    n_symbols: int
    concat_sha256: str
    codebook_sha256: str
    files: list[SourceEntry]

    def iter_entries(self) -> Iterable[SourceEntry]:
        return iter(self.files)

    # --- Serialization ---

    def to_dict(self) -> dict[str, Any]:
        # Keep key order stable (human-friendly diffs)
        return {
            "spec": SPEC_INDEX_V1,
            "entry": self.entry,
            "codec": self.codec,
            "n_symbols": self.n_symbols,
            "count": len(self.files),
            "files": [e.to_dict() for e in self.files],
            "concat_sha256": self.concat_sha256,
            "codebook_sha256": self.codebook_sha256,
        }

    def serialize(self, *, indent: int = 2) -> bytes:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=indent).encode("utf-8")

    @classmethod
    def deserialize(cls, data: bytes) -> "SourceIndex":
        try:
            raw = json.loads(data.decode("utf-8"))
        except Exception as e:
            raise CorruptPayload(f"index JSON invalido: {e}") from e
        return cls.from_dict(raw)

    @classmethod
    def from_dict(cls, raw: Any) -> "SourceIndex":
        if not isinstance(raw, dict):
            raise CorruptPayload("index invalido (non dict)")

        spec = raw.get("spec")
        if not isinstance(spec, str) or not spec.startswith("huffzip.source_index."):
            raise CorruptPayload("index spec invalida")
        if spec != SPEC_INDEX_V1:
            raise UnsupportedVersion(f"index spec non supportata: {spec}")

        entry = raw.get("entry")
        codec = raw.get("codec")
        n_symbols = raw.get("n_symbols")
        concat_sha256 = raw.get("concat_sha256")
        codebook_sha256 = raw.get("codebook_sha256")
        files_raw = raw.get("files")

        if not isinstance(entry, str) or not entry:
            raise CorruptPayload("index invalido (entry)")
        if not isinstance(codec, str) or not codec:
            raise CorruptPayload("index invalido (codec)")
        if not isinstance(n_symbols, int) or isinstance(n_symbols, bool) or n_symbols < 0:
            raise CorruptPayload("index invalido (n_symbols)")
        if not isinstance(concat_sha256, str) or not concat_sha256:
            raise CorruptPayload("index invalido (concat_sha256)")
        if not isinstance(codebook_sha256, str) or not codebook_sha256:
            raise CorruptPayload("index invalido (codebook_sha256)")
        if not isinstance(files_raw, list):
            raise CorruptPayload("index invalido (files)")

        files = [SourceEntry.from_dict(x) for x in files_raw]

        if "count" in raw:
            try:
                cnt = int(raw.get("count"))
            except Exception as e:
                raise CorruptPayload("index invalido (count non int)") from e
            if cnt != len(files):
                raise CorruptPayload("index invalido (count mismatch)")

        total = sum(e.length for e in files)
        if total != n_symbols:
            raise CorruptPayload(f"index invalido (somma lunghezze {total} != n_symbols {n_symbols})")

        return cls(
            entry=entry,
            codec=codec,
            n_symbols=n_symbols,
            concat_sha256=concat_sha256,
            codebook_sha256=codebook_sha256,
            files=files,
        )

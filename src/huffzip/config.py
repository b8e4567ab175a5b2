"""Config (v1) for huffzip.

Goal: make compress runs reproducible and portable (CLI, scripts, CI).

This module intentionally stays *small* and strict:
  - JSON only
  - explicit schema id
  - unknown keys are rejected
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from huffzip.archive import INDEX_ENTRY
from huffzip.errors import UsageError

CONFIG_ID_V1 = "huffzip.config.v1"

DEFAULT_ENTRY_NAME = "compressed.bin"
DEFAULT_CODEBOOK_SUFFIX = ".codebook.txt"
DIR_MODES = ("flat", "recursive")


class ConfigError(UsageError):
    pass


def _load_json_arg(config_arg: str) -> dict[str, Any]:
    s = config_arg.strip()
    if not s:
        raise ConfigError("config: argomento vuoto")

    if s.startswith("@"):
        p = Path(s[1:]).expanduser()
        if not p.exists() or not p.is_file():
            raise ConfigError(f"config: file non trovato: {p}")
        try:
            raw = p.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigError(f"config: file non leggibile come UTF-8: {p}: {e}") from e
        try:
            obj = json.loads(raw)
        except Exception as e:
            raise ConfigError(f"config: JSON non valido in {p}: {e}") from e
        if not isinstance(obj, dict):
            raise ConfigError(f"config: il JSON in {p} deve essere un oggetto")
        return obj

    try:
        obj = json.loads(s)
    except Exception as e:
        raise ConfigError(f"config: JSON inline non valido: {e}") from e
    if not isinstance(obj, dict):
        raise ConfigError("config: il JSON inline deve essere un oggetto")
    return obj


def _optional_str(obj: dict[str, Any], key: str, default: str) -> str:
    if key not in obj:
        return default
    v = obj.get(key)
    if not isinstance(v, str) or not v.strip():
        raise ConfigError(f"config: campo '{key}' deve essere una stringa non vuota")
    return v.strip()


@dataclass(frozen=True)
class ConfigV1:
    entry_name: str = DEFAULT_ENTRY_NAME
    codebook_suffix: str = DEFAULT_CODEBOOK_SUFFIX
    dir_mode: str = "flat"

    @property
    def recursive(self) -> bool:
        return self.dir_mode == "recursive"

    def codebook_path_for(self, archive: Path) -> Path:
        """Default codebook location: next to the archive."""
        a = Path(archive)
        return a.with_name(a.name + self.codebook_suffix)


def load_config(config_arg: str | None) -> ConfigV1:
    """Load and validate a config.

    config_arg:
      - None -> defaults
      - '@file.json'
      - inline JSON object
    """
    if config_arg is None:
        return ConfigV1()

    obj = _load_json_arg(config_arg)

    allowed = {"spec", "entry_name", "codebook_suffix", "dir_mode"}
    extra = sorted(set(obj.keys()) - allowed)
    if extra:
        raise ConfigError(f"config: chiavi non supportate: {', '.join(extra)}")

    spec_id = obj.get("spec")
    if spec_id != CONFIG_ID_V1:
        raise ConfigError(f"config: spec non supportata: {spec_id!r} (attesa {CONFIG_ID_V1!r})")

    entry_name = _optional_str(obj, "entry_name", DEFAULT_ENTRY_NAME)
    if "/" in entry_name or "\\" in entry_name or entry_name == INDEX_ENTRY:
        raise ConfigError(f"config: 'entry_name' non valido: {entry_name!r}")

    codebook_suffix = _optional_str(obj, "codebook_suffix", DEFAULT_CODEBOOK_SUFFIX)
    if "/" in codebook_suffix or "\\" in codebook_suffix:
        raise ConfigError(f"config: 'codebook_suffix' non valido: {codebook_suffix!r}")

    dir_mode = _optional_str(obj, "dir_mode", "flat")
    if dir_mode not in DIR_MODES:
        raise ConfigError(f"config: 'dir_mode' deve essere uno di {', '.join(DIR_MODES)}")

    return ConfigV1(entry_name=entry_name, codebook_suffix=codebook_suffix, dir_mode=dir_mode)

"""Typed errors for huffzip.

Single source of truth for exit codes lives here.

Policy:
- Errors are small and boring.
- The CLI maps errors to stable exit codes (see EXIT_* constants).
- docs/exit_codes.md is generated from this module (scripts/gen_exit_codes_md.py).
"""

from __future__ import annotations

from dataclasses import dataclass

# -------------------------
# Exit codes (single source)
# -------------------------

EXIT_OK = 0
EXIT_USAGE = 2
EXIT_GENERIC = 10
EXIT_UNSUPPORTED_VERSION = 11
EXIT_INPUT = 12
EXIT_HASH_MISMATCH = 13
EXIT_CODEBOOK = 14


@dataclass(frozen=True, slots=True)
class ExitCodeInfo:
    code: int
    name: str
    description: str


EXIT_CODES: tuple[ExitCodeInfo, ...] = (
    ExitCodeInfo(EXIT_OK, "OK", "Success"),
    ExitCodeInfo(EXIT_USAGE, "USAGE", "Usage/config error (invalid args, invalid config, etc.)"),
    ExitCodeInfo(EXIT_GENERIC, "GENERIC", "Generic failure (corrupt payload, unexpected error, etc.)"),
    ExitCodeInfo(EXIT_UNSUPPORTED_VERSION, "UNSUPPORTED_VERSION", "Unsupported payload/archive version"),
    ExitCodeInfo(EXIT_INPUT, "INPUT", "Unreadable input (missing source path, missing codebook)"),
    ExitCodeInfo(EXIT_HASH_MISMATCH, "HASH_MISMATCH", "Integrity failure (sha256 mismatch, codebook swapped)"),
    ExitCodeInfo(EXIT_CODEBOOK, "CODEBOOK", "Invalid codebook or byte without a code"),
)

_EXIT_CODE_BY_CODE: dict[int, ExitCodeInfo] = {e.code: e for e in EXIT_CODES}


def exit_code_info(code: int) -> ExitCodeInfo | None:
    return _EXIT_CODE_BY_CODE.get(int(code))


def render_exit_codes_markdown() -> str:
    """Render docs/exit_codes.md content."""
    lines: list[str] = []
    lines.append("# Exit codes\n")
    lines.append("> GENERATED FILE: do not edit manually.\n")
    lines.append("> Source of truth: `src/huffzip/errors.py` (EXIT_CODES).\n")
    lines.append("> Regenerate: `python scripts/gen_exit_codes_md.py`.\n\n")
    lines.append("These are the CLI exit codes you can rely on.\n\n")
    lines.append("| Code | Name | Meaning |\n")
    lines.append("|---:|---|---|\n")
    for e in sorted(EXIT_CODES, key=lambda x: x.code):
        lines.append(f"| {e.code} | `{e.name}` | {e.description} |\n")
    lines.append("\n## Notes\n")
    lines.append("- Every internal error extends `HuffzipError` and carries an `exit_code`.\n")
    lines.append("- `--debug` re-raises errors to show full stack traces.\n")
    return "".join(lines)


# ---------------
# Typed exceptions
# ---------------


class HuffzipError(Exception):
    """Base error for huffzip."""

    exit_code: int = EXIT_GENERIC


class UsageError(HuffzipError):
    exit_code = EXIT_USAGE


class InputError(HuffzipError):
    """A source path or a codebook file cannot be read."""

    exit_code = EXIT_INPUT


class CodebookError(HuffzipError):
    """The codebook is malformed or not prefix-free."""

    exit_code = EXIT_CODEBOOK


class MissingCode(CodebookError):
    """A byte to encode has no entry in the codebook."""

    def __init__(self, symbol: int):
        super().__init__(f"codebook: nessun codice per il byte {symbol}")
        self.symbol = symbol


class CorruptPayload(HuffzipError):
    exit_code = EXIT_GENERIC


class BadMagic(CorruptPayload):
    pass


class UnsupportedVersion(HuffzipError):
    exit_code = EXIT_UNSUPPORTED_VERSION


class HashMismatch(HuffzipError):
    exit_code = EXIT_HASH_MISMATCH

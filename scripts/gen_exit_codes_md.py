#!/usr/bin/env python3
"""Render docs/exit_codes.md from huffzip.errors.EXIT_CODES.

Usage:
  python scripts/gen_exit_codes_md.py           # rewrite the doc
  python scripts/gen_exit_codes_md.py --check   # exit 1 if the doc is stale (CI)
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Render the huffzip exit-code table")
    ap.add_argument("--check", action="store_true", help="Compare only, do not write")
    ns = ap.parse_args(argv)

    repo = Path(__file__).resolve().parents[1]
    sys.path.insert(0, str(repo / "src"))

    from huffzip.errors import render_exit_codes_markdown  # noqa: E402

    doc = repo / "docs" / "exit_codes.md"
    text = render_exit_codes_markdown()

    if ns.check:
        current = doc.read_text(encoding="utf-8") if doc.is_file() else ""
        if current != text:
            print(f"[huffzip] {doc} is stale: run scripts/gen_exit_codes_md.py", file=sys.stderr)
            return 1
        print(f"[huffzip] {doc} up to date")
        return 0

    doc.parent.mkdir(parents=True, exist_ok=True)
    doc.write_text(text, encoding="utf-8")
    print(f"[huffzip] wrote {doc}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

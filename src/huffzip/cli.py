"""huffzip CLI.

This is the stable CLI entrypoint (console-script: ``huffzip``).

Library code never prints: the CLI reports errors on stderr with a
``[huffzip]`` prefix and maps them to the exit codes of huffzip.errors.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from huffzip.config import ConfigV1, load_config
from huffzip.errors import EXIT_GENERIC, HuffzipError


def _add_common_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--debug", action="store_true", help="Show stack traces on errors")


def _add_codebook_args(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--codebook",
        type=Path,
        default=None,
        help="Codebook file (default: <archive> + codebook_suffix from config)",
    )
    p.add_argument(
        "--config",
        default=None,
        help="Config JSON (huffzip.config.v1). Use '@file.json' to load from file, or pass JSON inline.",
    )


def _load_cfg(ns: argparse.Namespace) -> ConfigV1:
    return load_config(ns.config)


# -------------------
# Statistiche
# -------------------
def print_stats(stats, label: str) -> None:
    print(f"=== huffzip stats ({label}) ===")
    print(f"Sorgenti       : {stats.files} file ({stats.size_in} byte)")
    print(f"Archivio       : {stats.archive} ({stats.size_archive} byte)")
    print(f"Codebook       : {stats.codebook} ({stats.distinct_symbols} simboli)")

    if stats.size_in == 0:
        print("Input vuoto: niente statistiche sensate")
        print("===============================")
        return

    print(f"Rapporto       : {stats.ratio:.3f} (1.0 = nessuna compressione)")
    print(f"Bit/simbolo    : {stats.bits_per_symbol:.3f} (8.0 = non compresso)")
    print("===============================")


def _cmd_compress(ns: argparse.Namespace) -> int:
    from huffzip.zipper import compress_paths

    cfg = _load_cfg(ns)
    stats = compress_paths(ns.inputs, ns.output, ns.codebook, config=cfg)
    if not ns.quiet:
        print_stats(stats, "compress")
    return 0


def _cmd_decompress(ns: argparse.Namespace) -> int:
    from huffzip.zipper import decompress_archive

    cfg = _load_cfg(ns)
    n = decompress_archive(ns.archive, ns.output, ns.codebook, split=bool(ns.split), config=cfg)
    if not ns.quiet:
        print(f"decompress: {n} byte -> {ns.output}")
    return 0


def _cmd_verify(ns: argparse.Namespace) -> int:
    from huffzip.verify import verify_archive

    cfg = _load_cfg(ns)
    verify_archive(ns.archive, ns.codebook, full=bool(ns.full), config=cfg)
    print("OK")
    return 0


def _cmd_codebook_show(ns: argparse.Namespace) -> int:
    from huffzip.core.code_table import read_codebook
    from huffzip.zipper import resolve_codebook_path

    cfg = _load_cfg(ns)
    codes = read_codebook(resolve_codebook_path(ns.archive, ns.codebook, cfg))
    for sym, code in sorted(codes.items(), key=lambda kv: (len(kv[1]), kv[0])):
        ch = chr(sym) if 0x21 <= sym <= 0x7E else "."
        print(f"{sym:3d}  {ch}  {len(code):3d}  {code}")
    return 0


def _cmd_config_validate(ns: argparse.Namespace) -> int:
    # load is the validation
    load_config(str(ns.config))
    print("OK")
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="huffzip", description="Huffman file zipper")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_c = sub.add_parser("compress", help="Compress files/directories into one archive")
    p_c.add_argument("inputs", nargs="+", type=Path, help="Files or directories (one level deep)")
    p_c.add_argument("-o", "--output", type=Path, required=True, help="Output archive (.zip)")
    p_c.add_argument("--quiet", action="store_true", help="Do not print stats")
    _add_codebook_args(p_c)
    _add_common_args(p_c)

    p_d = sub.add_parser("decompress", help="Decompress an archive")
    p_d.add_argument("archive", type=Path)
    p_d.add_argument("output", type=Path, help="Output file (or directory with --split)")
    p_d.add_argument("--split", action="store_true", help="Restore each source file under OUTPUT")
    p_d.add_argument("--quiet", action="store_true", help="Do not print a summary")
    _add_codebook_args(p_d)
    _add_common_args(p_d)

    p_v = sub.add_parser("verify", help="Verify an archive against its codebook")
    p_v.add_argument("archive", type=Path)
    p_v.add_argument("--full", action="store_true", help="Decode and recompute every sha256")
    _add_codebook_args(p_v)
    _add_common_args(p_v)

    p_cb = sub.add_parser("codebook", help="Codebook tools")
    sub_cb = p_cb.add_subparsers(dest="codebook_cmd", required=True)
    p_cbs = sub_cb.add_parser("show", help="Print the codebook of an archive (shortest codes first)")
    p_cbs.add_argument("archive", type=Path)
    _add_codebook_args(p_cbs)
    _add_common_args(p_cbs)

    p_cv = sub.add_parser("config-validate", help="Validate a config (v1)")
    p_cv.add_argument("config", help="Config JSON (@file.json or inline JSON)")
    _add_common_args(p_cv)

    return p


def main(argv: list[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    p = build_parser()
    ns = p.parse_args(argv)

    try:
        if ns.cmd == "compress":
            return _cmd_compress(ns)
        if ns.cmd == "decompress":
            return _cmd_decompress(ns)
        if ns.cmd == "verify":
            return _cmd_verify(ns)
        if ns.cmd == "codebook":
            if ns.codebook_cmd == "show":
                return _cmd_codebook_show(ns)
            raise AssertionError("unreachable")
        if ns.cmd == "config-validate":
            return _cmd_config_validate(ns)
        raise AssertionError("unreachable")

    except SystemExit:
        raise
    except HuffzipError as e:
        if getattr(ns, "debug", False):
            raise
        print(f"[huffzip] {e}", file=sys.stderr)
        return int(getattr(e, "exit_code", EXIT_GENERIC) or EXIT_GENERIC)
    except Exception as e:
        if getattr(ns, "debug", False):
            raise
        print(f"[huffzip] error: {e}", file=sys.stderr)
        return EXIT_GENERIC


if __name__ == "__main__":
    raise SystemExit(main())

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path


def _stage(p: Path, data: bytes) -> Path:
    p.parent.mkdir(parents=True, exist_ok=True)
    tmp = p.with_name(f".{p.name}.{os.getpid()}.tmp")
    try:
        with tmp.open("wb") as fp:
            fp.write(data)
            fp.flush()
            os.fsync(fp.fileno())
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise
    return tmp


def _missing_dirs(p: Path) -> list[Path]:
    out: list[Path] = []
    d = p.parent
    while not d.exists():
        out.append(d)
        d = d.parent
    return out


def atomic_write_bytes(path: Path, data: bytes) -> None:
    """Write ``data`` to a sibling temp file, then rename it over ``path``.

    Either the whole file lands or nothing does; a failed write never leaves a
    truncated output behind.
    """
    p = Path(path)
    tmp = _stage(p, data)
    try:
        os.replace(tmp, p)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise


def atomic_write_group(files: Mapping[Path, bytes]) -> None:
    """Write several files as one unit.

    Every file is staged next to its target first. Targets are then swapped
    in one by one; a file being replaced is kept as a backup until the whole
    group has landed. On failure the group is rolled back: new files are
    removed, backups restored, and directories created here (if left empty)
    removed again.
    """
    items = [(Path(p), data) for p, data in files.items()]
    created: set[Path] = set()
    for p, _ in items:
        created.update(_missing_dirs(p))

    staged: list[tuple[Path, Path]] = []
    backups: list[tuple[Path, Path]] = []
    placed: list[Path] = []
    try:
        for p, data in items:
            staged.append((p, _stage(p, data)))

        for p, tmp in staged:
            if p.is_file():
                bak = p.with_name(f".{p.name}.{os.getpid()}.bak")
                os.replace(p, bak)
                backups.append((p, bak))
            os.replace(tmp, p)
            placed.append(p)
    except BaseException:
        for p in reversed(placed):
            p.unlink(missing_ok=True)
        for p, bak in reversed(backups):
            os.replace(bak, p)
        for _, tmp in staged:
            tmp.unlink(missing_ok=True)
        # deepest first
        for d in sorted(created, key=lambda x: len(x.parts), reverse=True):
            if d.is_dir() and not any(d.iterdir()):
                d.rmdir()
        raise

    for _, bak in backups:
        bak.unlink(missing_ok=True)

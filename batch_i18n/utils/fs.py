# -*- coding: utf-8 -*-
"""Filesystem helpers: discovery with ignore patterns, atomic writes, backups and diffs."""
from __future__ import annotations

import difflib
import fnmatch
import hashlib
import logging
import os
import pathlib
import tempfile
from typing import Iterable, List, Optional

logger = logging.getLogger(__name__)


# ── Discovery ────────────────────────────────────────────────────────────────

def should_ignore(path: pathlib.Path, patterns: Iterable[str], root: Optional[pathlib.Path] = None) -> bool:
    """Return True when ``path`` matches one of the ignore ``patterns``.

    A pattern without wildcards matches a file/dir name or any segment of the relative path
    (``node_modules`` ignores ``a/node_modules/b.ts``). A wildcard pattern is matched with
    fnmatch against the name and against the relative POSIX path (``*.d.ts``, ``test/*``).
    """
    name = path.name
    if root is not None:
        try:
            rel = path.relative_to(root)
        except ValueError:
            rel = path
    else:
        rel = path
    rel_posix = rel.as_posix()
    parts = rel.parts
    for pattern in patterns:
        if not pattern:
            continue
        if any(ch in pattern for ch in "*?["):
            if fnmatch.fnmatch(name, pattern) or fnmatch.fnmatch(rel_posix, pattern):
                return True
            continue
        pat = pattern.strip("/")
        if name == pat or pat in parts:
            return True
        if "/" in pat and (rel_posix == pat or rel_posix.startswith(pat + "/") or f"/{pat}/" in f"/{rel_posix}/"):
            return True
    return False


def discover_files(
    root: pathlib.Path,
    extensions: Iterable[str],
    ignore_patterns: Iterable[str] = (),
) -> List[pathlib.Path]:
    """Walk ``root`` and return the sorted list of files with one of ``extensions``.

    Ignored directories are pruned and never descended into.
    """
    exts = {e if e.startswith(".") else f".{e}" for e in extensions}
    patterns = list(ignore_patterns)
    found: List[pathlib.Path] = []
    for dirpath, dirnames, filenames in os.walk(root):
        current = pathlib.Path(dirpath)
        dirnames[:] = sorted(d for d in dirnames if not should_ignore(current / d, patterns, root))
        for fname in filenames:
            p = current / fname
            if p.suffix not in exts:
                continue
            if should_ignore(p, patterns, root):
                continue
            found.append(p)
    found.sort()
    return found


# ── Writes ───────────────────────────────────────────────────────────────────

def atomic_write(path: pathlib.Path, data: str) -> None:
    """Atomically write ``data`` to ``path``.

    This function writes to a temporary file in the same directory, fsyncs,
    then replaces the target. If the target exists, its permissions are
    preserved when possible.
    """
    tmp_dir = path.parent
    tmp_dir.mkdir(parents=True, exist_ok=True)
    orig_mode = None
    try:
        orig_mode = path.stat().st_mode & 0o777
    except OSError:
        orig_mode = None

    tmp_name = None
    try:
        with tempfile.NamedTemporaryFile("w", delete=False, dir=tmp_dir, encoding="utf-8", newline="") as tf:
            tmp_name = tf.name
            tf.write(data)
            tf.flush()
            os.fsync(tf.fileno())
        os.replace(tmp_name, str(path))
        tmp_name = None
        if orig_mode is not None:
            try:
                os.chmod(str(path), orig_mode)
            except OSError:
                logger.debug("Failed to chmod %s", path)
    finally:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)


def backup_file(path: pathlib.Path, text: str) -> pathlib.Path:
    """Write ``text`` next to ``path`` as ``<name>.<sha1[:8]>.bak`` and return the backup path."""
    backup_name = f"{path.name}.{hashlib.sha1(text.encode('utf-8')).hexdigest()[:8]}.bak"
    backup_path = path.with_name(backup_name)
    if not backup_path.exists():
        atomic_write(backup_path, text)
    return backup_path


def unified_diff(a: str, b: str, path: pathlib.Path) -> str:
    return "".join(
        difflib.unified_diff(
            a.splitlines(keepends=True),
            b.splitlines(keepends=True),
            fromfile=f"a/{path}",
            tofile=f"b/{path}",
        )
    )

# -*- coding: utf-8 -*-
"""Wire the lookup facility into a script: import statement and instance declaration.

Both insertions are idempotent: nothing is added when the script already imports the module or
already creates the instance.
"""
from __future__ import annotations

import re
from typing import List

from batch_i18n.engine.normalize import normalize

_IMPORT_DONE_RE = re.compile(r"""from\s*['"][^'"]+['"]|^import\s+['"][^'"]+['"]|;\s*$""")
_MODULE_RE = re.compile(r"""from\s*['"]([^'"]+)['"]""")
_CALLEE_RE = re.compile(r"=\s*([\w$.]+)\s*\(")
_GENERIC_I18N_IMPORT_RE = re.compile(r"import.*i18n.*from")


def _is_comment_line(stripped: str) -> bool:
    return stripped.startswith("//") or stripped.startswith("/*") or stripped.startswith("*")


def find_import_end(lines: List[str]) -> int:
    """Index of the last line of the leading import section, or -1 when there is none.

    Multi-line ``import {`` blocks count up to the line that closes them.
    """
    last = -1
    in_import = False
    for i, line in enumerate(lines):
        stripped = line.strip()
        if not in_import and _is_comment_line(stripped):
            continue
        if not in_import and re.match(r"import\b", stripped):
            last = i
            in_import = not _IMPORT_DONE_RE.search(stripped)
        elif in_import:
            last = i
            if _IMPORT_DONE_RE.search(stripped):
                in_import = False
        elif stripped and last >= 0:
            break
    return last


def _first_code_line(lines: List[str]) -> int:
    for i, line in enumerate(lines):
        stripped = line.strip()
        if stripped and not _is_comment_line(stripped):
            return i
    return len(lines)


def has_import(text: str, import_statement: str) -> bool:
    """True when ``text`` already imports from the module named in ``import_statement``."""
    clean = normalize(text)
    m = _MODULE_RE.search(import_statement)
    if m is None:
        return import_statement.strip() in clean
    module = re.escape(m.group(1))
    return bool(re.search(rf"""import\b[^;]*?from\s*['"]{module}['"]""", clean))


def has_instance(text: str, instance_statement: str) -> bool:
    """True when ``text`` already runs the call of ``instance_statement`` (e.g. ``useI18n()``)."""
    clean = normalize(text)
    m = _CALLEE_RE.search(instance_statement)
    if m is None:
        compact = re.sub(r"\s+", "", instance_statement.rstrip("; \n"))
        return compact in re.sub(r"\s+", "", clean)
    callee = re.escape(m.group(1))
    for line in clean.split("\n"):
        if line.strip().startswith("import"):
            continue
        if re.search(rf"(?<![\w$.]){callee}\s*\(", line):
            return True
    return False


def insert_import(text: str, import_statement: str) -> str:
    """Insert ``import_statement`` after the leading import section (or before the first code line)."""
    lines = text.split("\n")
    last = find_import_end(lines)
    if last >= 0:
        lines.insert(last + 1, import_statement)
    else:
        lines.insert(_first_code_line(lines), import_statement)
    return "\n".join(lines)


def inject_vue_script(script: str, import_statement: str, instance_statement: str) -> str:
    """Add the import and the instance declaration a ``<script>`` block needs, if missing."""
    lines = script.split("\n")
    need_import = bool(import_statement) and not has_import(script, import_statement)
    need_instance = bool(instance_statement) and not has_instance(script, instance_statement)
    if not need_import and not need_instance:
        return script

    last = find_import_end(lines)
    if need_import:
        if last >= 0:
            last += 1
            lines.insert(last, import_statement)
        else:
            last = _first_code_line(lines)
            lines.insert(last, import_statement)

    if need_instance:
        at = last + 1
        while at < len(lines) and not lines[at].strip():
            at += 1
        if at >= len(lines):
            lines[last + 1:last + 1] = ["", instance_statement]
        elif at == last + 1:
            lines[at:at] = ["", instance_statement, ""]
        else:
            lines[at:at] = [instance_statement, ""]
    return "\n".join(lines)


def inject_script_import(text: str, import_statement: str) -> str:
    """Add ``import_statement`` to a standalone TS/JS module unless an i18n import is present."""
    if not import_statement:
        return text
    clean = normalize(text)
    if has_import(text, import_statement) or _GENERIC_I18N_IMPORT_RE.search(clean):
        return text
    return insert_import(text, import_statement)

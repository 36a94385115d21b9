# -*- coding: utf-8 -*-
"""Key→text mapping files: read, write, merge, diff, quality checks and format conversions.

A mapping is a flat JSON object whose keys and values are strings. Insertion order is kept
everywhere; it is the order entries were first registered.
"""
from __future__ import annotations

import dataclasses
import json
import logging
import pathlib
import re
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from batch_i18n.engine.classify import TARGET_RE
from batch_i18n.engine.normalize import normalize
from batch_i18n.errors import MappingFileError
from batch_i18n.utils.fs import atomic_write

logger = logging.getLogger(__name__)

Mapping = Dict[str, str]


# ── Read / write ─────────────────────────────────────────────────────────────

def read_mapping(path) -> Mapping:
    p = pathlib.Path(path)
    if not p.is_file():
        raise MappingFileError(f"File not found: {p}", path=str(p))
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, ValueError) as e:
        raise MappingFileError(f"Cannot read {p}: {e}", path=str(p)) from e
    if not isinstance(data, dict):
        raise MappingFileError(f"{p} does not hold a JSON object", path=str(p))
    bad = [k for k, v in data.items() if not isinstance(v, str)]
    if bad:
        raise MappingFileError(f"{p}: non-string value for key {bad[0]!r}", path=str(p))
    return data


def dump_mapping(data: Mapping) -> str:
    return json.dumps(data, ensure_ascii=False, indent=2)


def write_mapping(path, data: Mapping, *, sort: bool = False) -> pathlib.Path:
    """Write ``data`` as 2-space indented UTF-8 JSON, creating parent directories."""
    p = pathlib.Path(path)
    if sort:
        data = {k: data[k] for k in sorted(data)}
    p.parent.mkdir(parents=True, exist_ok=True)
    atomic_write(p, dump_mapping(data))
    logger.info("Wrote %d entries to %s", len(data), p)
    return p


# ── Merge ────────────────────────────────────────────────────────────────────

@dataclasses.dataclass(frozen=True)
class MergeConflict:
    key: str
    old_value: str
    new_value: str
    source: str


@dataclasses.dataclass
class MergeResult:
    merged: Mapping
    conflicts: List[MergeConflict]
    files_processed: int

    @property
    def total_keys(self) -> int:
        return len(self.merged)


def merge_mappings(sources: Iterable[Tuple[str, Mapping]], overwrite: bool = False) -> MergeResult:
    """Merge ``(name, mapping)`` pairs in order.

    A key seen again with a different value is a conflict; the first value is kept unless
    ``overwrite`` is set, in which case the later one wins. Equal re-definitions are silent.
    """
    merged: Mapping = {}
    conflicts: List[MergeConflict] = []
    count = 0
    for name, data in sources:
        count += 1
        for key, value in data.items():
            if key in merged and merged[key] != value:
                conflicts.append(MergeConflict(key, merged[key], value, name))
                if overwrite:
                    merged[key] = value
            elif key not in merged:
                merged[key] = value
    return MergeResult(merged, conflicts, count)


def matching_files(folder, pattern: str = "*.json", exclude: Sequence[pathlib.Path] = ()) -> List[pathlib.Path]:
    """Sorted files of ``folder`` (not recursive) whose name matches ``pattern``."""
    root = pathlib.Path(folder)
    skip = {pathlib.Path(e).resolve() for e in exclude}
    return sorted(p for p in root.glob(pattern) if p.is_file() and p.resolve() not in skip)


# ── Diff ─────────────────────────────────────────────────────────────────────

@dataclasses.dataclass
class DiffResult:
    result: Mapping
    removed: List[str]
    kept: List[str]
    first_total: int
    second_total: int


def diff_mappings(first: Mapping, second: Mapping, compare_value: bool = False) -> DiffResult:
    """Entries of ``first`` that ``second`` does not already have.

    By key only, or by key and value when ``compare_value`` is set.
    """
    result: Mapping = {}
    removed: List[str] = []
    kept: List[str] = []
    for key, value in first.items():
        present = key in second and (not compare_value or second[key] == value)
        if present:
            removed.append(key)
        else:
            result[key] = value
            kept.append(key)
    return DiffResult(result, removed, kept, len(first), len(second))


def diff_report(diff: DiffResult, first: str, second: str, output: str, compare_value: bool) -> str:
    rule = "=" * 60
    lines = [
        rule,
        "JSON diff report",
        rule,
        "",
        f"Main file:     {first}",
        f"Excluded file: {second}",
        f"Output file:   {output}",
        f"Compare mode:  {'Key + Value' if compare_value else 'Key Only'}",
        "",
        "Statistics:",
        f"  JSON1 total: {diff.first_total}",
        f"  JSON2 total: {diff.second_total}",
        f"  Removed:     {len(diff.removed)}",
        f"  Kept:        {len(diff.kept)}",
        "",
        "Removed keys:",
    ]
    lines.extend(f"  - {key}" for key in diff.removed)
    lines.extend(["", rule])
    return "\n".join(lines)


# ── Translation checks ───────────────────────────────────────────────────────

_CJK_RE = TARGET_RE
# characters whose simplified and traditional forms differ, common in UI text
_SIMPLIFIED_ONLY_RE = re.compile(r"[国际化处理配置文件夹路径输出模板脚本标签选项显示帮助信息]")
_TRADITIONAL_ONLY_RE = re.compile(r"[繁體]")
_ENTRY_RE = re.compile(r'"([^"]+)":\s*"([^"]*(?:\\.[^"]*)*)"')


@dataclasses.dataclass(frozen=True)
class CheckRule:
    message: str
    pattern: re.Pattern

    def flags(self, value: str) -> bool:
        return bool(self.pattern.search(value))


CHECK_RULES: Dict[str, CheckRule] = {
    "en": CheckRule("contains Chinese characters", _CJK_RE),
    "en-US": CheckRule("contains Chinese characters", _CJK_RE),
    "zh-TW": CheckRule("may contain simplified Chinese", _SIMPLIFIED_ONLY_RE),
    "zh-CN": CheckRule("may contain traditional Chinese", _TRADITIONAL_ONLY_RE),
}


@dataclasses.dataclass(frozen=True)
class TranslationIssue:
    line: int
    key: str
    value: str


def rule_for(language: str) -> CheckRule:
    """Rule for ``language``; unknown languages are checked like ``en-US``."""
    return CHECK_RULES.get(language, CHECK_RULES["en-US"])


def check_translations(text: str, language: str) -> List[TranslationIssue]:
    """Scan the raw text of a JSON (or TS object) locale file for suspicious values.

    Works on the text rather than parsed data so that line numbers can be reported.
    """
    rule = rule_for(language)
    issues: List[TranslationIssue] = []
    for m in _ENTRY_RE.finditer(text):
        if rule.flags(m.group(2)):
            line = text.count("\n", 0, m.start()) + 1
            issues.append(TranslationIssue(line, m.group(1), m.group(2)))
    return issues


# ── TS object → mapping ──────────────────────────────────────────────────────

_EXPORT_DEFAULT_RE = re.compile(r"export\s+default\s*\{([\s\S]*)\};?\s*$")
_KEY_VALUE_RE = re.compile(r"""(['"]?)([^'":\n]+)\1\s*:\s*(['"`])([\s\S]*?)\3\s*,?""")


def parse_export_default(text: str) -> Mapping:
    """Parse a flat ``export default { key: 'value', … }`` module into a mapping.

    Raises MappingFileError when there is no default-exported object or no entry in it.
    """
    clean = normalize(text)
    m = _EXPORT_DEFAULT_RE.search(clean)
    if m is None:
        raise MappingFileError("No `export default { … }` object found")
    result: Mapping = {}
    for kv in _KEY_VALUE_RE.finditer(m.group(1)):
        result[kv.group(2).strip()] = kv.group(4)
    if not result:
        raise MappingFileError("Could not parse any entry of the exported object")
    return result


# ── Spreadsheet export ───────────────────────────────────────────────────────

_XML_HEADER = """<?xml version="1.0" encoding="UTF-8"?>
<?mso-application progid="Excel.Sheet"?>
<Workbook xmlns="urn:schemas-microsoft-com:office:spreadsheet"
 xmlns:ss="urn:schemas-microsoft-com:office:spreadsheet">
 <Styles>
  <Style ss:ID="Header">
   <Font ss:Bold="1"/>
   <Interior ss:Color="#D3D3D3" ss:Pattern="Solid"/>
   <Alignment ss:Vertical="Center" ss:WrapText="1"/>
  </Style>
  <Style ss:ID="WrapText">
   <Alignment ss:Vertical="Top" ss:WrapText="1"/>
  </Style>
 </Styles>
 <Worksheet ss:Name="Sheet1">
  <Table>
   <Column ss:Width="300"/>
   <Column ss:Width="300"/>
"""
_XML_FOOTER = """  </Table>
 </Worksheet>
</Workbook>"""


def escape_xml(text) -> str:
    return (
        str(text)
        .replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&apos;")
        .replace("\n", "&#10;")
        .replace("\r", "")
    )


def _row(cells: Sequence[str], style: str) -> str:
    body = "".join(
        f'    <Cell ss:StyleID="{style}"><Data ss:Type="String">{escape_xml(c)}</Data></Cell>\n' for c in cells
    )
    return f"   <Row>\n{body}   </Row>\n"


def mapping_to_spreadsheet_xml(data: Mapping, key_header: str = "Key", value_header: str = "Value") -> str:
    """Render ``data`` as a two-column SpreadsheetML 2003 workbook (opens in Excel and LibreOffice)."""
    rows = [_row((key_header, value_header), "Header")]
    rows.extend(_row((k, v), "WrapText") for k, v in data.items())
    return _XML_HEADER + "".join(rows) + _XML_FOOTER


def preview(data: Mapping, limit: int = 10) -> List[str]:
    """First ``limit`` entries as printable lines, plus a "... N more" line when truncated."""
    lines = [f'  "{k}": "{v}"' for k, v in list(data.items())[:limit]]
    if len(data) > limit:
        lines.append(f"  ... {len(data) - limit} more")
    return lines


def resolve_output(target: pathlib.Path, output: Optional[str], default_output: str, suffix: str = "") -> pathlib.Path:
    """Where a run over ``target`` writes its mapping.

    ``output`` (the flag) wins; a value not ending in ``.json`` names a directory. Without it the
    configured ``default_output`` is used the same way: a ``.json`` path keeps its directory and
    the file is named after the target folder.
    """
    name = f"{target.name}{suffix}.json"
    if output:
        out = pathlib.Path(output)
        return out if out.suffix.lower() == ".json" else out / name
    default = pathlib.Path(default_output)
    if default.suffix.lower() == ".json":
        return default.parent / name
    return default / name

# -*- coding: utf-8 -*-
"""Context classifiers.

Every predicate here takes a buffer (comments already masked, see ``normalize.mask_comments``)
and either a literal or an offset into the buffer. None of them raise: "no match" is simply a
False/None answer.

The positional entry point is ``classify_occurrence``, which tells the rewrite engine which
call-site syntax a quoted literal at a given offset needs.
"""
from __future__ import annotations

import dataclasses
import enum
import functools
import re
from typing import Iterable, Optional, Pattern, Tuple

# ── Target text ──────────────────────────────────────────────────────────────
TARGET_RE = re.compile(r"[\u4e00-\u9fa5]")


def contains_target(text: str) -> bool:
    """True when ``text`` holds at least one CJK ideograph."""
    return bool(TARGET_RE.search(text))


# ── Literal shape: expression, code, file path ───────────────────────────────
_EXPRESSION_PATTERNS = tuple(
    re.compile(p)
    for p in (
        r"\?.*:",  # ternary
        r"[!=]==",
        r"[!<>]=",
        r"&&|\|\|",
        r"['\"][^'\"]*['\"]",  # holds an inner literal
    )
)

# JS identifiers are ASCII; \w must not swallow CJK text here.
_CODE_PATTERNS = tuple(
    re.compile(p, re.A)
    for p in (
        r"\b(?:function|const|let|var|if|else|for|while|return|await|async|import|export)\b",
        r"[{}]",
        r";$",
        r"=>",
        r"\w+\s*\(\s*\)",
        r"^\s*\w+\s*\(",
        r"\w+\s*=\s*[^=]",
        r"\w+\.\w+\s*\(",
        r"ElMessage\.",
        r"console\.",
    )
)
# Labels such as "温度(℃)" or "上调能力(kW)".
_BENIGN_LABEL_RE = re.compile(r"^[\u4e00-\u9fa5a-zA-Z0-9\s()（）\[\]【】℃°%]+$")
_ASCII_CALL_RE = re.compile(r"\w+\s*\(", re.A)

_PATH_PREFIX_RE = re.compile(r"^(?:\.{1,2}/|@/|~/|/[^/])")
_FILE_EXT_RE = re.compile(
    r"\.(?:png|jpg|jpeg|gif|svg|webp|bmp|ico|mp4|mp3|wav|pdf|doc|docx|xls|xlsx|zip|rar"
    r"|ttf|woff|woff2|eot|otf|css|scss|less|json|xml|txt|md)$",
    re.I,
)
_ANY_EXT_RE = re.compile(r"\.\w{2,4}$", re.A)


def is_expression_like(text: str) -> bool:
    """A double-quoted value that is really a JS expression (ternary, comparison, inner literal)."""
    return any(p.search(text) for p in _EXPRESSION_PATTERNS)


def is_code_like(text: str) -> bool:
    if _BENIGN_LABEL_RE.match(text):
        # still code when it reads like "fn(" with no CJK text before the parenthesis
        return bool(_ASCII_CALL_RE.search(text)) and not contains_target(text.split("(")[0])
    return any(p.search(text) for p in _CODE_PATTERNS)


def is_file_path(text: str) -> bool:
    if ("/" in text or "\\" in text) and _ANY_EXT_RE.search(text):
        return True
    return bool(_PATH_PREFIX_RE.search(text) or _FILE_EXT_RE.search(text))


# ── Already-localized ────────────────────────────────────────────────────────
DEFAULT_LOOKUP_NAMES: Tuple[str, ...] = ("$t", "t", "i18n.t", "i18n.global.t")
LOOKBEHIND = 50


@functools.lru_cache(maxsize=32)
def lookup_patterns(names: Tuple[str, ...] = ()) -> Tuple[Pattern, Pattern]:
    """Return ``(call_re, tail_re)`` for the default lookup names plus ``names``.

    ``call_re`` finds ``name(`` anywhere; ``tail_re`` only matches an opening call at the very
    end of a window, i.e. directly before a literal.
    """
    all_names = sorted(set(DEFAULT_LOOKUP_NAMES) | {n for n in names if n}, key=len, reverse=True)
    alt = "|".join(re.escape(n) for n in all_names)
    call_re = re.compile(rf"(?<![\w$])(?:{alt})\s*\(", re.A)
    tail_re = re.compile(rf"(?<![\w$])(?:{alt})\s*\(\s*$", re.A)
    return call_re, tail_re


def is_already_localized(
    buffer: str,
    index: Optional[int],
    span: str,
    names: Iterable[str] = (),
) -> bool:
    """True when ``span`` is already a lookup call, or sits right inside one.

    With a known ``index`` only the window ending at that offset is inspected. Without one,
    every occurrence of ``span`` in ``buffer`` is tested.
    """
    call_re, tail_re = lookup_patterns(tuple(names))
    if call_re.search(span):
        return True
    if index is not None:
        return bool(tail_re.search(buffer[max(0, index - LOOKBEHIND):index]))
    pos = buffer.find(span)
    while pos >= 0:
        if tail_re.search(buffer[max(0, pos - LOOKBEHIND):pos]):
            return True
        pos = buffer.find(span, pos + 1)
    return False


# ── Script-side skips ────────────────────────────────────────────────────────
PROPS_MARKERS = ("defineProps(", "withDefaults(")
_MODULE_LINE_RE = re.compile(r"^\s*(?:import\b|export\b[^\n]*\bfrom\b)")


def _inside_call(buffer: str, index: int, marker: str) -> bool:
    start = buffer.rfind(marker, 0, index)
    if start < 0:
        return False
    depth = 0
    quote = None
    i = start + len(marker) - 1
    while i < index:
        ch = buffer[i]
        if quote:
            if ch == "\\":
                i += 2
                continue
            if ch == quote:
                quote = None
        elif ch in "\"'`":
            quote = ch
        elif ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return False
        i += 1
    return depth > 0


def in_props_declaration(buffer: str, index: int) -> bool:
    """True when ``index`` lies inside the argument list of ``defineProps(`` / ``withDefaults(``."""
    return any(_inside_call(buffer, index, marker) for marker in PROPS_MARKERS)


def on_module_line(buffer: str, index: int) -> bool:
    """True when ``index`` is on an ``import`` or ``export … from`` line."""
    line_start = buffer.rfind("\n", 0, index) + 1
    line_end = buffer.find("\n", index)
    if line_end < 0:
        line_end = len(buffer)
    return bool(_MODULE_LINE_RE.match(buffer[line_start:line_end]))


# ── Markup contexts ──────────────────────────────────────────────────────────
class Context(enum.Enum):
    PLAIN_ATTRIBUTE = "plain-attribute"
    BOUND_ATTRIBUTE = "bound-attribute"
    INTERPOLATION = "interpolation"
    BINDING_EXPRESSION = "binding-expression"
    BODY = "body"


@dataclasses.dataclass(frozen=True)
class AttributeContext:
    is_attribute: bool
    needs_binding: bool = False
    attr_name: Optional[str] = None
    start: int = -1  # offset of the attribute name (plain attributes only)
    quote: Optional[str] = None


@dataclasses.dataclass(frozen=True)
class Classification:
    context: Context
    attr_name: Optional[str] = None
    attr_start: int = -1
    quote: Optional[str] = None  # quote delimiting the enclosing attribute value


@dataclasses.dataclass(frozen=True)
class BindingOpener:
    prefix: str
    name: str
    quote: str
    start: int

    @property
    def is_bound_attribute(self) -> bool:
        return self.prefix == ":" or (self.prefix == "v-" and self.name.startswith("bind:"))


_BINDING_OPEN_RE = re.compile(r"(?:^|(?<=[\s>]))(:|@|#|v-)([\w:.\[\]-]+)\s*=\s*([\"'])")
_BARE_BINDING_TAIL_RE = re.compile(r"(?:^|(?<=[\s>]))(?::|@|#|v-)[\w:.\[\]-]+\s*=\s*$")
_PLAIN_ATTR_TAIL_RE = re.compile(r"(?:^|(?<=\s))([A-Za-z_][\w.-]*)\s*=\s*$")
_PLAIN_ATTR_OPEN_RE = re.compile(r"(?:^|(?<=\s))([A-Za-z_][\w.-]*)\s*=\s*([\"'])")


def _closed_between(buffer: str, quote: str, start: int, end: int) -> bool:
    """True when an unescaped ``quote`` occurs in ``buffer[start:end]``."""
    pos = buffer.find(quote, start, end)
    while pos >= 0:
        if pos == 0 or buffer[pos - 1] != "\\":
            return True
        pos = buffer.find(quote, pos + 1, end)
    return False


def in_interpolation(buffer: str, index: int) -> bool:
    """True when the nearest ``{{`` before ``index`` has not been closed yet."""
    if index < 0:
        return False
    open_at = buffer.rfind("{{", 0, index)
    if open_at < 0:
        return False
    return buffer.find("}}", open_at + 2, index) < 0


def open_binding(buffer: str, index: int) -> Optional[BindingOpener]:
    """Return the ``:x="`` / ``@x="`` / ``v-x="`` attribute whose value is still open at ``index``."""
    if index < 0:
        return None
    last = None
    for m in _BINDING_OPEN_RE.finditer(buffer, 0, index):
        last = m
    if last is None:
        return None
    quote = last.group(3)
    if _closed_between(buffer, quote, last.end(), index):
        return None
    return BindingOpener(prefix=last.group(1), name=last.group(2), quote=quote, start=last.start())


def in_binding_expression(buffer: str, index: int) -> bool:
    return open_binding(buffer, index) is not None


def _in_plain_attribute_value(buffer: str, index: int) -> bool:
    last = None
    for m in _PLAIN_ATTR_OPEN_RE.finditer(buffer, 0, index):
        last = m
    if last is None:
        return False
    return not _closed_between(buffer, last.group(2), last.end(), index)


def attribute_context(buffer: str, index: int, span: str) -> AttributeContext:
    """Is the literal ``span`` at ``index`` an attribute value, and does it need a ``:`` binding?

    A plain ``name="…"`` whose whole value is ``span`` wins over a bound attribute.
    """
    before = buffer[:index]
    if span[:1] in ("'", '"'):
        m = _PLAIN_ATTR_TAIL_RE.search(before)
        if m and not m.group(1).startswith("v-"):
            return AttributeContext(True, True, m.group(1), m.start(1), span[0])
    opener = open_binding(buffer, index)
    if opener is not None and opener.is_bound_attribute:
        name = opener.name[len("bind:"):] if opener.prefix == "v-" else opener.name
        return AttributeContext(True, False, name, opener.start, opener.quote)
    return AttributeContext(False)


def classify_occurrence(buffer: str, index: int, span: str) -> Optional[Classification]:
    """Decide the call-site syntax for the quoted literal ``span`` found at ``index``.

    Returns None when the literal must be left alone, e.g. it is a raw expression value
    (``:title="文本"``) or it is embedded inside a plain attribute's text.
    """
    opener = open_binding(buffer, index)
    interp = in_interpolation(buffer, index)

    if opener is None and not interp:
        attr = attribute_context(buffer, index, span)
        if attr.is_attribute and attr.needs_binding:
            return Classification(Context.PLAIN_ATTRIBUTE, attr.attr_name, attr.start, attr.quote)

    if opener is not None and opener.is_bound_attribute:
        return Classification(Context.BOUND_ATTRIBUTE, opener.name, opener.start, opener.quote)
    if interp:
        return Classification(Context.INTERPOLATION)
    if opener is not None:
        return Classification(Context.BINDING_EXPRESSION, opener.name, opener.start, opener.quote)

    before = buffer[:index]
    if _BARE_BINDING_TAIL_RE.search(before) or _PLAIN_ATTR_TAIL_RE.search(before):
        return None
    if _in_plain_attribute_value(buffer, index):
        return None
    return Classification(Context.BODY)

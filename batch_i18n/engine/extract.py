# -*- coding: utf-8 -*-
"""Term extraction: find the CJK literals of a buffer that should become lookup calls.

``extract`` runs a fixed battery of scanners in this order:

1. double-quoted literals
2. ``field: '…'`` assignments (configurable field names, default ``i18n``)
3. single-quoted literals
4. backtick template literals
5. markup only: tag bodies ``>text<``
6. markup only: the body of ``el-button``/``el-radio-button``/``button``/``a`` elements
7. JSX only: tag bodies ``>text<`` inside script code

The result is not globally sorted and the same text may show up under several scanners; the
rewrite engine dedupes. Offsets refer to the buffer passed in (comments are masked, never removed).
"""
from __future__ import annotations

import dataclasses
import enum
import re
from typing import Iterable, List, Optional, Sequence

from batch_i18n.engine import classify
from batch_i18n.engine.normalize import mask_comments

TEMPLATE_CONTEXT = "template"
SCRIPT_CONTEXT = "script"

_DOUBLE_QUOTE_RE = re.compile(r'"([^"]*)"')
_SINGLE_QUOTE_RE = re.compile(r"'([^']*)'")
_BACKTICK_RE = re.compile(r"`([^`]*)`")
_TAG_BODY_RE = re.compile(r">([^<>]*?)<", re.S)
_JSX_BODY_RE = re.compile(r">([^<>{}]+)<")
ELEMENT_BODY_TAGS = ("el-button", "el-radio-button", "button", "a")
_ELEMENT_BODY_RE = re.compile(
    r"<(%s)(\s[^>]*)?>([\s\S]*?)</\1>" % "|".join(re.escape(t) for t in ELEMENT_BODY_TAGS)
)
_TEMPLATE_MARKER_RE = re.compile(r"\$\{.*?\}", re.S)


class TermKind(str, enum.Enum):
    DOUBLE_QUOTE = "double-quote"
    SINGLE_QUOTE = "single-quote"
    TEMPLATE = "template"
    TAG_BODY = "tag-body"
    ELEMENT_BODY = "tagged-element-body"
    FIELD = "field-assignment"


QUOTED_KINDS = (TermKind.DOUBLE_QUOTE, TermKind.SINGLE_QUOTE, TermKind.TEMPLATE)


@dataclasses.dataclass(frozen=True)
class Term:
    span: str
    content: str
    kind: TermKind
    offset: int
    tag_name: Optional[str] = None
    tag_attributes: Optional[str] = None
    field_name: Optional[str] = None

    @property
    def is_templated(self) -> bool:
        return bool(_TEMPLATE_MARKER_RE.search(self.content))

    @property
    def end(self) -> int:
        return self.offset + len(self.span)


def _field_re(field_names: Sequence[str]):
    alt = "|".join(re.escape(n) for n in field_names if n)
    if not alt:
        return None
    return re.compile(rf"(?<![\w$.])({alt})\s*:\s*'([^'\n]+)'")


def collapse_whitespace(text: str) -> str:
    return " ".join(text.split())


def extract(
    text: str,
    context: str = SCRIPT_CONTEXT,
    *,
    lookup_names: Iterable[str] = (),
    field_names: Sequence[str] = ("i18n",),
    jsx: bool = False,
) -> List[Term]:
    """Scan ``text`` and return the ordered candidate terms.

    ``context`` is ``"template"`` (Vue markup) or ``"script"``. ``lookup_names`` adds configured
    lookup functions to the defaults used by the already-localized check.
    """
    masked = mask_comments(text)
    names = tuple(lookup_names)
    script = context == SCRIPT_CONTEXT
    terms: List[Term] = []

    def intact(m: re.Match) -> bool:
        # a span straddling a comment does not exist verbatim in the real buffer
        return text[m.start():m.end()] == m.group(0)

    def script_skip(index: int) -> bool:
        return script and (
            classify.in_props_declaration(masked, index) or classify.on_module_line(masked, index)
        )

    def prose(content: str) -> bool:
        return (
            bool(content)
            and classify.contains_target(content)
            and not classify.is_code_like(content)
            and not classify.is_file_path(content)
        )

    for m in _DOUBLE_QUOTE_RE.finditer(masked):
        content = m.group(1).strip()
        if len(content) >= 2 and content[0] == "'" and content[-1] == "'":
            continue
        if classify.is_expression_like(content):
            continue
        if not intact(m) or script_skip(m.start()) or not prose(content):
            continue
        if classify.is_already_localized(masked, m.start(), m.group(0), names):
            continue
        terms.append(Term(m.group(0), content, TermKind.DOUBLE_QUOTE, m.start()))

    field_re = _field_re(field_names)
    field_spans = []
    if field_re is not None:
        for m in field_re.finditer(masked):
            content = m.group(2).strip()
            if not intact(m) or script_skip(m.start()) or not prose(content):
                continue
            field_spans.append(m.span())
            terms.append(Term(m.group(0), content, TermKind.FIELD, m.start(), field_name=m.group(1)))

    for m in _SINGLE_QUOTE_RE.finditer(masked):
        content = m.group(1).strip()
        if any(start <= m.start() < end for start, end in field_spans):
            continue
        if len(content) >= 2 and content[0] == '"' and content[-1] == '"':
            continue
        if not intact(m) or script_skip(m.start()) or not prose(content):
            continue
        if classify.is_already_localized(masked, m.start(), m.group(0), names):
            continue
        terms.append(Term(m.group(0), content, TermKind.SINGLE_QUOTE, m.start()))

    for m in _BACKTICK_RE.finditer(masked):
        content = m.group(1).strip()
        if not content or not classify.contains_target(content) or classify.is_file_path(content):
            continue
        if not intact(m) or script_skip(m.start()):
            continue
        if classify.is_already_localized(masked, m.start(), m.group(0), names):
            continue
        terms.append(Term(m.group(0), content, TermKind.TEMPLATE, m.start()))

    if not script:
        for m in _TAG_BODY_RE.finditer(masked):
            content = m.group(1).strip()
            if any(tok in content for tok in ('"', "'", "{{", "}}")):
                continue
            if not intact(m) or not prose(content):
                continue
            if classify.is_already_localized(masked, m.start(), m.group(0), names):
                continue
            terms.append(Term(m.group(0), collapse_whitespace(content), TermKind.TAG_BODY, m.start()))

        for m in _ELEMENT_BODY_RE.finditer(masked):
            content = m.group(3).strip()
            if "{{" in content or "}}" in content or "<" in content:
                continue
            if not intact(m) or not prose(content):
                continue
            if classify.is_already_localized(masked, m.start(), m.group(0), names):
                continue
            terms.append(
                Term(
                    m.group(0),
                    collapse_whitespace(content),
                    TermKind.ELEMENT_BODY,
                    m.start(),
                    tag_name=m.group(1),
                    tag_attributes=m.group(2) or "",
                )
            )

    if jsx:
        for m in _JSX_BODY_RE.finditer(masked):
            content = m.group(1).strip()
            if not intact(m) or not prose(content):
                continue
            if classify.is_already_localized(masked, m.start(), m.group(0), names):
                continue
            terms.append(Term(m.group(0), collapse_whitespace(content), TermKind.TAG_BODY, m.start()))

    return terms

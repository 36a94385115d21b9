# -*- coding: utf-8 -*-
"""Rewrite engine: turn extracted terms into lookup calls inside the real buffer.

The pass is a fold over the term list. Each step splices the current buffer and logs the edit,
so the offset a term was extracted at can be mapped onto the buffer as mutated so far; a term
whose span was swallowed by an earlier edit is skipped without counting. Quoted literals are
classified afresh against the mutated buffer at their own position. Tag bodies and element
bodies are replaced buffer-wide the first time their span is seen.
"""
from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Tuple

from batch_i18n.engine import templates
from batch_i18n.engine.classify import Context, classify_occurrence
from batch_i18n.engine.extract import TEMPLATE_CONTEXT, Term, TermKind
from batch_i18n.engine.literals import lookup_call
from batch_i18n.engine.normalize import mask_comments
from batch_i18n.engine.registry import KeyRegistry

logger = logging.getLogger(__name__)

_SPLICED_CONTEXTS = (Context.BOUND_ATTRIBUTE, Context.INTERPOLATION, Context.BINDING_EXPRESSION)


class EditableBuffer:
    """A text buffer plus the log of splices applied to it."""

    def __init__(self, text: str) -> None:
        self.text = text
        self._edits: List[Tuple[int, int, int]] = []
        self._masked: Optional[str] = None

    @property
    def masked(self) -> str:
        if self._masked is None:
            self._masked = mask_comments(self.text)
        return self._masked

    def locate(self, offset: int, length: int) -> Optional[int]:
        """Map an offset of the initial text onto the current one; None if an edit overlapped it."""
        pos = offset
        for start, old_len, new_len in self._edits:
            if pos >= start + old_len:
                pos += new_len - old_len
            elif pos + length > start:
                return None
        return pos

    def splice(self, start: int, end: int, replacement: str) -> None:
        self.text = self.text[:start] + replacement + self.text[end:]
        self._edits.append((start, end - start, len(replacement)))
        self._masked = None

    def find(self, span: str, start: int = 0) -> int:
        """Offset of the first occurrence of ``span`` at or after ``start`` outside comments, or -1."""
        pos = self.masked.find(span, start)
        while pos >= 0 and self.text[pos:pos + len(span)] != span:
            pos = self.masked.find(span, pos + 1)
        return pos

    def replace_everywhere(self, span: str, replacement: str) -> int:
        """Replace every occurrence of ``span`` outside comments; return how many were replaced."""
        count = 0
        pos = self.find(span)
        while pos >= 0:
            self.splice(pos, pos + len(span), replacement)
            count += 1
            pos = self.find(span, pos + len(replacement))
        return count


def _padding(inner: str) -> Tuple[str, str]:
    stripped = inner.strip()
    if not stripped:
        return inner, ""
    lead = inner[: len(inner) - len(inner.lstrip())]
    trail = inner[len(inner.rstrip()):]
    return lead, trail


def _call_for(term: Term, method: str, avoid: Optional[str], registry: KeyRegistry) -> Tuple[str, str]:
    """Return ``(key, call)`` for a term about to be written at a confirmed position."""
    if term.is_templated:
        converted = templates.convert(term.content, method, avoid_quote=avoid, registry=registry)
        return converted.canonical_key, converted.call_expression
    registry.register(term.content, term.content)
    return term.content, lookup_call(method, term.content, avoid)


def _body_replacement(term: Term, call: str, markup: bool) -> str:
    if term.kind == TermKind.ELEMENT_BODY:
        inner = term.span[len(term.tag_name) + len(term.tag_attributes) + 2 : -(len(term.tag_name) + 3)]
        lead, trail = _padding(inner)
        return f"<{term.tag_name}{term.tag_attributes}>{lead}{{{{ {call} }}}}{trail}</{term.tag_name}>"
    lead, trail = _padding(term.span[1:-1])
    if markup:
        return f">{lead}{{{{ {call} }}}}{trail}<"
    return f">{lead}{{{call}}}{trail}<"


def rewrite(
    buffer: str,
    terms: Iterable[Term],
    *,
    mode: str = TEMPLATE_CONTEXT,
    method: str = "$t",
    registry: Optional[KeyRegistry] = None,
) -> Tuple[str, int]:
    """Apply ``terms`` (as produced by ``extract`` on ``buffer``) and return ``(new_buffer, replaced)``.

    ``mode`` is ``"template"`` for Vue markup, where quoted literals get context-dependent
    call sites, or ``"script"``, where every literal becomes a plain ``method('…')`` call.
    Every replaced term registers its key in ``registry``.
    """
    registry = registry if registry is not None else KeyRegistry()
    markup = mode == TEMPLATE_CONTEXT
    buf = EditableBuffer(buffer)
    seen_bodies = set()
    replaced = 0

    for term in terms:
        if term.kind in (TermKind.TAG_BODY, TermKind.ELEMENT_BODY):
            if term.span in seen_bodies:
                continue
            seen_bodies.add(term.span)
            if buf.find(term.span) < 0:
                continue
            _, call = _call_for(term, method, None, registry)
            if buf.replace_everywhere(term.span, _body_replacement(term, call, markup)):
                replaced += 1
            continue

        pos = buf.locate(term.offset, len(term.span))
        if pos is None or buf.text[pos:pos + len(term.span)] != term.span:
            continue
        end = pos + len(term.span)

        if not markup:
            _, call = _call_for(term, method, None, registry)
            if term.kind == TermKind.FIELD:
                call = f"{term.field_name}: {call}"
            buf.splice(pos, end, call)
            replaced += 1
            continue

        if term.kind == TermKind.FIELD:
            quote_at = term.span.index("'")
            cls = classify_occurrence(buf.masked, pos + quote_at, term.span[quote_at:])
        else:
            cls = classify_occurrence(buf.masked, pos, term.span)
        if cls is None:
            logger.debug("Left %r alone: no safe call site", term.span)
            continue

        if term.kind == TermKind.FIELD:
            if cls.context not in _SPLICED_CONTEXTS:
                continue
            _, call = _call_for(term, method, cls.quote, registry)
            buf.splice(pos, end, f"{term.field_name}: {call}")
        elif cls.context == Context.PLAIN_ATTRIBUTE:
            _, call = _call_for(term, method, cls.quote, registry)
            start = cls.attr_start
            sep = "" if start > 0 and buf.text[start - 1].isspace() else " "
            buf.splice(start, end, f"{sep}:{cls.attr_name}={cls.quote}{call}{cls.quote}")
        elif cls.context in _SPLICED_CONTEXTS:
            _, call = _call_for(term, method, cls.quote, registry)
            buf.splice(pos, end, call)
        else:
            _, call = _call_for(term, method, None, registry)
            buf.splice(pos, end, f"{{{{ {call} }}}}")
        replaced += 1

    return buf.text, replaced

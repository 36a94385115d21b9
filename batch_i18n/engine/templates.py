# -*- coding: utf-8 -*-
"""Template-literal conversion: ``共${count}条记录`` -> ``$t('共{a}条记录', {a: count})``.

Each ``${…}`` marker (braces balanced) takes the next placeholder letter, left to right. A marker
whose expression already appeared reuses the earlier letter in the canonical text, but still
consumes a letter in the mapping. More than 26 markers raise ``PlaceholderOverflowError``.
"""
from __future__ import annotations

import dataclasses
import string
from typing import Dict, List, Optional, Tuple

from batch_i18n.engine.literals import js_string_literal
from batch_i18n.errors import PlaceholderOverflowError

PLACEHOLDERS = string.ascii_lowercase


@dataclasses.dataclass(frozen=True)
class TemplateCall:
    canonical_key: str
    call_expression: str
    placeholders: Dict[str, str]


def find_markers(template: str) -> List[Tuple[int, int, str]]:
    """Return ``(start, end, expression)`` for every ``${…}`` marker; an unclosed one is ignored."""
    markers = []
    pos = template.find("${")
    while pos >= 0:
        depth = 0
        i = pos + 1
        end = -1
        while i < len(template):
            ch = template[i]
            if ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
                if depth == 0:
                    end = i + 1
                    break
            i += 1
        if end < 0:
            break
        markers.append((pos, end, template[pos + 2:end - 1]))
        pos = template.find("${", end)
    return markers


def canonicalize(template: str) -> Tuple[str, Dict[str, str]]:
    """Return ``(canonical_key, placeholder -> expression)`` for ``template``."""
    markers = find_markers(template)
    if len(markers) > len(PLACEHOLDERS):
        raise PlaceholderOverflowError(
            f"Template has {len(markers)} interpolations, more than the {len(PLACEHOLDERS)} placeholder letters",
            template=template,
            count=len(markers),
        )
    placeholders: Dict[str, str] = {}
    first_letter: Dict[str, str] = {}
    parts = []
    pos = 0
    for letter, (start, end, expr) in zip(PLACEHOLDERS, markers):
        placeholders[letter] = expr
        first_letter.setdefault(expr, letter)
        parts.append(template[pos:start])
        parts.append("{%s}" % first_letter[expr])
        pos = end
    parts.append(template[pos:])
    return "".join(parts), placeholders


def convert(
    template: str,
    method: str = "$t",
    *,
    avoid_quote: Optional[str] = None,
    registry=None,
) -> TemplateCall:
    """Build the lookup call for a template term and register ``canonical -> canonical``."""
    canonical, placeholders = canonicalize(template)
    key_literal = js_string_literal(canonical, avoid=avoid_quote)
    if placeholders:
        args = ", ".join(f"{name}: {expr}" for name, expr in placeholders.items())
        call = f"{method}({key_literal}, {{{args}}})"
    else:
        call = f"{method}({key_literal})"
    if registry is not None:
        registry.register(canonical, canonical)
    return TemplateCall(canonical, call, placeholders)

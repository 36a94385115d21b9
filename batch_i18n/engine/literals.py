# -*- coding: utf-8 -*-
"""JS string literals for generated lookup calls."""
from __future__ import annotations

from typing import Optional

_HTML_QUOTE_ENTITIES = {'"': "&quot;", "'": "&#39;"}


def _escape_unescaped(body: str, quote: str) -> str:
    out = []
    backslashes = 0
    for ch in body:
        if ch == quote and backslashes % 2 == 0:
            out.append("\\")
        out.append(ch)
        backslashes = backslashes + 1 if ch == "\\" else 0
    return "".join(out)


def js_string_literal(text: str, avoid: Optional[str] = None) -> str:
    """Quote ``text`` (raw source text, escapes kept as written) as a JS string literal.

    Single quotes are used unless ``avoid`` is the single quote, i.e. the literal lands inside
    an HTML attribute delimited by ``'``. Real line breaks become ``\\n``/``\\r``. If the
    attribute quote still occurs in the body it is written as an HTML entity.
    """
    quote = '"' if avoid == "'" else "'"
    body = _escape_unescaped(text, quote).replace("\r", "\\r").replace("\n", "\\n")
    if avoid in _HTML_QUOTE_ENTITIES and avoid in body:
        body = body.replace(avoid, _HTML_QUOTE_ENTITIES[avoid])
    return f"{quote}{body}{quote}"


def lookup_call(method: str, key: str, avoid: Optional[str] = None) -> str:
    return f"{method}({js_string_literal(key, avoid)})"

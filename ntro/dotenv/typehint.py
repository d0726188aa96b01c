"""Parser for ``# @type`` hint expressions."""

from __future__ import annotations

from typing import List, Tuple

from ..errors import HintParseError
from ..models import BooleanType, EnumType, NumberType, RawExpression, StringType, TypeHint

_QUOTES = ("'", '"')

_KEYWORDS = {
    "string": StringType,
    "number": NumberType,
    "boolean": BooleanType,
}


def parse_type_hint(expression: str) -> TypeHint:
    """Parse the text following ``@type``.

    ``'a' | 'b'`` becomes an :class:`EnumType`, the bare words ``string``,
    ``number`` and ``boolean`` map to their shorthand types and any other text is
    kept as a :class:`RawExpression`.
    """
    text = expression.strip()
    if not text:
        raise HintParseError(expression, "empty type expression")

    keyword = _KEYWORDS.get(text)
    if keyword is not None:
        return keyword()

    if text.lstrip("| \t")[:1] in _QUOTES:
        return EnumType(_parse_literal_union(expression, text))

    return RawExpression(text)


def _parse_literal_union(expression: str, text: str) -> Tuple[str, ...]:
    values: List[str] = []
    expecting_literal = True
    position = 0
    while position < len(text):
        char = text[position]
        if char.isspace():
            position += 1
            continue
        if char == "|":
            # runs of pipes collapse into one separator
            expecting_literal = True
            position += 1
            continue
        if char in _QUOTES:
            if not expecting_literal:
                raise HintParseError(expression, f"expected '|' before {text[position:]!r}")
            end = text.find(char, position + 1)
            if end == -1:
                raise HintParseError(expression, "unterminated string literal")
            literal = text[position + 1 : end]
            if literal not in values:
                values.append(literal)
            expecting_literal = False
            position = end + 1
            continue
        raise HintParseError(expression, f"unexpected {text[position:]!r} in literal union")

    if expecting_literal:
        raise HintParseError(expression, "dangling '|' in literal union")
    return tuple(values)


__all__ = ["parse_type_hint"]

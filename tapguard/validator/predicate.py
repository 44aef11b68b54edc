"""
Parser for the small predicate language accepted by predicate targets.

Grammar::

    predicate := FIELD operator STRING
    operator  := "CONTAINS" | "=="
    STRING    := '"' text '"' | "'" text "'"

Keywords, field names and compared values are all case-insensitive. Any
other syntax is rejected with PredicateSyntaxError instead of silently
matching nothing.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, NamedTuple, Optional

from tapguard.core.exceptions import PredicateSyntaxError
from tapguard.core.schemas import ElementNode

PREDICATE_FIELDS = ("label", "identifier", "value", "type", "title", "hint")

OP_CONTAINS = "contains"
OP_EQUALS = "=="


class Token(NamedTuple):
    kind: str  # "word", "op" or "string"
    text: str
    position: int


@dataclass(frozen=True)
class Predicate:
    field: str
    operator: str
    value: str

    def matches(self, element: ElementNode) -> bool:
        field_value: Optional[str] = getattr(element, self.field)
        if not field_value:
            return False
        lowered = field_value.lower()
        if self.operator == OP_CONTAINS:
            return self.value in lowered
        return lowered == self.value


def tokenize(text: str) -> List[Token]:
    tokens: List[Token] = []
    i = 0
    while i < len(text):
        char = text[i]
        if char.isspace():
            i += 1
            continue
        if char in ("'", '"'):
            end = text.find(char, i + 1)
            if end < 0:
                raise PredicateSyntaxError("Unterminated string", text, i)
            tokens.append(Token("string", text[i + 1:end], i))
            i = end + 1
            continue
        if text.startswith("==", i):
            tokens.append(Token("op", "==", i))
            i += 2
            continue
        if char.isalpha() or char == "_":
            start = i
            while i < len(text) and (text[i].isalnum() or text[i] == "_"):
                i += 1
            tokens.append(Token("word", text[start:i], start))
            continue
        raise PredicateSyntaxError(f"Unexpected character {char!r}", text, i)
    return tokens


def parse_predicate(text: str) -> Predicate:
    tokens = tokenize(text)
    if len(tokens) < 3:
        raise PredicateSyntaxError("Expected: <field> CONTAINS|== \"<value>\"", text, len(text))

    field_token, op_token, value_token = tokens[0], tokens[1], tokens[2]

    if field_token.kind != "word":
        raise PredicateSyntaxError("Expected a field name", text, field_token.position)
    field_name = field_token.text.lower()
    if field_name not in PREDICATE_FIELDS:
        raise PredicateSyntaxError(f"Unsupported field: {field_token.text}", text, field_token.position)

    if op_token.kind == "op":
        operator = OP_EQUALS
    elif op_token.kind == "word" and op_token.text.lower() == OP_CONTAINS:
        operator = OP_CONTAINS
    else:
        raise PredicateSyntaxError(f"Unsupported operator: {op_token.text}", text, op_token.position)

    if value_token.kind != "string":
        raise PredicateSyntaxError("Expected a quoted value", text, value_token.position)
    if not value_token.text:
        raise PredicateSyntaxError("Compared value is empty", text, value_token.position)

    if len(tokens) > 3:
        extra = tokens[3]
        raise PredicateSyntaxError(f"Unexpected trailing input: {extra.text}", text, extra.position)

    return Predicate(field=field_name, operator=operator, value=value_token.text.lower())

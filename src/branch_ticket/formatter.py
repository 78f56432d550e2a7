from __future__ import annotations

from enum import Enum

from .exceptions import InvalidConfigValueError


class BracketStyle(Enum):
    NONE = "none"
    ROUND = "round"
    SQUARE = "square"
    CURLY = "curly"

    @property
    def delimiters(self) -> tuple[str, str]:
        return _DELIMITERS[self]


class ContextPosition(Enum):
    START = "start"
    BEFORE_COLON = "before_colon"
    AFTER_COLON = "after_colon"


_DELIMITERS = {
    BracketStyle.NONE: ("", ""),
    BracketStyle.ROUND: ("(", ")"),
    BracketStyle.SQUARE: ("[", "]"),
    BracketStyle.CURLY: ("{", "}"),
}


def _parse_choice(enum_cls, key: str, value: str):
    normalized = value.strip().lower().replace("-", "_")
    for member in enum_cls:
        if member.value == normalized:
            return member
    raise InvalidConfigValueError(key, value, [m.value for m in enum_cls])


def parse_bracket_style(value: str, key: str = "bracketStyle") -> BracketStyle:
    return _parse_choice(BracketStyle, key, value)


def parse_context_position(value: str, key: str = "contextPosition") -> ContextPosition:
    return _parse_choice(ContextPosition, key, value)


def bracketize(ticket: str, style: BracketStyle) -> str:
    opening, closing = style.delimiters
    return f"{opening}{ticket}{closing}"


def apply_context(ticket: str, line: str, position: ContextPosition, style: BracketStyle) -> str:
    """Insert the bracketed ticket into a commit subject line.

    Args:
        ticket: The ticket identifier, e.g. ``ABC-123``.
        line: The first line of the commit message.
        position: Where to insert the ticket relative to the first colon.
        style: Delimiters wrapped around the ticket.

    Returns:
        The rewritten line. For the colon positions a line without a colon
        is returned unchanged. Whitespace is only normalized at the
        insertion point.
    """
    context = bracketize(ticket, style)
    if position is ContextPosition.START:
        return f"{context} {line}"

    colon_index = line.find(":")
    if colon_index < 0:
        return line
    if position is ContextPosition.AFTER_COLON:
        colon_index += 1

    head = line[:colon_index].rstrip()
    tail = line[colon_index:].lstrip()
    trailer = " " if position is ContextPosition.AFTER_COLON else ""
    return f"{head} {context}{trailer}{tail}"

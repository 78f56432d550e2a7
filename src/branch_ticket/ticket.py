from __future__ import annotations

import re

# ASCII only: uppercasing some letters changes their length (ß -> SS)
_TICKET_PATTERN = re.compile(r"\w+-\d+", re.ASCII)


def extract_ticket(branch_name: str | None) -> str | None:
    """Return the first ticket identifier found in a branch name, uppercased.

    ``feature/abc-123-login`` gives ``ABC-123``. Branches without a
    ``PREFIX-NUMBER`` part (``main``, ``develop``) give ``None``.
    """
    if not branch_name:
        return None
    match = _TICKET_PATTERN.search(branch_name)
    if match is None:
        return None
    return match.group(0).upper()


def contains_ticket(ticket: str, line: str) -> bool:
    return ticket.lower() in line.lower()

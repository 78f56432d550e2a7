from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .config import HookConfig, resolve_config
from .formatter import apply_context
from .git import VersionControlGateway
from .ticket import contains_ticket, extract_ticket

logger = logging.getLogger(__name__)


class HookOutcome(Enum):
    MODIFIED = "modified"
    UNCHANGED = "unchanged"
    FATAL = "fatal"


@dataclass(frozen=True)
class HookResult:
    outcome: HookOutcome
    reason: str
    message: str | None = None

    @property
    def exit_code(self) -> int:
        return 1 if self.outcome is HookOutcome.FATAL else 0


def _split_subject(message: str) -> tuple[str, str]:
    """Split off the first line, leaving its line ending with the rest."""
    subject, newline, rest = message.partition("\n")
    rest = newline + rest
    if subject.endswith("\r"):
        subject, rest = subject[:-1], "\r" + rest
    return subject, rest


def _check(subject: str, branch_name: str | None) -> tuple[str | None, HookResult | None]:
    """Return the ticket to insert, or the result that ends the run early."""
    if not subject:
        return None, HookResult(HookOutcome.FATAL, "Commit message is empty, nothing to add the ticket to.")

    if not branch_name:
        return None, HookResult(HookOutcome.UNCHANGED, "No branch checked out.")

    ticket = extract_ticket(branch_name)
    if ticket is None:
        return None, HookResult(HookOutcome.UNCHANGED, f"No ticket in branch name {branch_name!r}.")

    if contains_ticket(ticket, subject):
        return None, HookResult(HookOutcome.UNCHANGED, f"{ticket} is already in the commit message.")
    return ticket, None


def _insert(ticket: str, message: str, config: HookConfig) -> HookResult:
    subject, rest = _split_subject(message)
    new_subject = apply_context(ticket, subject, config.context_position, config.bracket_style)
    if new_subject == subject:
        return HookResult(HookOutcome.UNCHANGED, f"No colon in the subject line to place {ticket} at.")
    return HookResult(HookOutcome.MODIFIED, f"Added {ticket} to the commit message.", new_subject + rest)


def rewrite_message(message: str, branch_name: str | None, config: HookConfig) -> HookResult:
    """Decide whether a commit message needs the branch ticket and build it.

    Only the first line is rewritten; everything after it is kept as is.
    """
    subject, _ = _split_subject(message)
    ticket, result = _check(subject, branch_name)
    if result is not None:
        return result
    return _insert(ticket, message, config)


def run_hook(message_path: Path, gateway: VersionControlGateway) -> HookResult:
    """Run the commit-msg hook against a message file.

    The branch is only looked up for a non-empty message and the
    configuration only when a ticket is actually going to be inserted.
    The file is rewritten in place when the outcome is MODIFIED. Bytes that
    are not valid UTF-8 are carried through unchanged.
    """
    with message_path.open(encoding="utf-8", errors="surrogateescape", newline="") as f:
        message = f.read()
    subject, _ = _split_subject(message)

    branch_name = gateway.current_branch() if subject else None
    ticket, result = _check(subject, branch_name)
    if result is None:
        result = _insert(ticket, message, resolve_config(gateway))

    logger.debug("%s: %s", result.outcome.value, result.reason)
    if result.outcome is HookOutcome.MODIFIED:
        with message_path.open("w", encoding="utf-8", errors="surrogateescape", newline="") as f:
            f.write(result.message)
    return result

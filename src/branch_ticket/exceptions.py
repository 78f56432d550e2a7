from __future__ import annotations


class BranchTicketError(Exception):
    """Base exception for branch-ticket."""


class InvalidConfigValueError(BranchTicketError):
    """A configuration value is not one of the known choices."""

    def __init__(self, key: str, value: str, choices: list[str]) -> None:
        self.key = key
        self.value = value
        self.choices = choices
        super().__init__(f"Invalid value {value!r} for {key}. Expected one of: {', '.join(choices)}")


class HookInstallError(BranchTicketError):
    """The commit-msg hook could not be installed or removed."""

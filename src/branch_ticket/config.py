from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from .exceptions import BranchTicketError
from .formatter import BracketStyle, ContextPosition, parse_bracket_style, parse_context_position
from .git import GitError, GitGateway, VersionControlGateway

logger = logging.getLogger(__name__)

# git config section holding the hook settings
CONFIG_NAMESPACE = "branch-ticket"

BRACKET_STYLE_KEY = "bracketStyle"
CONTEXT_POSITION_KEY = "contextPosition"

DEFAULT_BRACKET_STYLE = BracketStyle.SQUARE
DEFAULT_CONTEXT_POSITION = ContextPosition.AFTER_COLON

_PARSERS: dict[str, Callable] = {
    BRACKET_STYLE_KEY: parse_bracket_style,
    CONTEXT_POSITION_KEY: parse_context_position,
}

CONFIG_KEYS = list(_PARSERS)


def qualified_key(key: str) -> str:
    return f"{CONFIG_NAMESPACE}.{key}"


@dataclass(frozen=True)
class HookConfig:
    bracket_style: BracketStyle = DEFAULT_BRACKET_STYLE
    context_position: ContextPosition = DEFAULT_CONTEXT_POSITION


def _lookup(gateway: VersionControlGateway, key: str, default):
    full_key = qualified_key(key)
    try:
        raw = gateway.config_value(full_key)
    except GitError as e:
        logger.warning("Could not read %s, using default %r: %s", full_key, default.value, e)
        return default
    if not raw:
        logger.debug("%s not set, using default %r", full_key, default.value)
        return default
    try:
        return _PARSERS[key](raw, full_key)
    except BranchTicketError as e:
        logger.warning("%s; using default %r", e, default.value)
        return default


def resolve_config(gateway: VersionControlGateway) -> HookConfig:
    """Build the effective hook configuration. Never raises.

    Each field is looked up on its own; a failed lookup, an unset key or an
    unknown value leaves that field at its default.
    """
    return HookConfig(
        bracket_style=_lookup(gateway, BRACKET_STYLE_KEY, DEFAULT_BRACKET_STYLE),
        context_position=_lookup(gateway, CONTEXT_POSITION_KEY, DEFAULT_CONTEXT_POSITION),
    )


class SettingsStore:
    """Read and write the hook settings in git config."""

    def __init__(self, gateway: GitGateway | None = None) -> None:
        self._gateway = gateway or GitGateway()

    def get(self, key: str) -> str | None:
        return self._gateway.config_value(qualified_key(key))

    def set(self, key: str, value: str, global_scope: bool = False) -> str:
        """Validate and store a value, returning its canonical spelling."""
        canonical = _PARSERS[key](value, qualified_key(key)).value
        self._gateway.set_config_value(qualified_key(key), canonical, global_scope=global_scope)
        return canonical

    def unset(self, key: str, global_scope: bool = False) -> bool:
        return self._gateway.unset_config_value(qualified_key(key), global_scope=global_scope)

    def effective(self) -> HookConfig:
        return resolve_config(self._gateway)

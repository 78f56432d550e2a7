from __future__ import annotations

import logging
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path

from .exceptions import BranchTicketError

logger = logging.getLogger(__name__)

# `git config --get` exits with 1 when the key is not set.
_CONFIG_KEY_MISSING = 1


class GitError(BranchTicketError):
    def __init__(self, message: str, returncode: int = 1) -> None:
        super().__init__(message)
        self.returncode = returncode


def _run_git(*args: str) -> str:
    try:
        result = subprocess.run(
            ["git", *args],
            capture_output=True,
            text=True,
            check=True,
        )
    except subprocess.CalledProcessError as e:
        raise GitError(f"git {' '.join(args)} failed: {e.stderr.strip()}", e.returncode) from e
    except FileNotFoundError:
        raise GitError("git is not installed or not in PATH", 127)
    return result.stdout


class VersionControlGateway(ABC):
    """The repository queries the hook needs."""

    @abstractmethod
    def current_branch(self) -> str | None:
        """Name of the checked-out branch, or None when there is none."""

    @abstractmethod
    def config_value(self, key: str) -> str | None:
        """Value of a repository config key, or None when unset.

        Raises:
            GitError: If the lookup itself fails.
        """

    @abstractmethod
    def hooks_directory(self) -> Path:
        """Directory git runs hooks from.

        Raises:
            GitError: If the directory cannot be determined.
        """


class GitGateway(VersionControlGateway):
    def current_branch(self) -> str | None:
        try:
            branch = _run_git("branch", "--show-current").strip()
        except GitError as e:
            logger.warning("%s", e)
            return None
        # Empty output means detached HEAD
        return branch or None

    def config_value(self, key: str) -> str | None:
        try:
            return _run_git("config", "--get", key).strip()
        except GitError as e:
            if e.returncode == _CONFIG_KEY_MISSING:
                return None
            raise

    def hooks_directory(self) -> Path:
        # --git-path honours core.hooksPath and worktrees
        return Path(_run_git("rev-parse", "--git-path", "hooks").strip()).resolve()

    def set_config_value(self, key: str, value: str, global_scope: bool = False) -> None:
        _run_git("config", _scope_flag(global_scope), key, value)

    def unset_config_value(self, key: str, global_scope: bool = False) -> bool:
        """Remove a config key. Returns False if it was not set."""
        try:
            _run_git("config", _scope_flag(global_scope), "--unset", key)
        except GitError as e:
            # 5: the key is not present
            if e.returncode == 5:
                return False
            raise
        return True


def _scope_flag(global_scope: bool) -> str:
    return "--global" if global_scope else "--local"

import subprocess

import pytest

from branch_ticket.git import GitError, VersionControlGateway


class FakeGateway(VersionControlGateway):
    """In-memory gateway; a config value that is an exception gets raised."""

    def __init__(self, branch=None, config=None, hooks_dir=None):
        self.branch = branch
        self.config = dict(config or {})
        self.hooks_dir = hooks_dir
        self.config_lookups = []

    def current_branch(self):
        return self.branch

    def config_value(self, key):
        self.config_lookups.append(key)
        value = self.config.get(key)
        if isinstance(value, Exception):
            raise value
        return value

    def hooks_directory(self):
        if self.hooks_dir is None:
            raise GitError("fatal: not a git repository", 128)
        return self.hooks_dir


@pytest.fixture
def fake_gateway():
    return FakeGateway


def git(repo, *args):
    return subprocess.run(["git", *args], cwd=repo, check=True, capture_output=True, text=True).stdout


@pytest.fixture(autouse=True)
def isolated_git_config(tmp_path, monkeypatch):
    """Keep tests away from the user's global and system git config."""
    global_config = tmp_path / "global.gitconfig"
    global_config.touch()
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(global_config))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.delenv("BRANCH_TICKET_VERBOSE", raising=False)
    return global_config


@pytest.fixture
def git_repo(tmp_path, monkeypatch):
    """Create a temporary git repo on branch feature/ABC-123-login, no commits."""
    repo = tmp_path / "repo"
    repo.mkdir()
    monkeypatch.chdir(repo)
    git(repo, "init")
    git(repo, "config", "user.email", "test@test.com")
    git(repo, "config", "user.name", "Test")
    git(repo, "symbolic-ref", "HEAD", "refs/heads/feature/ABC-123-login")
    return repo

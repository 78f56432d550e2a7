import logging

import pytest

from branch_ticket.config import HookConfig, SettingsStore, resolve_config
from branch_ticket.exceptions import InvalidConfigValueError
from branch_ticket.formatter import BracketStyle, ContextPosition
from branch_ticket.git import GitError

from conftest import git


class TestHookConfigDefaults:
    def test_defaults(self):
        config = HookConfig()
        assert config.bracket_style is BracketStyle.SQUARE
        assert config.context_position is ContextPosition.AFTER_COLON


class TestResolveConfig:
    def test_defaults_when_nothing_set(self, fake_gateway):
        assert resolve_config(fake_gateway()) == HookConfig()

    def test_reads_both_keys(self, fake_gateway):
        gateway = fake_gateway(config={
            "branch-ticket.bracketStyle": "round",
            "branch-ticket.contextPosition": "start",
        })
        config = resolve_config(gateway)
        assert config.bracket_style is BracketStyle.ROUND
        assert config.context_position is ContextPosition.START

    def test_overrides_field_by_field(self, fake_gateway):
        gateway = fake_gateway(config={"branch-ticket.contextPosition": "before_colon"})
        config = resolve_config(gateway)
        assert config.bracket_style is BracketStyle.SQUARE
        assert config.context_position is ContextPosition.BEFORE_COLON

    def test_empty_value_keeps_default(self, fake_gateway):
        gateway = fake_gateway(config={"branch-ticket.bracketStyle": ""})
        assert resolve_config(gateway).bracket_style is BracketStyle.SQUARE

    def test_lookup_failure_warns_and_keeps_default(self, fake_gateway, caplog):
        gateway = fake_gateway(config={
            "branch-ticket.bracketStyle": GitError("git config failed: bad config line", 3),
            "branch-ticket.contextPosition": "start",
        })
        with caplog.at_level(logging.WARNING, logger="branch_ticket"):
            config = resolve_config(gateway)
        assert config.bracket_style is BracketStyle.SQUARE
        assert config.context_position is ContextPosition.START
        assert "bad config line" in caplog.text

    def test_invalid_value_warns_and_keeps_default(self, fake_gateway, caplog):
        gateway = fake_gateway(config={"branch-ticket.bracketStyle": "angle"})
        with caplog.at_level(logging.WARNING, logger="branch_ticket"):
            config = resolve_config(gateway)
        assert config.bracket_style is BracketStyle.SQUARE
        assert "angle" in caplog.text

    def test_looks_up_each_key_once(self, fake_gateway):
        gateway = fake_gateway()
        resolve_config(gateway)
        assert gateway.config_lookups == ["branch-ticket.bracketStyle", "branch-ticket.contextPosition"]


class TestSettingsStore:
    def test_get_unset_returns_none(self, git_repo):
        assert SettingsStore().get("bracketStyle") is None

    def test_set_and_get(self, git_repo):
        store = SettingsStore()
        assert store.set("bracketStyle", "Curly") == "curly"
        assert store.get("bracketStyle") == "curly"
        assert git(git_repo, "config", "--local", "branch-ticket.bracketStyle").strip() == "curly"

    def test_set_global(self, git_repo, isolated_git_config):
        SettingsStore().set("contextPosition", "start", global_scope=True)
        assert "contextPosition = start" in isolated_git_config.read_text()
        assert SettingsStore().get("contextPosition") == "start"

    def test_set_rejects_invalid_value(self, git_repo):
        with pytest.raises(InvalidConfigValueError):
            SettingsStore().set("contextPosition", "middle")
        assert SettingsStore().get("contextPosition") is None

    def test_unset(self, git_repo):
        store = SettingsStore()
        store.set("bracketStyle", "round")
        assert store.unset("bracketStyle") is True
        assert store.get("bracketStyle") is None

    def test_unset_missing_key(self, git_repo):
        assert SettingsStore().unset("bracketStyle") is False

    def test_effective_uses_stored_values(self, git_repo):
        store = SettingsStore()
        store.set("bracketStyle", "none")
        assert store.effective() == HookConfig(bracket_style=BracketStyle.NONE)

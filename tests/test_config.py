"""Tests for configuration handling"""

import pytest

from git_worktree_manager.config import Config
from git_worktree_manager.constants import DEFAULT_COMMAND_TIMEOUT, DEFAULT_INITIAL_COMMIT_MESSAGE


class TestConfig:
    """Test Config defaults and validation."""

    def test_defaults(self):
        config = Config()
        assert config.git_executable == "git"
        assert config.command_timeout == DEFAULT_COMMAND_TIMEOUT
        assert config.initial_commit_message == DEFAULT_INITIAL_COMMIT_MESSAGE
        assert config.workers is None
        assert config.case_insensitive is None

    def test_from_dict_ignores_unknown_keys(self):
        config = Config.from_dict({"command_timeout": 5, "default_remote": "origin"})
        assert config.command_timeout == 5
        assert config.get("default_remote") is None
        assert config.get("default_remote", "fallback") == "fallback"

    def test_to_dict_round_trip(self):
        config = Config(command_timeout=10, workers=3, case_insensitive=True)
        assert Config.from_dict(config.to_dict()) == config

    def test_git_executable_is_stripped(self):
        assert Config(git_executable="  /usr/bin/git ").git_executable == "/usr/bin/git"

    @pytest.mark.parametrize("kwargs,message", [
        ({"git_executable": " "}, "git_executable cannot be empty"),
        ({"command_timeout": 0}, "command_timeout must be positive"),
        ({"workers": 0}, "workers must be positive"),
        ({"initial_commit_message": ""}, "initial_commit_message cannot be empty"),
    ])
    def test_invalid_values(self, kwargs, message):
        with pytest.raises(ValueError, match=message):
            Config(**kwargs)

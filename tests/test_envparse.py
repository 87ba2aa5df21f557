"""Tests for cardboard.lib.envparse."""

import pytest

from cardboard.lib.envparse import load_env, parse_env


class TestParseEnv:
    """Tests for parse_env."""

    def test_basic(self):
        text = 'CARDBOARD_LOG_LEVEL=DEBUG\n# comment\n\nCARDBOARD_DEFAULT_ASSIGNEE="alice"\n'
        assert parse_env(text) == {
            "CARDBOARD_LOG_LEVEL": "DEBUG",
            "CARDBOARD_DEFAULT_ASSIGNEE": "alice",
        }

    def test_export_prefix_and_single_quotes(self):
        assert parse_env("export KEY='a value'") == {"KEY": "a value"}

    def test_missing_equals(self):
        """A line without '=' is an error with its line number."""
        with pytest.raises(ValueError, match=":2:"):
            parse_env("A=1\nBROKEN\n", source="config.env")

    def test_bad_key(self):
        with pytest.raises(ValueError, match="invalid key"):
            parse_env("lower=1")

    @pytest.mark.parametrize("value", ["$(whoami)", "`id`", "${HOME}", "a;b", "a && b", "a | b"])
    def test_forbidden_patterns(self, value):
        """Shell metacharacters are rejected, never evaluated."""
        with pytest.raises(ValueError, match="forbidden"):
            parse_env(f"KEY={value}")


class TestLoadEnv:
    """Tests for load_env."""

    def test_missing_file(self, tmp_path):
        assert load_env(tmp_path / "nope.env") == {}

    def test_reads_file(self, tmp_path):
        path = tmp_path / "config.env"
        path.write_text("KEY=value\n")
        assert load_env(path) == {"KEY": "value"}

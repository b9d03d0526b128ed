"""Tests for policy overrides, calendar helpers and log level selection."""

from datetime import UTC, datetime

from uniforms.shared.clock import add_months, as_utc
from uniforms.shared.policy import LimitPolicy, VoidPolicy
from uniforms.utils.logging import get_log_level


class TestPolicyFromEnv:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("UNIFORMS_NEW_STUDENT_ITEM_LIMIT", raising=False)
        monkeypatch.delenv("UNIFORMS_STRIKES_BEFORE_BLOCK", raising=False)

        assert LimitPolicy.from_env() == LimitPolicy()
        assert VoidPolicy.from_env().strikes_before_block == 3

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("UNIFORMS_NEW_STUDENT_ITEM_LIMIT", "5")
        monkeypatch.setenv("UNIFORMS_STRIKES_BEFORE_BLOCK", "2")

        assert LimitPolicy.from_env().new_student_item_limit == 5
        assert VoidPolicy.from_env().strikes_before_block == 2

    def test_blank_value_keeps_default(self, monkeypatch):
        monkeypatch.setenv("UNIFORMS_OLD_STUDENT_ITEM_LIMIT", " ")
        assert LimitPolicy.from_env().old_student_item_limit == 2


class TestClock:
    def test_naive_values_are_utc(self):
        assert as_utc(datetime(2025, 1, 1)).tzinfo is UTC

    def test_add_months_rolls_over_year(self):
        assert add_months(datetime(2025, 11, 15, tzinfo=UTC), 10) == datetime(2026, 9, 15, tzinfo=UTC)

    def test_add_months_clamps_day(self):
        assert add_months(datetime(2024, 1, 31, tzinfo=UTC), 1) == datetime(2024, 2, 29, tzinfo=UTC)


class TestLogLevel:
    def test_level_follows_environment(self, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        monkeypatch.setenv("PROTEAN_ENV", "production")
        assert get_log_level() == "INFO"

    def test_explicit_level_wins(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "ERROR")
        assert get_log_level() == "ERROR"

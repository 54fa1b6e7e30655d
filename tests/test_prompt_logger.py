"""Tests for the on-disk prompt log."""

import pytest

from menuplan.llm import prompt_logger
from menuplan.llm.prompt_logger import enable_prompt_logging, get_session_log_dir, log_prompt, reset_session


@pytest.fixture(autouse=True)
def log_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(prompt_logger, "LOG_DIR", tmp_path / "prompt_logs")
    monkeypatch.setattr(prompt_logger, "LOG_PROMPTS", False)
    reset_session()
    yield tmp_path / "prompt_logs"
    reset_session()


class TestDisabled:
    def test_nothing_written(self, log_dir):
        assert log_prompt(call_site="plan", provider="gemini-2.0-flash", prompt="Genera") is None
        assert get_session_log_dir() is None
        assert not log_dir.exists()


class TestEnabled:
    def test_calls_are_numbered_in_one_session(self, log_dir):
        enable_prompt_logging(True)

        first = log_prompt(call_site="plan", provider="gemini-2.0-flash", prompt="Genera", response="{}")
        second = log_prompt(call_site="enrich", provider="gemini-2.0-flash", prompt="Dettagli", error="timeout")

        session = get_session_log_dir()
        assert session.parent == log_dir
        assert first == session / "01_plan.md"
        assert second == session / "02_enrich.md"
        assert "```\n{}\n```" in first.read_text(encoding="utf-8")
        assert "**ERROR:** timeout" in second.read_text(encoding="utf-8")

    def test_empty_response_is_marked(self):
        enable_prompt_logging(True)
        path = log_prompt(call_site="plan", provider="gemini-2.0-flash", prompt="Genera")
        assert "(No response)" in path.read_text(encoding="utf-8")

    def test_reset_restarts_numbering(self):
        enable_prompt_logging(True)
        log_prompt(call_site="plan", provider="gemini-2.0-flash", prompt="Genera")
        log_prompt(call_site="plan", provider="gemini-2.0-flash", prompt="Genera")

        reset_session()
        path = log_prompt(call_site="plan", provider="gemini-2.0-flash", prompt="Genera")

        assert path.name == "01_plan.md"

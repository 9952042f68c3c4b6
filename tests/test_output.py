"""Tests for the output system: stream discipline, colour control, quiet/verbose."""

from __future__ import annotations

import pytest

from awesome_audit import output as output_module
from awesome_audit.output import (
    OutputManager,
    _should_disable_color,
    get_output,
    reset_output,
    set_output,
)


class TestColorDetection:
    def test_no_color_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NO_COLOR", "")
        assert _should_disable_color() is True

    def test_term_dumb(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "dumb")
        assert _should_disable_color() is True

    def test_color_enabled(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "xterm-256color")
        assert _should_disable_color() is False


class TestStatusLines:
    def test_plain_status_lines_go_to_stdout(self, capsys: pytest.CaptureFixture[str]) -> None:
        out = OutputManager(no_color=True)
        out.status_ok(" - a/b ok.")
        out.status_failed(" - c/d last pushed at 2019-01-01 (status: active)")
        captured = capsys.readouterr()
        assert captured.out == " - a/b ok.\n - c/d last pushed at 2019-01-01 (status: active)\n"
        assert captured.err == ""

    def test_coloured_status_lines(self, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("TERM", raising=False)
        out = OutputManager()
        out.status_ok("ok [a/b]")
        out.status_failed("bad")
        captured = capsys.readouterr().out
        assert "\x1b[32mok [a/b]\x1b[0m" in captured
        assert "\x1b[31mbad\x1b[0m" in captured

    def test_print_data_is_never_styled(self, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("NO_COLOR", raising=False)
        line = "::warning file=README.md,line=3,col=0::Abandoned repository"
        OutputManager().print_data(line)
        assert capsys.readouterr().out == line + "\n"


class TestDiagnostics:
    def test_error_goes_to_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        OutputManager(no_color=True).error("broken")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == "Error: broken\n"

    def test_quiet_suppresses_info_not_error(self, capsys: pytest.CaptureFixture[str]) -> None:
        out = OutputManager(no_color=True, quiet=True)
        out.info("hidden")
        out.error("shown")
        assert capsys.readouterr().err == "Error: shown\n"

    def test_debug_requires_verbose(self, capsys: pytest.CaptureFixture[str]) -> None:
        OutputManager(no_color=True).debug("nope")
        OutputManager(no_color=True, verbose=True).debug("yes")
        assert capsys.readouterr().err == "[debug] yes\n"


class TestGlobalInstance:
    def test_lazy_default(self) -> None:
        reset_output()
        assert isinstance(get_output(), OutputManager)

    def test_set_and_convenience_functions(self, capsys: pytest.CaptureFixture[str]) -> None:
        set_output(OutputManager(no_color=True))
        output_module.print_data("data")
        output_module.info("note")
        captured = capsys.readouterr()
        assert captured.out == "data\n"
        assert captured.err == "note\n"

"""Tests for shipctl.output.console module."""

from __future__ import annotations

import pytest

from shipctl.output.console import (
    ConsoleProtocol,
    MockConsole,
    RichConsole,
    Style,
)


class TestMockConsole:
    """Test MockConsole for testing purposes."""

    def test_print_captures_message(self) -> None:
        console = MockConsole()
        console.print("hello")
        assert console.outputs[0].message == "hello"
        assert console.outputs[0].style == Style.DEFAULT

    def test_prefixes(self) -> None:
        console = MockConsole()
        console.success("built")
        console.error("failed")
        console.warning("careful")
        console.info("fyi")

        assert console.messages == ["OK built", "error: failed", "warning: careful", "info: fyi"]
        assert console.has_success()
        assert console.has_error()
        assert console.has_warning()

    def test_status_records_and_yields(self) -> None:
        console = MockConsole()
        ran = False

        with console.status("pushing tags"):
            ran = True

        assert ran
        assert console.count(Style.STATUS) == 1
        assert console.find("pushing")[0].style == Style.STATUS

    def test_status_does_not_swallow_errors(self) -> None:
        console = MockConsole()

        with pytest.raises(RuntimeError):
            with console.status("work"):
                raise RuntimeError("boom")

    def test_text_and_clear(self) -> None:
        console = MockConsole()
        console.header("build")
        console.newline()
        assert console.text == "build\n"

        console.clear()
        assert console.outputs == []


class TestRichConsole:
    @pytest.fixture(autouse=True)
    def _plain_output(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("FORCE_COLOR", raising=False)

    def test_writes_to_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        console = RichConsole()
        console.error("tag exists")
        console.success("done")

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "error: tag exists" in captured.err
        assert "OK done" in captured.err

    @pytest.mark.parametrize(
        "summary",
        ["Fix [/x] parsing", "Support [bold] tags", "[red]literal[/red]"],
    )
    def test_brackets_are_printed_verbatim(
        self, capsys: pytest.CaptureFixture[str], summary: str
    ) -> None:
        console = RichConsole()

        console.success(f"v1.2.3 - {summary}")
        console.error(summary)
        console.warning(summary)
        console.info(summary)
        console.header(summary)
        console.print(summary, Style.DIM)

        err = capsys.readouterr().err
        assert f"OK v1.2.3 - {summary}" in err
        assert f"error: {summary}" in err
        assert f"warning: {summary}" in err
        assert f"info: {summary}" in err
        assert err.count(summary) == 6

    def test_status_without_terminal_prints_a_line(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        console = RichConsole()

        with console.status("uploading [6] asset(s)"):
            console.info("inside")

        err = capsys.readouterr().err
        assert "- uploading [6] asset(s)" in err
        assert "info: inside" in err


def test_implementations_satisfy_protocol() -> None:
    consoles: list[ConsoleProtocol] = [MockConsole(), RichConsole()]
    assert len(consoles) == 2

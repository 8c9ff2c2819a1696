"""Tests for operator-facing status lines."""
import io
import logging

import pytest

from docker_installer.lib.status import StatusReporter


@pytest.fixture
def streams():
    return io.StringIO(), io.StringIO()


@pytest.mark.unit
class TestStatusReporter:
    def test_ok_and_info_go_to_stdout(self, streams):
        out, err = streams
        r = StatusReporter(color=False, out=out, err=err)
        r.ok("Docker is already installed")
        r.info("Current entropy level: 256 bits")
        assert out.getvalue() == "✓ Docker is already installed\nℹ Current entropy level: 256 bits\n"
        assert err.getvalue() == ""

    def test_warn_and_error_go_to_stderr_and_log(self, streams, caplog):
        out, err = streams
        r = StatusReporter(color=False, out=out, err=err)
        with caplog.at_level(logging.WARNING):
            r.warn("Some packages could not be removed, continuing...")
            r.error("User zed does not exist")
        assert "⚠ Some packages could not be removed" in err.getvalue()
        assert "✗ User zed does not exist" in err.getvalue()
        assert out.getvalue() == ""
        assert [rec.levelname for rec in caplog.records] == ["WARNING", "ERROR"]

    def test_brackets_are_printed_literally(self, streams):
        out, err = streams
        r = StatusReporter(color=False, out=out, err=err)
        r.info("deb [arch=amd64 signed-by=/etc/apt/keyrings/docker.asc] stable")
        r.line("  [bold]not markup[/bold]")
        text = out.getvalue()
        assert "[arch=amd64 signed-by=/etc/apt/keyrings/docker.asc]" in text
        assert "  [bold]not markup[/bold]\n" in text

    def test_long_lines_are_not_wrapped(self, streams):
        out, err = streams
        StatusReporter(color=False, out=out, err=err).line("x" * 200)
        assert out.getvalue() == "x" * 200 + "\n"

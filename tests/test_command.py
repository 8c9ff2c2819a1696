"""Tests for the command runner."""
import sys

import pytest

from docker_installer.lib.command import CommandError, fmt_argv, run_cmd


@pytest.mark.unit
class TestRunCmd:
    def test_captures_stdout(self):
        r = run_cmd([sys.executable, "-c", "print('hello')"])
        assert r.ok
        assert r.stdout.strip() == "hello"

    def test_failure_raises_with_returncode(self):
        with pytest.raises(CommandError) as exc:
            run_cmd([sys.executable, "-c", "import sys; sys.exit(3)"])
        assert exc.value.returncode == 3

    def test_unchecked_failure_returns_result(self):
        r = run_cmd([sys.executable, "-c", "import sys; sys.exit(4)"], check=False)
        assert r.returncode == 4
        assert not r.ok

    def test_missing_binary_is_127(self):
        r = run_cmd(["definitely-not-a-real-binary-xyz"], check=False)
        assert r.returncode == 127
        with pytest.raises(CommandError) as exc:
            run_cmd(["definitely-not-a-real-binary-xyz"])
        assert exc.value.returncode == 127

    def test_dry_run_does_not_execute(self, tmp_path):
        marker = tmp_path / "ran"
        r = run_cmd([sys.executable, "-c", f"open({str(marker)!r}, 'w').close()"], dry_run=True)
        assert r.ok
        assert not marker.exists()

    def test_fmt_argv_quotes(self):
        assert fmt_argv(["echo", "a b"]) == "echo 'a b'"

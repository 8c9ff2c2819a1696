"""Tests for apt/dpkg helpers."""
import pytest

from docker_installer.lib import pkg
from docker_installer.lib.command import CmdResult

DPKG_QUERY = """\
docker-ce install ok installed
containerd.io install ok installed
runc deinstall ok config-files
"""


@pytest.mark.unit
class TestDpkgInstalled:
    def test_exact_names_only(self, monkeypatch):
        seen = {}

        def fake_run(argv, **kwargs):
            seen["argv"] = list(argv)
            return CmdResult(argv=list(argv), returncode=1, stdout=DPKG_QUERY, stderr="no packages found matching containerd")

        monkeypatch.setattr(pkg, "run_cmd", fake_run)
        got = pkg.dpkg_installed(["docker-ce", "containerd", "containerd.io", "runc"])
        assert got == {"docker-ce", "containerd.io"}
        assert seen["argv"][:3] == ["dpkg-query", "-W", "-f=${Package} ${Status}\n"]

    def test_empty_query_runs_nothing(self, monkeypatch):
        monkeypatch.setattr(pkg, "run_cmd", lambda *a, **k: pytest.fail("should not run"))
        assert pkg.dpkg_installed([]) == set()


@pytest.mark.unit
class TestAptPackageManager:
    def test_install_is_noninteractive_and_honours_dry_run(self, monkeypatch):
        calls = []
        monkeypatch.setattr(pkg, "run_cmd", lambda argv, **kw: calls.append((list(argv), kw)))
        pkg.AptPackageManager(dry_run=True).install(["haveged"])
        argv, kw = calls[0]
        assert argv == ["apt-get", "install", "-y", "haveged"]
        assert kw["env"] == {"DEBIAN_FRONTEND": "noninteractive"}
        assert kw["dry_run"] is True

    def test_remove_nothing_is_noop(self, monkeypatch):
        monkeypatch.setattr(pkg, "run_cmd", lambda *a, **k: pytest.fail("should not run"))
        pkg.AptPackageManager().remove([])

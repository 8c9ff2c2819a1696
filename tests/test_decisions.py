"""Tests for policy decisions: entropy daemon and conflicting packages."""
import io

import pytest

from docker_installer.decisions import classify_conflicting_packages, should_install_entropy_daemon
from docker_installer.lib.status import StatusReporter
from docker_installer.lib.virt import VirtualizationSignal

from conftest import ScriptedPrompter

NONE = VirtualizationSignal("none", "none", "high", "systemd-detect-virt")
KVM = VirtualizationSignal("hypervisor", "kvm", "high", "systemd-detect-virt")
UNSURE = VirtualizationSignal("uncertain", "unknown", "unknown", "none")


@pytest.fixture
def reporter():
    return StatusReporter(color=False, out=io.StringIO(), err=io.StringIO())


@pytest.mark.unit
class TestShouldInstallEntropyDaemon:
    def test_none_never_prompts(self, reporter):
        prompter = ScriptedPrompter(choices=["y"])
        assert should_install_entropy_daemon(NONE, prompter, reporter) is False
        assert prompter.prompts == []

    def test_known_hypervisor_never_prompts(self, reporter):
        prompter = ScriptedPrompter(choices=["n"])
        assert should_install_entropy_daemon(KVM, prompter, reporter) is True
        assert prompter.prompts == []

    @pytest.mark.parametrize("answer,expected", [("y", True), ("Y", True), ("n", False), ("N", False), ("", False), ("x", False)])
    def test_uncertain_asks(self, reporter, answer, expected):
        prompter = ScriptedPrompter(choices=[answer])
        assert should_install_entropy_daemon(UNSURE, prompter, reporter) is expected
        assert len(prompter.prompts) == 1

    def test_uncertain_without_terminal_defaults_to_bare_metal(self, reporter):
        prompter = ScriptedPrompter(channel=False)
        assert should_install_entropy_daemon(UNSURE, prompter, reporter) is False


@pytest.mark.unit
class TestClassifyConflictingPackages:
    def test_intersection(self):
        deny = ["docker.io", "containerd", "runc"]
        assert classify_conflicting_packages({"runc", "vim", "containerd.io"}, deny) == {"runc"}

    def test_nothing_installed(self):
        assert classify_conflicting_packages(set(), ["docker.io"]) == set()

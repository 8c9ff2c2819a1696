from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Protocol, Sequence, Set

from .command import run_cmd

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Account:
    name: str
    uid: int
    shell: str = ""


def parse_passwd(text: str) -> List[Account]:
    """Parse passwd(5) lines (as printed by ``getent passwd``)."""

    accounts: List[Account] = []
    for line in text.splitlines():
        fields = line.split(":")
        if len(fields) < 7:
            continue
        try:
            uid = int(fields[2])
        except ValueError:
            continue
        accounts.append(Account(name=fields[0], uid=uid, shell=fields[6]))
    return accounts


def filter_regular_accounts(
    accounts: Iterable[Account],
    *,
    min_uid: int,
    max_uid: int,
    excluded_shell_markers: Sequence[str],
) -> List[Account]:
    """Keep human login accounts: uid in [min_uid, max_uid) with a real shell."""

    out: List[Account] = []
    for a in accounts:
        if not (min_uid <= a.uid < max_uid):
            continue
        if any(marker in a.shell for marker in excluded_shell_markers):
            continue
        out.append(a)
    return out


def group_members(getent_group_line: str) -> Set[str]:
    # name:passwd:gid:member1,member2
    fields = getent_group_line.strip().split(":")
    if len(fields) < 4 or not fields[3]:
        return set()
    return {m.strip() for m in fields[3].split(",") if m.strip()}


class AccountDatabase(Protocol):
    def list_accounts(self) -> List[Account]:
        ...

    def user_exists(self, name: str) -> bool:
        ...

    def in_group(self, name: str, group: str) -> bool:
        ...

    def add_to_group(self, name: str, group: str) -> None:
        ...


class PosixAccountDatabase:
    def __init__(
        self,
        *,
        min_uid: int = 1000,
        max_uid: int = 65534,
        excluded_shell_markers: Sequence[str] = ("false", "nologin"),
        dry_run: bool = False,
    ) -> None:
        self.min_uid = min_uid
        self.max_uid = max_uid
        self.excluded_shell_markers = tuple(excluded_shell_markers)
        self.dry_run = dry_run

    def list_accounts(self) -> List[Account]:
        r = run_cmd(["getent", "passwd"])
        return filter_regular_accounts(
            parse_passwd(r.stdout or ""),
            min_uid=self.min_uid,
            max_uid=self.max_uid,
            excluded_shell_markers=self.excluded_shell_markers,
        )

    def user_exists(self, name: str) -> bool:
        return run_cmd(["getent", "passwd", name], check=False).returncode == 0

    def in_group(self, name: str, group: str) -> bool:
        # Effective groups first (covers primary group), then the group's member list.
        r = run_cmd(["id", "-nG", name], check=False)
        if r.returncode == 0 and group in (r.stdout or "").split():
            return True
        g = run_cmd(["getent", "group", group], check=False)
        if g.returncode == 0:
            return name in group_members(g.stdout or "")
        return False

    def add_to_group(self, name: str, group: str) -> None:
        run_cmd(["usermod", "-aG", group, name], dry_run=self.dry_run)

from __future__ import annotations

import logging
from typing import Any, Dict, List

from ..lib.accounts import Account
from ..lib.selection import parse_selection, resolve_selection
from ..pipeline import STATUS_SKIPPED, STATUS_WARNED

logger = logging.getLogger(__name__)


class ManageUsersStep:
    """Offer to add regular accounts to the docker group.

    Enumerate -> Prompt -> Resolve. Without any terminal to ask on, the
    eligible accounts are only listed.
    """

    step_id = "80_manage_users"
    title = "Docker group membership"
    fatal = False

    def accounts(self, ctx, state: Dict[str, Any]) -> List[Account]:
        """Regular accounts, enumerated once per run and kept in ``state``."""

        if "accounts" not in state:
            state["accounts"] = ctx.accounts.list_accounts()
        return state["accounts"]

    def eligible_accounts(self, ctx, state: Dict[str, Any]) -> List[Account]:
        group = ctx.cfg.docker_group
        return [a for a in self.accounts(ctx, state) if not ctx.accounts.in_group(a.name, group)]

    def is_satisfied(self, ctx, state: Dict[str, Any]) -> bool:
        accounts = self.accounts(ctx, state)
        if not accounts:
            ctx.reporter.warn("No regular user accounts found")
            return True
        group = ctx.cfg.docker_group
        if all(ctx.accounts.in_group(a.name, group) for a in accounts):
            ctx.reporter.ok(f"All user accounts are already in {group} group")
            return True
        return False

    def add_user(self, ctx, account: Account) -> bool:
        group = ctx.cfg.docker_group
        if not ctx.accounts.user_exists(account.name):
            ctx.reporter.error(f"User {account.name} does not exist")
            return False
        if ctx.accounts.in_group(account.name, group):
            ctx.reporter.ok(f"User {account.name} is already in {group} group")
            return True
        try:
            ctx.accounts.add_to_group(account.name, group)
        except Exception as e:
            logger.warning("usermod failed for %s: %s", account.name, e)
            ctx.reporter.error(f"Failed to add {account.name} to {group} group")
            return False
        ctx.reporter.ok(f"Added {account.name} to {group} group")
        logger.info("Added user %s to %s group", account.name, group)
        return True

    def _list_only(self, ctx, eligible: List[Account]) -> None:
        group = ctx.cfg.docker_group
        ctx.reporter.warn("Non-interactive mode detected. Cannot prompt for user selection.")
        ctx.reporter.info(f"User accounts that could be added to {group} group:")
        for a in eligible:
            ctx.reporter.line(f"  - {a.name}")
        ctx.reporter.info(f"To add users to {group} group later, run:")
        ctx.reporter.line(f"  sudo usermod -aG {group} USERNAME")
        ctx.reporter.line("  OR re-run this installer interactively")

    def run(self, ctx, state: Dict[str, Any]) -> str | None:
        group = ctx.cfg.docker_group
        eligible = self.eligible_accounts(ctx, state)
        state.setdefault("execution", {}).setdefault("decisions", {})["eligible_users"] = [a.name for a in eligible]

        if not ctx.prompter.has_channel():
            self._list_only(ctx, eligible)
            return STATUS_SKIPPED

        ctx.reporter.line()
        ctx.reporter.info(f"Available user accounts (not in {group} group):")
        for i, a in enumerate(eligible, start=1):
            ctx.reporter.line(f"  {i}. {a.name}")
        ctx.reporter.line()
        ctx.reporter.line("Enter user selection:")
        ctx.reporter.line("  - Single numbers: 1,2,3")
        ctx.reporter.line("  - Ranges: 1-3,5")
        ctx.reporter.line("  - Press Enter to skip user management")

        raw = ctx.prompter.read_line("Selection: ", "").strip()
        if not raw:
            ctx.reporter.info("Skipping user management")
            return STATUS_SKIPPED

        selection = parse_selection(raw, limit=len(eligible))
        for token in selection.rejected + selection.out_of_range:
            ctx.reporter.warn(f"Invalid selection: {token}")
        chosen, invalid = resolve_selection(selection, eligible)
        for index in invalid:
            ctx.reporter.warn(f"Invalid selection: {index}")

        added = [a.name for a in chosen if self.add_user(ctx, a)]
        failed = [a.name for a in chosen if a.name not in added]
        state["execution"]["decisions"]["added_users"] = added

        if added:
            ctx.reporter.line()
            ctx.reporter.ok(f"Successfully added {len(added)} user(s) to {group} group: {' '.join(added)}")
            ctx.reporter.info("Users will need to log out and back in for group changes to take effect")
            ctx.reporter.info(f"Or run: newgrp {group}")

        if failed:
            state["execution"].setdefault("warnings", []).append(
                {"step": self.step_id, "warning": f"could not add: {', '.join(failed)}"}
            )
            return STATUS_WARNED
        return None

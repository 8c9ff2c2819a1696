from .step_10_check_privileges import CheckPrivilegesStep
from .step_20_check_host import CheckHostStep
from .step_30_remove_conflicts import RemoveConflictsStep
from .step_40_install_prerequisites import InstallPrerequisitesStep
from .step_50_setup_repository import SetupRepositoryStep
from .step_60_install_runtime import InstallRuntimeStep
from .step_70_entropy_daemon import EntropyDaemonStep
from .step_80_manage_users import ManageUsersStep
from .step_90_verify import VerifyInstallationStep

__all__ = [
    "CheckPrivilegesStep",
    "CheckHostStep",
    "RemoveConflictsStep",
    "InstallPrerequisitesStep",
    "SetupRepositoryStep",
    "InstallRuntimeStep",
    "EntropyDaemonStep",
    "ManageUsersStep",
    "VerifyInstallationStep",
]

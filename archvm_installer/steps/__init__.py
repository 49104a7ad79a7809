from .step_10_preflight import PreflightStep
from .step_15_select_disk import SelectDiskStep
from .step_20_partition_fs import PartitionFilesystemStep
from .step_30_mount_target import MountTargetStep
from .step_35_install_base import InstallBaseStep
from .step_40_write_fstab import WriteFstabStep
from .step_50_configure_system import ConfigurationPhaseError, ConfigureSystemStep
from .step_90_finalize_reboot import FinalizeRebootStep

__all__ = [
    "PreflightStep",
    "SelectDiskStep",
    "PartitionFilesystemStep",
    "MountTargetStep",
    "InstallBaseStep",
    "WriteFstabStep",
    "ConfigureSystemStep",
    "ConfigurationPhaseError",
    "FinalizeRebootStep",
]

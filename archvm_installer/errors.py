from __future__ import annotations


class InstallerError(RuntimeError):
    """Base class for errors the installer reports to the operator."""


class ConfigError(InstallerError):
    pass


class PreflightError(InstallerError):
    """The host is not in a state we can install from (privilege, network, disk)."""


class OperatorDeclined(InstallerError):
    """The operator answered anything but yes to a gating prompt."""

"""Package staging and installation."""
from __future__ import annotations

from .package import (
    DEFAULT_NAME,
    MAIN,
    NOINSTALL_NAME,
    InstallPolicy,
    Package,
    PackageState,
    PreInstallHook,
    TargetFile,
)
from .rules import PackagingRule
from .settings import InstallerSettings

__all__ = [
    "Package",
    "TargetFile",
    "InstallPolicy",
    "PackageState",
    "PreInstallHook",
    "PackagingRule",
    "InstallerSettings",
    "MAIN",
    "DEFAULT_NAME",
    "NOINSTALL_NAME",
]

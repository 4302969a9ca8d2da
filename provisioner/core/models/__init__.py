"""
Domain models — Pydantic types for the provisioner.

All models are re-exported here for convenient access:

    from provisioner.core.models import EnvironmentStatus, InstallResult, Procedure
"""

from provisioner.core.models.environment import (
    EnvironmentStatus,
    HostOS,
    InstallResult,
    normalize_os,
)
from provisioner.core.models.strategy import (
    ChainOutcome,
    InstallationStrategy,
    Procedure,
    TerminalLaunch,
)

__all__ = [
    # strategy.py
    "ChainOutcome",
    # environment.py
    "EnvironmentStatus",
    "HostOS",
    "InstallResult",
    "InstallationStrategy",
    "Procedure",
    "TerminalLaunch",
    "normalize_os",
]

"""Deploy library: validation, host state, lifecycle and status report."""

from evdeploy.deploy.params import DeployParams
from evdeploy.deploy.validate import validate
from evdeploy.deploy.state import (
    CONTAINER_PATTERNS,
    SHARED_VOLUME,
    DeploymentStateManager,
    ExistingState,
    match_containers,
)
from evdeploy.deploy.lifecycle import CleanupGuard, LifecycleController
from evdeploy.deploy.report import report_status

__all__ = [
    "DeployParams",
    "validate",
    "CONTAINER_PATTERNS",
    "SHARED_VOLUME",
    "DeploymentStateManager",
    "ExistingState",
    "match_containers",
    "CleanupGuard",
    "LifecycleController",
    "report_status",
]

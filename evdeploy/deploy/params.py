"""Deploy parameters dataclass."""

from dataclasses import dataclass, field

from evdeploy.provisioning.fetch import DEFAULT_ARTIFACT_BASE_URL, DEFAULT_FETCH_TIMEOUT
from evdeploy.stacks.layout import DEFAULT_DEPLOYMENT_DIR


@dataclass(frozen=True)
class DeployParams:
    """All run-wide settings, fixed before the lifecycle starts."""

    deployment_dir: str = DEFAULT_DEPLOYMENT_DIR
    verbose: bool = False
    dry_run: bool = False  # skip volume creation and container actions
    force: bool = False  # continue over an existing deployment without asking
    log_file: str | None = None
    cleanup_on_error: bool = True
    artifact_source: str = DEFAULT_ARTIFACT_BASE_URL
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT
    env_overrides: dict = field(default_factory=dict)  # {stack: {KEY: value}}

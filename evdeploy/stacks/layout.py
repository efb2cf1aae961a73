"""Filesystem layout of a deployment root."""

from dataclasses import dataclass
from pathlib import Path

from evdeploy.stacks.manifest import COMPOSE_FILENAME, ENV_FILENAME, SHARED_LIB

MARKER_FILENAME = ".created_by_script"
DEFAULT_DEPLOYMENT_DIR = "~/rollkit-deployment"


@dataclass(frozen=True)
class DeploymentLayout:
    """Paths under ``root``: ``lib/``, ``stacks/<name>/`` and the marker file."""

    root: Path

    @classmethod
    def at(cls, root) -> "DeploymentLayout":
        return cls(Path(root).expanduser().absolute())

    @property
    def marker(self) -> Path:
        return self.root / MARKER_FILENAME

    @property
    def stacks_root(self) -> Path:
        return self.root / "stacks"

    def stack_dir(self, stack: str) -> Path:
        if stack == SHARED_LIB:
            return self.root / "lib"
        return self.stacks_root / stack

    def env_file(self, stack: str) -> Path:
        return self.stack_dir(stack) / ENV_FILENAME

    def compose_file(self, stack: str) -> Path:
        return self.stack_dir(stack) / COMPOSE_FILENAME

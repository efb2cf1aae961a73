"""Stack manifests and the deployment directory layout."""

from evdeploy.stacks.layout import DEFAULT_DEPLOYMENT_DIR, MARKER_FILENAME, DeploymentLayout
from evdeploy.stacks.manifest import (
    COMPOSE_FILENAME,
    ENV_FILENAME,
    MANIFESTS,
    SHARED_LIB,
    SHARED_MANIFEST,
    StackManifest,
    get_manifest,
)

__all__ = [
    "COMPOSE_FILENAME",
    "DEFAULT_DEPLOYMENT_DIR",
    "ENV_FILENAME",
    "MANIFESTS",
    "MARKER_FILENAME",
    "SHARED_LIB",
    "SHARED_MANIFEST",
    "DeploymentLayout",
    "StackManifest",
    "get_manifest",
]

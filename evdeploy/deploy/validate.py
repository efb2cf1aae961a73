"""Pre-flight validation: every required artifact exists and is readable."""

import logging
import os

from evdeploy.errors import MissingArtifact
from evdeploy.planner.types import DeploymentPlan
from evdeploy.stacks.layout import DeploymentLayout
from evdeploy.stacks.manifest import SHARED_MANIFEST, get_manifest

logger = logging.getLogger(__name__)


def validate(plan: DeploymentPlan, layout: DeploymentLayout) -> None:
    """Check the shared lib files, then each stack in plan order.

    Read-only. Must run before any shared resource is created.

    Raises:
        MissingArtifact: for the first missing or unreadable file.
    """
    logger.info("Validating deployment files...")
    manifests = [SHARED_MANIFEST] + [get_manifest(stack) for stack in plan.stacks]
    for manifest in manifests:
        directory = layout.stack_dir(manifest.name)
        for name in manifest.required_files(plan.has_da):
            path = directory / name
            if not path.is_file() or not os.access(path, os.R_OK):
                raise MissingArtifact(manifest.name, path)
        logger.debug(f"{manifest.name} files validation completed")
    logger.info("All deployment files validation completed successfully")

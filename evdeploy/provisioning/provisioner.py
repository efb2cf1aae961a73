"""Provisioner: fetch each selected stack's manifest into its stack directory."""

import logging
import os
import stat
from pathlib import Path

from evdeploy.errors import ArtifactPermissionError, ConfigWriteError
from evdeploy.planner.types import DeploymentPlan
from evdeploy.stacks.layout import DeploymentLayout
from evdeploy.stacks.manifest import SHARED_MANIFEST, StackManifest, get_manifest

logger = logging.getLogger(__name__)

_EXEC_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH


class Provisioner:
    """Creates the deployment root and stack directories and fills them with artifacts.

    Any fetch failure aborts the whole run: a partially provisioned stack
    would pass later steps incorrectly.
    """

    def __init__(self, layout: DeploymentLayout, source, run_id: str):
        self.layout = layout
        self.source = source
        self.run_id = run_id

    def ensure_root(self) -> bool:
        """Create the deployment root; write the marker only if this run created it.

        Returns:
            True if the root was created by this call.
        """
        root = self.layout.root
        if root.exists():
            logger.debug(f"Deployment root {root} already exists, no marker written")
            return False
        try:
            root.mkdir(parents=True)
            self.layout.marker.write_text(f"{self.run_id}\n")
        except OSError as e:
            raise ConfigWriteError(root, e.strerror or str(e)) from e
        logger.debug(f"Created deployment root {root}")
        return True

    def provision(self, plan: DeploymentPlan) -> dict[str, Path]:
        """Fetch the shared lib files, then every stack in plan order.

        Returns:
            Mapping of stack name to its directory, in plan order.
        """
        logger.info("Downloading deployment files...")
        self.ensure_root()
        self.provision_stack(SHARED_MANIFEST, with_da=plan.has_da)

        directories = {}
        for stack in plan.stacks:
            directories[stack] = self.provision_stack(get_manifest(stack), with_da=plan.has_da)

        logger.info("All deployment files downloaded successfully")
        return directories

    def provision_stack(self, manifest: StackManifest, with_da: bool) -> Path:
        target_dir = self.layout.stack_dir(manifest.name)
        logger.info(f"Downloading {manifest.name} deployment files...")
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ConfigWriteError(target_dir, e.strerror or str(e)) from e

        compose = manifest.compose_source(with_da)
        if compose is not None:
            kind = "DA-integrated" if compose == manifest.compose_da else "standalone"
            logger.debug(f"[{manifest.name}] Using {kind} compose file {compose}")

        for source_path in manifest.source_paths(with_da):
            name = manifest.target_name(source_path)
            logger.debug(f"[{manifest.name}] Downloading {source_path} -> {name}")
            content = self.source.fetch(source_path)
            _write_bytes(target_dir / name, content)

        for entrypoint in manifest.entrypoints:
            path = target_dir / entrypoint
            try:
                os.chmod(path, path.stat().st_mode | _EXEC_BITS)
            except OSError as e:
                raise ArtifactPermissionError(manifest.name, path, e.strerror or str(e)) from e

        logger.info(f"{manifest.name} deployment files downloaded successfully")
        return target_dir


def _write_bytes(path: Path, content: bytes) -> None:
    try:
        path.write_bytes(content)
    except OSError as e:
        raise ConfigWriteError(path, e.strerror or str(e)) from e

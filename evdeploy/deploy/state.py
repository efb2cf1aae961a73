"""Deployment-state manager: existing deployments, overwrite confirmation, shared volume."""

import logging
import shutil
from dataclasses import dataclass

from evdeploy.errors import InvalidSelection, ResourceCreationError, UserAborted
from evdeploy.planner.types import ALL_STACKS, DA_CELESTIA, FULLNODE, SINGLE_SEQUENCER
from evdeploy.prompt import Prompter
from evdeploy.provisioning.shell import run_shell_cmd
from evdeploy.stacks.layout import DeploymentLayout

logger = logging.getLogger(__name__)

SHARED_VOLUME = "celestia-node-export"

# Substring match on container names; false positives just mean an extra question
CONTAINER_PATTERNS = {
    DA_CELESTIA: ("celestia-app", "celestia-node", "da-permission-fix"),
    SINGLE_SEQUENCER: ("sequencer", "reth-sequencer", "jwt-init"),
    FULLNODE: ("fullnode", "reth-fullnode"),
}


@dataclass(frozen=True)
class ExistingState:
    directory_present: bool = False
    stacks_found: tuple[str, ...] = ()
    containers_running: tuple[str, ...] = ()

    @property
    def found(self) -> bool:
        return self.directory_present or bool(self.stacks_found) or bool(self.containers_running)


def match_containers(names) -> tuple[str, ...]:
    """Stacks whose name patterns match any of the given container names."""
    matched = []
    for stack in ALL_STACKS:
        patterns = CONTAINER_PATTERNS[stack]
        if any(p in name for name in names for p in patterns):
            matched.append(stack)
    return tuple(matched)


class DeploymentStateManager:
    """Inspects and guards host state outside the stack directories.

    Docker commands go through ``run_cmd`` (same contract as
    ``run_shell_cmd``); mutating ones are skipped in dry-run mode.
    """

    def __init__(self, layout: DeploymentLayout, prompter: Prompter, dry_run=False, force=False, run_cmd=run_shell_cmd):
        self.layout = layout
        self.prompter = prompter
        self.dry_run = dry_run
        self.force = force
        self.run_cmd = run_cmd

    def docker_available(self) -> bool:
        return shutil.which("docker") is not None

    def stacks_with_compose(self) -> tuple[str, ...]:
        return tuple(s for s in ALL_STACKS if self.layout.compose_file(s).is_file())

    def running_container_names(self) -> list[str]:
        if not self.docker_available():
            logger.debug("docker not found, skipping running container check")
            return []
        rc, stdout, _ = self.run_cmd(["docker", "ps", "--format", "{{.Names}}"], timeout=30)
        if rc != 0:
            logger.debug("docker ps failed, assuming no running containers")
            return []
        return [line.strip() for line in stdout.splitlines() if line.strip()]

    def detect_existing(self) -> ExistingState:
        directory_present = self.layout.root.is_dir()
        stacks_found = self.stacks_with_compose() if directory_present else ()
        if directory_present:
            logger.warning(f"Existing deployment directory found: {self.layout.root}")

        containers = match_containers(self.running_container_names())
        if containers:
            logger.warning(f"Found running containers from previous deployment: {' '.join(containers)}")

        return ExistingState(directory_present, stacks_found, containers)

    def confirm_continue(self, state: ExistingState) -> None:
        """Ask before continuing over an existing deployment.

        Raises:
            UserAborted: if the operator declines (the default answer).
        """
        if not state.found:
            return

        logger.warning("")
        logger.warning("==========================================")
        logger.warning("EXISTING DEPLOYMENT DETECTED")
        logger.warning("==========================================")
        if state.stacks_found:
            logger.warning(f"Found existing deployment files for: {' '.join(state.stacks_found)}")
        if state.containers_running:
            logger.warning(f"Found running containers for: {' '.join(state.containers_running)}")
        logger.warning("Continuing will overwrite existing deployment files and may conflict with running containers.")
        logger.info("")
        logger.info("To completely reset your deployment:")
        logger.info("  1. Stop running containers: docker compose down")
        logger.info("  2. Remove volumes: docker volume prune -f")
        logger.info(f"  3. Remove deployment directory: rm -rf {self.layout.root}")
        logger.info("")

        if self.force:
            logger.warning("--force given, continuing over the existing deployment")
            return

        while True:
            answer = self.prompter.ask("confirm", "Do you want to continue with the deployment? (y/N): ")
            normalized = answer.strip().lower()
            if normalized in ("y", "yes"):
                logger.info("User confirmed to continue with existing deployment")
                logger.info("You may need to manually clean up Docker volumes if you experience issues with persistent data.")
                return
            if normalized in ("n", "no", ""):
                logger.info("User chose to abort deployment")
                raise UserAborted()
            if not self.prompter.interactive:
                raise InvalidSelection("confirm", answer, ["yes", "no"])
            logger.info("Please answer 'y' for yes or 'n' for no.")

    def create_shared_resource_if_absent(self) -> bool:
        """Create the token hand-off volume unless it exists.

        Returns:
            True if the volume was created by this call.

        Raises:
            ResourceCreationError: if ``docker volume create`` fails.
        """
        logger.info("Creating shared volume for DA auth token...")
        if self.dry_run:
            logger.info(f"[dry-run] docker volume create {SHARED_VOLUME} (if absent)")
            return False

        rc, _, _ = self.run_cmd(["docker", "volume", "inspect", SHARED_VOLUME], timeout=30)
        if rc == 0:
            logger.info(f"Shared volume {SHARED_VOLUME} already exists")
            return False

        rc, _, stderr = self.run_cmd(["docker", "volume", "create", SHARED_VOLUME], timeout=60)
        if rc != 0:
            raise ResourceCreationError(SHARED_VOLUME, stderr.strip() or f"exit code {rc}")
        logger.info(f"Created shared volume: {SHARED_VOLUME}")
        return True

    def stop_stack(self, stack: str) -> bool:
        """docker compose down in the stack directory. Returns True on success."""
        if not self.layout.compose_file(stack).is_file():
            return False
        logger.debug(f"Stopping {stack} Docker containers...")
        rc, _, stderr = self.run_cmd(
            ["docker", "compose", "down", "--remove-orphans"],
            dry_run=self.dry_run,
            timeout=300,
            cwd=str(self.layout.stack_dir(stack)),
        )
        if rc != 0:
            logger.warning(f"Failed to stop {stack} containers: {stderr.strip() or f'exit code {rc}'}")
        return rc == 0

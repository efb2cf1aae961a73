"""Lifecycle controller: run the deployment stages with armed rollback.

Stages run strictly in order:

    init -> detect-existing -> select-plan -> provision -> configure
         -> validate -> prepare-resources -> report -> done

Any fatal error or SIGINT/SIGTERM before ``done`` moves the run to
``failed`` / ``interrupted`` and fires the cleanup guard once: containers of
every stack with a compose file are stopped (best effort) and the deployment
root is removed if the marker proves this run created it.
"""

import logging
import shutil
import signal
import threading
import uuid

from evdeploy import __version__
from evdeploy.configure.patcher import ConfigurationPatcher
from evdeploy.deploy.params import DeployParams
from evdeploy.deploy.report import report_status
from evdeploy.deploy.state import DeploymentStateManager
from evdeploy.deploy.validate import validate
from evdeploy.errors import DeployError, SignalInterrupt, UserAborted
from evdeploy.planner.selection import select_plan
from evdeploy.planner.types import ALL_STACKS
from evdeploy.prompt import Prompter
from evdeploy.provisioning.fetch import open_content_source
from evdeploy.provisioning.provisioner import Provisioner
from evdeploy.provisioning.shell import run_shell_cmd
from evdeploy.stacks.layout import DeploymentLayout

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1

STAGE_INIT = "init"
STAGE_DETECT_EXISTING = "detect-existing"
STAGE_SELECT_PLAN = "select-plan"
STAGE_PROVISION = "provision"
STAGE_CONFIGURE = "configure"
STAGE_VALIDATE = "validate"
STAGE_PREPARE_RESOURCES = "prepare-resources"
STAGE_REPORT = "report"
STAGE_DONE = "done"
STAGE_FAILED = "failed"
STAGE_INTERRUPTED = "interrupted"

_HANDLED_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class CleanupGuard:
    """A deferred action that fires at most once unless disarmed first."""

    def __init__(self, action, armed=True):
        self._action = action
        self._armed = armed
        self._fired = False

    @property
    def armed(self) -> bool:
        return self._armed and not self._fired

    def disarm(self) -> None:
        self._armed = False

    def fire(self) -> bool:
        """Run the action if still armed. Returns True if it ran."""
        if not self.armed:
            return False
        self._fired = True
        self._action()
        return True


def _raise_signal_interrupt(signum, frame):
    raise SignalInterrupt(signum)


def _install_signal_handlers(handler) -> dict | None:
    # signal.signal only works from the main thread
    if threading.current_thread() is not threading.main_thread():
        return None
    return {sig: signal.signal(sig, handler) for sig in _HANDLED_SIGNALS}


def _restore_signal_handlers(previous: dict | None) -> None:
    if previous is None:
        return
    for sig, handler in previous.items():
        signal.signal(sig, handler)


class LifecycleController:
    def __init__(
        self,
        params: DeployParams,
        prompter: Prompter,
        source_factory=None,
        run_cmd=run_shell_cmd,
        run_id: str | None = None,
    ):
        self.params = params
        self.prompter = prompter
        self.layout = DeploymentLayout.at(params.deployment_dir)
        self.run_id = run_id or uuid.uuid4().hex
        self.state = DeploymentStateManager(
            self.layout, prompter, dry_run=params.dry_run, force=params.force, run_cmd=run_cmd
        )
        self._source_factory = source_factory or (
            lambda: open_content_source(params.artifact_source, timeout=params.fetch_timeout)
        )
        self.stage = STAGE_INIT
        self.plan = None
        self._guard = CleanupGuard(self._cleanup, armed=params.cleanup_on_error)

    def _enter(self, stage: str) -> None:
        logger.debug(f"Stage: {self.stage} -> {stage}")
        self.stage = stage

    def run(self) -> int:
        """Run every stage. Returns the process exit code."""
        previous = _install_signal_handlers(_raise_signal_interrupt)
        try:
            self._execute()
        except UserAborted:
            self._guard.disarm()
            logger.info("Deployment aborted by user.")
            return EXIT_OK
        except SignalInterrupt as e:
            self._enter(STAGE_INTERRUPTED)
            reason = "Script interrupted by user" if e.signum == signal.SIGINT else "Script terminated"
            logger.error(reason)
            self._run_cleanup()
            return e.exit_code
        except KeyboardInterrupt:
            self._enter(STAGE_INTERRUPTED)
            logger.error("Script interrupted by user")
            self._run_cleanup()
            return SignalInterrupt.EXIT_CODES[signal.SIGINT]
        except DeployError as e:
            self._enter(STAGE_FAILED)
            logger.error(str(e))
            self._run_cleanup()
            return e.exit_code
        except Exception as e:
            self._enter(STAGE_FAILED)
            logger.exception(f"Unexpected error: {e}")
            self._run_cleanup()
            return EXIT_FAILURE
        finally:
            _restore_signal_handlers(previous)
        return EXIT_OK

    def _execute(self) -> None:
        logger.info(f"Starting Rollkit deployment v{__version__}")

        self._enter(STAGE_DETECT_EXISTING)
        existing = self.state.detect_existing()
        self.state.confirm_continue(existing)

        self._enter(STAGE_SELECT_PLAN)
        self.plan = select_plan(self.prompter)

        self._enter(STAGE_PROVISION)
        with self._source_factory() as source:
            Provisioner(self.layout, source, self.run_id).provision(self.plan)

        self._enter(STAGE_CONFIGURE)
        ConfigurationPatcher(self.plan, self.layout, self.prompter, self.params.env_overrides).configure()

        self._enter(STAGE_VALIDATE)
        validate(self.plan, self.layout)

        self._enter(STAGE_PREPARE_RESOURCES)
        self._prepare_resources()

        self._enter(STAGE_REPORT)
        report_status(self.plan, self.layout, dry_run=self.params.dry_run)

        self._enter(STAGE_DONE)
        self._guard.disarm()
        logger.info("Rollkit deployment setup completed successfully!")

    def _prepare_resources(self) -> None:
        logger.info("Preparing deployment files...")
        if self.plan.has_da:
            self.state.create_shared_resource_if_absent()
        if self.params.dry_run:
            logger.info("DRY RUN: Deployment files prepared. Ready to run services")
        else:
            logger.info("Deployment files prepared successfully")

    def _run_cleanup(self) -> None:
        """Fire the guard with further signals ignored until it finishes."""
        previous = _install_signal_handlers(signal.SIG_IGN)
        try:
            self._guard.fire()
        finally:
            _restore_signal_handlers(previous)

    def owns_root(self) -> bool:
        """True when the marker in the root carries this run's id."""
        try:
            return self.layout.marker.read_text().strip() == self.run_id
        except OSError:
            return False

    def _cleanup(self) -> None:
        logger.info("Cleaning up due to error...")
        for stack in ALL_STACKS:
            if not self.layout.compose_file(stack).is_file():
                continue
            try:
                self.state.stop_stack(stack)
            except Exception as e:
                logger.warning(f"Could not stop {stack} containers: {e}")

        if not self.owns_root():
            logger.debug(f"{self.layout.root} was not created by this run, leaving it in place")
            return
        logger.debug("Removing deployment directory...")
        try:
            shutil.rmtree(self.layout.root)
        except OSError as e:
            logger.error(f"Failed to remove {self.layout.root}: {e}")

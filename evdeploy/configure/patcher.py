"""Configuration patcher: idempotent per-stack .env edits and cross-stack propagation."""

import base64
import logging
import re
import secrets

from evdeploy.configure.envfile import EnvironmentFile
from evdeploy.errors import ValidationError
from evdeploy.planner.types import DA_CELESTIA, FULLNODE, SINGLE_SEQUENCER, DeploymentPlan
from evdeploy.prompt import Prompter
from evdeploy.redact import register_secret
from evdeploy.stacks.layout import DeploymentLayout

logger = logging.getLogger(__name__)

SIGNER_PASSPHRASE_KEY = "EVM_SIGNER_PASSPHRASE"
CHAIN_ID_KEY = "CHAIN_ID"
DA_NAMESPACE_KEY = "DA_NAMESPACE"

# Keys this patcher owns; each ends up on exactly one line
RECOGNIZED_KEYS = (SIGNER_PASSPHRASE_KEY, CHAIN_ID_KEY, DA_NAMESPACE_KEY)

# Stacks that read the namespace produced by the DA stack
NAMESPACE_CONSUMERS = (SINGLE_SEQUENCER, FULLNODE)

_NAMESPACE_RE = re.compile(r"^[A-Za-z0-9]+$")


def generate_passphrase() -> str:
    """32 random bytes from the OS CSPRNG, base64-encoded (single line, 44 chars)."""
    return base64.b64encode(secrets.token_bytes(32)).decode("ascii")


class ConfigurationPatcher:
    """Applies the configuration rules of every stack in a plan.

    Running it twice produces the same files as running it once: values are
    only generated or asked for when absent or empty, and every other edit
    writes a deterministic value.
    """

    def __init__(self, plan: DeploymentPlan, layout: DeploymentLayout, prompter: Prompter, env_overrides=None):
        self.plan = plan
        self.layout = layout
        self.prompter = prompter
        self.env_overrides = env_overrides or {}
        self._patched: set[str] = set()

    def configure(self) -> None:
        """Patch every selected stack in plan order (DA first)."""
        logger.info("Setting up configuration...")
        for stack in self.plan.stacks:
            self.patch(stack)
        logger.info("All configuration setup completed")

    def patch(self, stack: str) -> None:
        env = EnvironmentFile.load(self.layout.env_file(stack))
        logger.info(f"Setting up {stack} configuration...")

        self._apply_overrides(stack, env)
        if stack == DA_CELESTIA:
            self._ensure_namespace(env)
        if stack == SINGLE_SEQUENCER:
            self._ensure_passphrase(env)
            self._ensure_chain_id(env)
        if stack in NAMESPACE_CONSUMERS:
            self._propagate_namespace(stack, env)

        for key in RECOGNIZED_KEYS:
            env.normalize(key)
        env.save()

        self._patched.add(stack)
        logger.info(f"{stack} configuration setup completed")

    def _apply_overrides(self, stack: str, env: EnvironmentFile) -> None:
        overrides = self.env_overrides.get(stack) or {}
        for key, value in overrides.items():
            env.set(key, "" if value is None else str(value))
            logger.debug(f"[{stack}] {key} set from answers file")
        if overrides:
            env.save()

    def _ensure_namespace(self, env: EnvironmentFile) -> None:
        if not env.is_blank(DA_NAMESPACE_KEY):
            return
        logger.info("")
        logger.info("Namespace is required for Celestia data availability.")
        logger.info(
            "This should be a 28-byte identifier used to categorize and retrieve blobs, "
            "composed of a 1-byte version and a 27-byte ID."
        )
        logger.info("Example: '000000000000000000000000000000000000002737d4d967c7ca526dd5'")
        namespace = self.prompter.ask("da_namespace", "DA namespace: ").strip()
        if not _NAMESPACE_RE.match(namespace):
            raise ValidationError("DA namespace must contain only alphanumeric characters")
        env.set(DA_NAMESPACE_KEY, namespace)
        env.save()
        logger.info(f"DA namespace set to: {namespace}")

    def _ensure_passphrase(self, env: EnvironmentFile) -> None:
        current = env.get(SIGNER_PASSPHRASE_KEY)
        if current:
            register_secret(current)
            return
        logger.info("Generating random EVM signer passphrase...")
        passphrase = generate_passphrase()
        register_secret(passphrase)
        env.set(SIGNER_PASSPHRASE_KEY, passphrase)
        env.save()
        logger.info("EVM signer passphrase generated and set")

    def _ensure_chain_id(self, env: EnvironmentFile) -> None:
        if not env.is_blank(CHAIN_ID_KEY):
            return
        logger.info("Chain ID is required for the deployment.")
        chain_id = self.prompter.ask(
            "chain_id", "Please enter a chain ID (e.g., 1234 for development, or your custom chain ID): "
        ).strip()
        if not chain_id:
            raise ValidationError("Chain ID cannot be empty")
        env.set(CHAIN_ID_KEY, chain_id)
        env.save()
        logger.info(f"Chain ID set to: {chain_id}")

    def _propagate_namespace(self, stack: str, env: EnvironmentFile) -> None:
        if not self.plan.has_da:
            if env.unset(DA_NAMESPACE_KEY):
                env.save()
                logger.debug(f"[{stack}] Removed {DA_NAMESPACE_KEY}, no DA layer selected")
            return

        logger.info(f"Configuring {stack} for {self.plan.da} integration...")
        namespace = self._da_namespace()
        if not namespace:
            logger.warning(f"{DA_NAMESPACE_KEY} is empty in {self.plan.da} .env file. {stack} may show warnings.")
        env.set(DA_NAMESPACE_KEY, namespace)
        env.save()
        if namespace:
            logger.info(f"{DA_NAMESPACE_KEY} set to: {namespace}")

    def _da_namespace(self) -> str:
        """Namespace from the DA stack's .env, read after its own patch step ran."""
        if self.plan.da not in self._patched:
            self.patch(self.plan.da)
        source = EnvironmentFile.load(self.layout.env_file(self.plan.da))
        return source.get(DA_NAMESPACE_KEY) or ""

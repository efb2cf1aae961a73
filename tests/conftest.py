"""Shared pytest fixtures for all test modules."""

import os
import subprocess
import sys

import pytest

import evdeploy.redact as redact_module
from evdeploy.stacks.layout import DeploymentLayout
from evdeploy.stacks.manifest import MANIFESTS, SHARED_MANIFEST

PROJECT_ROOT = os.path.normpath(os.path.join(os.path.dirname(__file__), ".."))

ENV_TEMPLATES = {
    "stacks/da-celestia/.env": (
        "# Celestia light node\n"
        "DA_NETWORK=mocha-4\n"
        "DA_CORE_IP=rpc-mocha.pops.one\n"
        "DA_CORE_PORT=9090\n"
        "DA_TRUSTED_HEIGHT=\n"
        "DA_TRUSTED_HASH=\n"
        "DA_RPC_PORT=26658\n"
        "DA_NAMESPACE=\n"
    ),
    "stacks/single-sequencer/.env": (
        "# Sequencer settings\n"
        "CHAIN_ID=\n"
        "EVM_SIGNER_PASSPHRASE=\n"
        "DA_NAMESPACE=\n"
    ),
    "stacks/fullnode/.env": (
        "# Fullnode settings\n"
        "DA_NAMESPACE=\n"
    ),
}


@pytest.fixture(scope="session")
def project_root():
    """Absolute path to the project root directory."""
    return PROJECT_ROOT


@pytest.fixture(scope="session")
def run_cli(project_root):
    """Return a callable that invokes the evdeploy CLI as a subprocess."""

    def _run(*args, env=None):
        full_env = dict(os.environ)
        full_env.pop("EVM_SIGNER_PASSPHRASE", None)
        if env:
            full_env.update(env)
        result = subprocess.run(
            [sys.executable, "-m", "evdeploy.evdeploy", *args],
            capture_output=True,
            text=True,
            cwd=project_root,
            stdin=subprocess.DEVNULL,
            env=full_env,
        )
        return result.returncode, result.stdout, result.stderr

    return _run


# ── Unit-test fixtures ──────────────────────────────────────────────


def _all_source_paths():
    for manifest in [SHARED_MANIFEST, *MANIFESTS.values()]:
        yield from manifest.files
        for compose in (manifest.compose, manifest.compose_da):
            if compose:
                yield compose


@pytest.fixture
def artifact_mirror(tmp_path):
    """A local directory laid out like the remote ev-stacks store.

    Every file's content names its own source path, so tests can tell
    which compose variant was fetched.
    """
    root = tmp_path / "mirror"
    for path in _all_source_paths():
        target = root / path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(ENV_TEMPLATES.get(path, f"# {path}\n"))
    return root


@pytest.fixture
def layout(tmp_path):
    """Deployment layout rooted at a not-yet-existing directory."""
    return DeploymentLayout.at(tmp_path / "deployment")


class FakeDocker:
    """Records docker invocations; answers by longest matching command prefix."""

    def __init__(self):
        self.calls = []
        self._responses = {}

    def respond(self, *prefix, rc=0, stdout="", stderr=""):
        self._responses[prefix] = (rc, stdout, stderr)

    def __call__(self, command, dry_run=False, timeout=600, cwd=None):
        self.calls.append({"command": list(command), "dry_run": dry_run, "timeout": timeout, "cwd": cwd})
        if dry_run:
            return 0, "", ""
        for prefix in sorted(self._responses, key=len, reverse=True):
            if tuple(command[: len(prefix)]) == prefix:
                return self._responses[prefix]
        return 0, "", ""

    @property
    def commands(self):
        return [c["command"] for c in self.calls]


@pytest.fixture
def fake_docker():
    return FakeDocker()


@pytest.fixture(autouse=True)
def _reset_redaction(monkeypatch):
    """Forget secrets registered by a previous test."""
    monkeypatch.delenv("EVM_SIGNER_PASSPHRASE", raising=False)
    redact_module._registered.clear()
    redact_module._patterns = None
    yield
    redact_module._registered.clear()
    redact_module._patterns = None

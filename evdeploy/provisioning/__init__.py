"""Provisioning: content sources, shell helper and the stack provisioner."""

from evdeploy.provisioning.fetch import (
    DEFAULT_ARTIFACT_BASE_URL,
    DEFAULT_FETCH_TIMEOUT,
    HttpContentSource,
    LocalContentSource,
    open_content_source,
)
from evdeploy.provisioning.provisioner import Provisioner
from evdeploy.provisioning.shell import run_shell_cmd

__all__ = [
    "DEFAULT_ARTIFACT_BASE_URL",
    "DEFAULT_FETCH_TIMEOUT",
    "HttpContentSource",
    "LocalContentSource",
    "Provisioner",
    "open_content_source",
    "run_shell_cmd",
]

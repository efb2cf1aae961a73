"""Patches for the DA light-node and app-node TOML configs.

Applied by the container entrypoints through ``evdeploy node-config``.
"""

import logging
import re

from evdeploy.configure.tomldoc import TomlDocument

logger = logging.getLogger(__name__)

DEFAULT_WORKER_ACCOUNTS = 8
DEFAULT_GRPC_PORT = 9090
LOOPBACK_HOSTS = ("localhost", "127.0.0.1")
WILDCARD_HOST = "0.0.0.0"


def _set(doc: TomlDocument, section: str, key: str, value) -> None:
    if doc.set(section, key, value):
        logger.info(f"[{section}] {key} = {value}")
    else:
        logger.warning(f"[{section}] section not found in {doc.path}, {key} not set")


def patch_light_node_config(path, trusted_hash=None, trusted_height=None, worker_accounts=DEFAULT_WORKER_ACCOUNTS) -> bool:
    """Set the trusted checkpoint and the transaction worker count.

    ``trusted_hash`` / ``trusted_height`` are skipped when None.

    Returns:
        True if the file was rewritten.
    """
    doc = TomlDocument.load(path)
    if trusted_hash is not None:
        _set(doc, "Header", "TrustedHash", str(trusted_hash))
    if trusted_height is not None:
        _set(doc, "DASer", "SampleFrom", int(trusted_height))
    if worker_accounts is not None:
        _set(doc, "State", "TxWorkerAccounts", int(worker_accounts))
    return doc.save()


def patch_app_config(path, grpc_port=DEFAULT_GRPC_PORT) -> bool:
    """Enable the gRPC server and bind it beyond the container's loopback.

    Returns:
        True if the file was rewritten.
    """
    doc = TomlDocument.load(path)
    _set(doc, "grpc", "enable", True)
    for host in LOOPBACK_HOSTS:
        # Not followed by a digit, so a longer port sharing the prefix is left alone
        endpoint = re.compile(rf"{re.escape(host)}:{int(grpc_port)}(?!\d)")
        if doc.replace_all(endpoint, f"{WILDCARD_HOST}:{grpc_port}"):
            logger.info(f"Rebound {host}:{grpc_port} to {WILDCARD_HOST}:{grpc_port}")
    return doc.save()

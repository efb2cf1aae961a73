"""node-config command: patch DA node configs from inside container entrypoints."""

import logging
import os
import sys

from evdeploy.configure.node_config import (
    DEFAULT_GRPC_PORT,
    DEFAULT_WORKER_ACCOUNTS,
    patch_app_config,
    patch_light_node_config,
)
from evdeploy.errors import DeployError

logger = logging.getLogger(__name__)


def handle_light(args):
    """Handle node-config light."""
    trusted_hash = args.trusted_hash or os.environ.get("DA_TRUSTED_HASH") or None
    trusted_height = args.trusted_height or os.environ.get("DA_TRUSTED_HEIGHT") or None
    if trusted_height is not None:
        try:
            trusted_height = int(trusted_height)
        except ValueError:
            logger.error(f"Trusted height must be an integer: {trusted_height!r}")
            sys.exit(1)

    try:
        changed = patch_light_node_config(
            args.path,
            trusted_hash=trusted_hash,
            trusted_height=trusted_height,
            worker_accounts=args.worker_accounts,
        )
    except DeployError as e:
        logger.error(str(e))
        sys.exit(1)
    logger.info(f"{args.path} {'updated' if changed else 'already up to date'}")


def handle_app(args):
    """Handle node-config app."""
    try:
        changed = patch_app_config(args.path, grpc_port=args.grpc_port)
    except DeployError as e:
        logger.error(str(e))
        sys.exit(1)
    logger.info(f"{args.path} {'updated' if changed else 'already up to date'}")


def register_node_config_command(subparsers):
    """Register 'node-config' with light/app sub-subcommands."""
    parser = subparsers.add_parser("node-config", help="Patch Celestia node configuration files")
    kind_subparsers = parser.add_subparsers(dest="kind", required=True)

    light = kind_subparsers.add_parser("light", help="Patch a light-node config.toml")
    light.add_argument("--path", required=True, help="Path to the light-node config.toml")
    light.add_argument("--trusted-hash", default=None, help="Trusted header hash (default: $DA_TRUSTED_HASH)")
    light.add_argument("--trusted-height", default=None, help="Trusted height (default: $DA_TRUSTED_HEIGHT)")
    light.add_argument(
        "--worker-accounts",
        type=int,
        default=DEFAULT_WORKER_ACCOUNTS,
        help=f"State.TxWorkerAccounts (default: {DEFAULT_WORKER_ACCOUNTS})",
    )
    light.set_defaults(func=handle_light)

    app = kind_subparsers.add_parser("app", help="Patch a celestia-app app.toml")
    app.add_argument("--path", required=True, help="Path to app.toml")
    app.add_argument("--grpc-port", type=int, default=DEFAULT_GRPC_PORT, help=f"gRPC port (default: {DEFAULT_GRPC_PORT})")
    app.set_defaults(func=handle_app)

#!/usr/bin/env python3
"""Rollkit deployment tools: CLI entrypoint."""

import argparse

from evdeploy import __version__
from evdeploy.commands.deploy import register_deploy_command
from evdeploy.commands.node_config import register_node_config_command
from evdeploy.logging_setup import setup_cli_logging


def main():
    parser = argparse.ArgumentParser(description="Rollkit deployment tools")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    register_deploy_command(subparsers)
    register_node_config_command(subparsers)

    args = parser.parse_args()
    setup_cli_logging(verbose=getattr(args, "verbose", False))
    args.func(args)


if __name__ == "__main__":
    main()

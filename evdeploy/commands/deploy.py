"""Deploy command: provision and configure the selected stacks on this host."""

import argparse
import logging
import sys
from pathlib import Path

import yaml

from evdeploy.deploy.lifecycle import LifecycleController
from evdeploy.deploy.params import DeployParams
from evdeploy.logging_setup import add_file_handler
from evdeploy.prompt import make_prompter
from evdeploy.provisioning.fetch import DEFAULT_ARTIFACT_BASE_URL, DEFAULT_FETCH_TIMEOUT
from evdeploy.stacks.layout import DEFAULT_DEPLOYMENT_DIR

logger = logging.getLogger(__name__)

# Keys accepted in the answers file besides "env"
ANSWER_KEYS = ("da", "sequencer", "fullnode", "chain_id", "da_namespace", "confirm")


def load_answers(path):
    """Load the answers YAML file.

    Returns:
        (answers, env_overrides): prompt answers keyed by question name and
        per-stack ``.env`` overrides ``{stack: {KEY: value}}``.

    Raises:
        FileNotFoundError: if the file does not exist.
        ValueError: if the document has the wrong shape.
    """
    answers_path = Path(path).expanduser()
    if not answers_path.is_file():
        raise FileNotFoundError(f"Answers file not found: {answers_path}")

    with open(answers_path) as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Answers file must be a mapping: {answers_path}")

    unknown = sorted(set(data) - set(ANSWER_KEYS) - {"env"})
    if unknown:
        raise ValueError(f"Unknown keys in answers file: {', '.join(unknown)}")

    env = data.get("env") or {}
    if not isinstance(env, dict) or not all(isinstance(v, dict) for v in env.values()):
        raise ValueError("'env' in answers file must map stack names to KEY: value mappings")

    answers = {key: data[key] for key in ANSWER_KEYS if data.get(key) is not None}
    return answers, env


def _artifact_source(value):
    if value.startswith("http://"):
        raise argparse.ArgumentTypeError("plain http:// artifact sources are not allowed, use https://")
    return value


def _positive_float(value):
    number = float(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {value}")
    return number


def handle_deploy(args):
    """Handle the deploy command."""
    answers, env_overrides = {}, {}
    if args.answers:
        try:
            answers, env_overrides = load_answers(args.answers)
        except (OSError, ValueError, yaml.YAMLError) as e:
            logger.error(str(e))
            sys.exit(1)

    # Flags override the answers file
    flag_answers = {
        "da": args.da,
        "sequencer": args.sequencer,
        "fullnode": args.fullnode,
        "chain_id": args.chain_id,
        "da_namespace": args.da_namespace,
    }
    answers.update({k: v for k, v in flag_answers.items() if v is not None})

    if args.log_file:
        try:
            log_path = add_file_handler(args.log_file)
        except OSError as e:
            logger.error(f"Cannot write log file {args.log_file}: {e}")
            sys.exit(1)
        logger.info(f"Logging to: {log_path}")

    params = DeployParams(
        deployment_dir=args.deployment_dir,
        verbose=args.verbose,
        dry_run=args.dry_run,
        force=args.force,
        log_file=args.log_file,
        cleanup_on_error=not args.no_cleanup,
        artifact_source=args.artifact_source,
        fetch_timeout=args.fetch_timeout,
        env_overrides=env_overrides,
    )
    if params.dry_run:
        logger.info("DRY RUN MODE - no containers or volumes will be touched")

    prompter = make_prompter(answers, non_interactive=args.non_interactive)
    controller = LifecycleController(params, prompter)
    sys.exit(controller.run())


def register_deploy_command(subparsers):
    """Register the deploy subcommand."""
    parser = subparsers.add_parser("deploy", help="Provision and configure a Rollkit deployment")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug output")
    parser.add_argument("-d", "--dry-run", action="store_true", help="Prepare files without creating volumes or touching containers")
    parser.add_argument("-f", "--force", action="store_true", help="Continue over an existing deployment without asking")
    parser.add_argument("-l", "--log-file", default=None, help="Append a timestamped log to FILE")
    parser.add_argument("--no-cleanup", action="store_true", help="Keep partial state on failure")
    parser.add_argument(
        "--deployment-dir",
        default=DEFAULT_DEPLOYMENT_DIR,
        help=f"Deployment root (default: {DEFAULT_DEPLOYMENT_DIR})",
    )

    # Headless inputs
    parser.add_argument("--da", default=None, help="DA layer: da-celestia or none")
    parser.add_argument("--sequencer", default=None, help="Sequencer topology: single-sequencer")
    parser.add_argument(
        "--fullnode",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Deploy the fullnode stack",
    )
    parser.add_argument("--chain-id", default=None, help="Chain ID written to the sequencer .env")
    parser.add_argument("--da-namespace", default=None, help="Celestia namespace (alphanumeric)")
    parser.add_argument("--answers", default=None, help="YAML file with answers and .env overrides")
    parser.add_argument("--non-interactive", action="store_true", help="Never read from the terminal")

    parser.add_argument(
        "--artifact-source",
        type=_artifact_source,
        default=DEFAULT_ARTIFACT_BASE_URL,
        help="https:// base URL or local mirror directory for stack files",
    )
    parser.add_argument(
        "--fetch-timeout",
        type=_positive_float,
        default=DEFAULT_FETCH_TIMEOUT,
        help=f"Per-file fetch timeout in seconds (default: {DEFAULT_FETCH_TIMEOUT:g})",
    )
    parser.set_defaults(func=handle_deploy)

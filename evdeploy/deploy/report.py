"""Final deployment status: stack locations, start order, endpoints."""

import logging

from evdeploy.planner.types import DA_CELESTIA, FULLNODE, SINGLE_SEQUENCER, DeploymentPlan
from evdeploy.stacks.layout import DeploymentLayout

logger = logging.getLogger(__name__)

STACK_TITLES = {
    DA_CELESTIA: "Celestia Data Availability",
    SINGLE_SEQUENCER: "Single Sequencer",
    FULLNODE: "Fullnode",
}

ENDPOINTS = {
    SINGLE_SEQUENCER: [
        ("Reth Prometheus Metrics", "http://localhost:9000"),
        ("Single Sequencer Prometheus Metrics", "http://localhost:26660"),
    ],
    FULLNODE: [
        ("Reth RPC", "http://localhost:8545"),
        ("Reth Prometheus Metrics", "http://localhost:9002"),
        ("Rollkit RPC", "http://localhost:7331"),
        ("Rollkit Prometheus Metrics", "http://localhost:26662"),
    ],
}


def report_status(plan: DeploymentPlan, layout: DeploymentLayout, dry_run=False):
    """Log where each stack lives and how to start it."""
    status = "dry-run (not deployed)" if dry_run else "ready to start"
    logger.info("")
    logger.info("Deployment Setup Complete")
    logger.info("==========================")
    logger.info(f"Deployment Directory: {layout.root}")
    logger.info(f"Status: {status}")
    logger.info("")
    logger.info("Available Stacks:")
    for stack in plan.stacks:
        logger.info(f"  {STACK_TITLES[stack]}: {layout.stack_dir(stack)}")

    logger.info("")
    logger.info("Next Steps:")
    for stack in plan.stacks:
        logger.info("")
        logger.info(f"Start the {STACK_TITLES[stack]} stack{' first' if stack == plan.da else ''}:")
        logger.info(f"  1. cd {layout.stack_dir(stack)}")
        logger.info("  2. docker compose up -d")
        if stack == DA_CELESTIA:
            logger.info("Fund the default account on the Celestia node with TIA tokens. Retrieve its address with:")
            logger.info("  docker exec -it celestia-node cel-key list --node.type=light")

    endpoints = [(stack, ENDPOINTS[stack]) for stack in plan.stacks if stack in ENDPOINTS]
    if endpoints:
        logger.info("")
        logger.info("Service Endpoints:")
        for stack, entries in endpoints:
            logger.info(f"  {STACK_TITLES[stack]}:")
            for name, url in entries:
                logger.info(f"    - {name}: {url}")

    logger.info("")
    logger.info("Service Management:")
    logger.info("  - View status: docker compose ps")
    logger.info("  - View logs: docker compose logs -f")
    logger.info("  - Stop services: docker compose down")
    logger.info("  - Restart services: docker compose restart")

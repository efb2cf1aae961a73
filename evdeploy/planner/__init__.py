"""Planner: resolve the stacks to deploy into a DeploymentPlan."""

from evdeploy.planner.selection import (
    DA_CHOICES,
    FULLNODE_CHOICES,
    SEQUENCER_CHOICES,
    Choice,
    resolve_choice,
    select_plan,
)
from evdeploy.planner.types import (
    ALL_STACKS,
    DA_CELESTIA,
    FULLNODE,
    SINGLE_SEQUENCER,
    DeploymentPlan,
)

__all__ = [
    "ALL_STACKS",
    "DA_CELESTIA",
    "FULLNODE",
    "SINGLE_SEQUENCER",
    "Choice",
    "DA_CHOICES",
    "DeploymentPlan",
    "FULLNODE_CHOICES",
    "SEQUENCER_CHOICES",
    "resolve_choice",
    "select_plan",
]

"""Selection engine: resolve which stacks to deploy from operator answers."""

import logging
from dataclasses import dataclass

from evdeploy.errors import InvalidSelection
from evdeploy.planner.types import DA_CELESTIA, SINGLE_SEQUENCER, DeploymentPlan
from evdeploy.prompt import Prompter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Choice:
    """One menu entry. Matched by menu number, name or alias (case-insensitive)."""

    name: str
    value: object
    description: str
    aliases: tuple[str, ...] = ()

    def matches(self, answer: str) -> bool:
        return answer == self.name or answer in self.aliases


DA_CHOICES = (
    Choice(DA_CELESTIA, DA_CELESTIA, "Celestia modular DA network (mocha-4)", ("celestia",)),
    Choice("none", None, "No DA layer, standalone sequencer", ("no", "standalone")),
)

SEQUENCER_CHOICES = (
    Choice(SINGLE_SEQUENCER, SINGLE_SEQUENCER, "Single node sequencer setup", ("single",)),
)

FULLNODE_CHOICES = (
    Choice("yes", True, "Deploy fullnode stack alongside sequencer", ("y", "true")),
    Choice("no", False, "Deploy sequencer only", ("n", "false")),
)


def resolve_choice(key: str, answer: str, choices) -> object:
    """Map a raw answer to the value of one of ``choices``.

    Raises:
        InvalidSelection: if the answer matches no choice.
    """
    normalized = answer.strip().lower()
    for index, choice in enumerate(choices, start=1):
        if normalized == str(index) or choice.matches(normalized):
            return choice.value
    raise InvalidSelection(key, answer, [c.name for c in choices])


def _choose(prompter: Prompter, key: str, title: str, noun: str, choices):
    """Show a menu and ask until a valid choice is entered.

    Re-prompts on bad input when a terminal is attached; headless runs fail fast.
    """
    logger.info("")
    logger.info(f"{title}:")
    for index, choice in enumerate(choices, start=1):
        logger.info(f"  {index}) {choice.name} - {choice.description}")
    logger.info("")

    span = "1" if len(choices) == 1 else f"1-{len(choices)}"
    while True:
        answer = prompter.ask(key, f"Please select {noun} ({span}): ")
        try:
            value = resolve_choice(key, answer, choices)
        except InvalidSelection as e:
            if not prompter.interactive:
                raise
            logger.warning(f"{e}. Please try again.")
            continue
        logger.debug(f"Selected {key}: {value}")
        return value


def select_plan(prompter: Prompter) -> DeploymentPlan:
    """Build the deployment plan: DA layer first, then topology, then full node.

    The DA layer comes first because downstream stacks read derived values from it.
    """
    da = _choose(prompter, "da", "Available Data Availability (DA) layers", "a DA layer", DA_CHOICES)
    topology = _choose(prompter, "sequencer", "Available sequencer topologies", "a sequencer topology", SEQUENCER_CHOICES)
    fullnode = _choose(prompter, "fullnode", "Do you want to deploy a fullnode stack?", "an option", FULLNODE_CHOICES)

    plan = DeploymentPlan(da=da, sequencer_topology=topology, fullnode=fullnode)
    logger.info(f"Deploying: {plan.describe()}")
    return plan

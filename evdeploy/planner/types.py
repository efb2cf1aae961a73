"""Deployment plan dataclass and stack identifiers."""

from dataclasses import dataclass

DA_CELESTIA = "da-celestia"
SINGLE_SEQUENCER = "single-sequencer"
FULLNODE = "fullnode"

DA_LAYERS = (DA_CELESTIA,)
SEQUENCER_TOPOLOGIES = (SINGLE_SEQUENCER,)
ALL_STACKS = (DA_CELESTIA, SINGLE_SEQUENCER, FULLNODE)


@dataclass(frozen=True)
class DeploymentPlan:
    """Selected stacks for one run. Built once by the selection engine, never mutated."""

    da: str | None
    sequencer_topology: str = SINGLE_SEQUENCER
    fullnode: bool = False

    def __post_init__(self):
        if self.da is not None and self.da not in DA_LAYERS:
            raise ValueError(f"Unknown DA layer '{self.da}'")
        if self.sequencer_topology not in SEQUENCER_TOPOLOGIES:
            raise ValueError(f"Unknown sequencer topology '{self.sequencer_topology}'")

    @property
    def has_da(self) -> bool:
        return self.da is not None

    @property
    def stacks(self) -> tuple[str, ...]:
        """Selected stacks in dependency order: DA, sequencer, full node."""
        stacks = []
        if self.da is not None:
            stacks.append(self.da)
        stacks.append(self.sequencer_topology)
        if self.fullnode:
            stacks.append(FULLNODE)
        return tuple(stacks)

    def describe(self) -> str:
        """Human summary, e.g. 'single-sequencer + Fullnode + da-celestia'."""
        info = self.sequencer_topology
        if self.fullnode:
            info += " + Fullnode"
        if self.da is not None:
            info += f" + {self.da}"
        return info

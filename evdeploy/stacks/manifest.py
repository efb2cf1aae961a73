"""Static stack manifests: which artifacts each stack fetches."""

import posixpath
from dataclasses import dataclass

from evdeploy.planner.types import DA_CELESTIA, FULLNODE, SINGLE_SEQUENCER

SHARED_LIB = "lib"
COMPOSE_FILENAME = "docker-compose.yml"
ENV_FILENAME = ".env"


def _check_namespace(path: str, source_dir: str) -> None:
    normalized = posixpath.normpath(path)
    if posixpath.isabs(path) or normalized != path or ".." in path.split("/"):
        raise ValueError(f"Manifest path '{path}' is not a clean relative path")
    if not path.startswith(source_dir + "/") or not posixpath.basename(path):
        raise ValueError(f"Manifest path '{path}' escapes its namespace '{source_dir}'")


@dataclass(frozen=True)
class StackManifest:
    """Artifacts of one stack, as paths relative to the content source base.

    ``compose`` is the standalone compose descriptor and ``compose_da`` the
    DA-integrated one; whichever is selected is written as docker-compose.yml.
    ``entrypoints`` are target file names to mark executable.
    """

    name: str
    source_dir: str
    files: tuple[str, ...]
    entrypoints: tuple[str, ...] = ()
    compose: str | None = None
    compose_da: str | None = None

    def __post_init__(self):
        paths = list(self.files) + [p for p in (self.compose, self.compose_da) if p]
        for path in paths:
            _check_namespace(path, self.source_dir)
        names = [self.target_name(p) for p in self.files]
        if len(set(names)) != len(names) or COMPOSE_FILENAME in names:
            raise ValueError(f"Manifest '{self.name}' flattens two files onto the same name")
        targets = {self.target_name(p) for p in paths}
        missing = set(self.entrypoints) - targets
        if missing:
            raise ValueError(f"Manifest '{self.name}' marks unknown entrypoints: {', '.join(sorted(missing))}")

    def compose_source(self, with_da: bool) -> str | None:
        """Compose descriptor to fetch: DA-integrated when available and requested."""
        if with_da and self.compose_da:
            return self.compose_da
        return self.compose or self.compose_da

    def source_paths(self, with_da: bool) -> list[str]:
        paths = list(self.files)
        compose = self.compose_source(with_da)
        if compose:
            paths.append(compose)
        return paths

    def target_name(self, source_path: str) -> str:
        """File name written inside the stack directory (structure is flattened)."""
        if source_path in (self.compose, self.compose_da):
            return COMPOSE_FILENAME
        return posixpath.basename(source_path)

    def required_files(self, with_da: bool) -> list[str]:
        return [self.target_name(p) for p in self.source_paths(with_da)]


SHARED_MANIFEST = StackManifest(
    name=SHARED_LIB,
    source_dir="lib",
    files=("lib/logging.sh",),
    entrypoints=("logging.sh",),
)

MANIFESTS = {
    DA_CELESTIA: StackManifest(
        name=DA_CELESTIA,
        source_dir="stacks/da-celestia",
        files=(
            "stacks/da-celestia/.env",
            "stacks/da-celestia/celestia-app.Dockerfile",
            "stacks/da-celestia/entrypoint.appd.sh",
            "stacks/da-celestia/entrypoint.da.sh",
            "stacks/da-celestia/entrypoint.init-2.sh",
            "stacks/da-celestia/entrypoint.init-3.sh",
        ),
        entrypoints=(
            "entrypoint.appd.sh",
            "entrypoint.da.sh",
            "entrypoint.init-2.sh",
            "entrypoint.init-3.sh",
        ),
        compose="stacks/da-celestia/docker-compose.yml",
    ),
    SINGLE_SEQUENCER: StackManifest(
        name=SINGLE_SEQUENCER,
        source_dir="stacks/single-sequencer",
        files=(
            "stacks/single-sequencer/.env",
            "stacks/single-sequencer/entrypoint.sequencer.sh",
            "stacks/single-sequencer/genesis.json",
            "stacks/single-sequencer/single-sequencer.Dockerfile",
        ),
        entrypoints=("entrypoint.sequencer.sh",),
        compose="stacks/single-sequencer/docker-compose.yml",
        compose_da="stacks/single-sequencer/docker-compose.da.celestia.yml",
    ),
    FULLNODE: StackManifest(
        name=FULLNODE,
        source_dir="stacks/fullnode",
        files=(
            "stacks/fullnode/.env",
            "stacks/fullnode/entrypoint.fullnode.sh",
        ),
        entrypoints=("entrypoint.fullnode.sh",),
        compose="stacks/fullnode/docker-compose.yml",
        compose_da="stacks/fullnode/docker-compose.da.celestia.yml",
    ),
}


def get_manifest(stack: str) -> StackManifest:
    """Look up a manifest by stack name (including the shared 'lib')."""
    if stack == SHARED_LIB:
        return SHARED_MANIFEST
    try:
        return MANIFESTS[stack]
    except KeyError:
        raise ValueError(f"No manifest for stack '{stack}'") from None

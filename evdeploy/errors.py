"""Error taxonomy for the deployment orchestrator."""

import signal


class DeployError(Exception):
    """Fatal deployment error. Aborts the run with exit code 1 and triggers cleanup."""

    exit_code = 1


class InvalidSelection(DeployError):
    """An answer outside the enumerated choices.

    Recovered by re-prompting when a terminal is attached; fatal in headless runs.
    """

    def __init__(self, key, answer, options):
        self.key = key
        self.answer = answer
        self.options = tuple(options)
        super().__init__(f"Invalid choice for {key}: {answer!r} (expected one of: {', '.join(self.options)})")


class ArtifactFetchError(DeployError):
    def __init__(self, path, source, reason):
        self.path = path
        self.source = source
        self.reason = reason
        super().__init__(f"Failed to fetch {path} from {source}: {reason}")


class ArtifactPermissionError(DeployError):
    """An entrypoint could not be made executable."""

    def __init__(self, stack, path, reason):
        self.stack = stack
        self.path = path
        super().__init__(f"[{stack}] Failed to make {path} executable: {reason}")


class ConfigWriteError(DeployError):
    def __init__(self, path, reason):
        self.path = path
        super().__init__(f"Failed to write {path}: {reason}")


class ValidationError(DeployError):
    pass


class MissingArtifact(ValidationError):
    def __init__(self, stack, path):
        self.stack = stack
        self.path = path
        super().__init__(f"Required {stack} file not found or not readable: {path}")


class ResourceCreationError(DeployError):
    def __init__(self, resource, reason):
        self.resource = resource
        super().__init__(f"Failed to create shared volume {resource}: {reason}")


class UserAborted(Exception):
    """The operator declined to continue over an existing deployment. Exits 0."""


class SignalInterrupt(BaseException):
    """Raised from the signal handler so the run unwinds into cleanup.

    Derives from BaseException so ``except Exception`` blocks do not swallow it.
    """

    EXIT_CODES = {signal.SIGINT: 130, signal.SIGTERM: 143}

    def __init__(self, signum):
        self.signum = signum
        super().__init__(signal.Signals(signum).name)

    @property
    def exit_code(self) -> int:
        return self.EXIT_CODES.get(self.signum, 128 + int(self.signum))

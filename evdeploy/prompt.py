"""Operator prompts: a terminal prompter and a scripted one for headless runs."""

import logging
import sys
from abc import ABC, abstractmethod

from evdeploy.errors import ValidationError

logger = logging.getLogger(__name__)


class Prompter(ABC):
    """Source of operator answers, keyed by question name."""

    interactive = False

    @abstractmethod
    def ask(self, key: str, message: str) -> str:
        """Return the raw answer for ``key``. Never returns None."""


class TerminalPrompter(Prompter):
    """Reads answers from stdin. Used when stdin is a TTY."""

    interactive = True

    def __init__(self, input_func=input):
        self._input = input_func

    def ask(self, key: str, message: str) -> str:
        try:
            return self._input(message)
        except EOFError:
            raise ValidationError(f"Input closed while waiting for {key}") from None


class ScriptedPrompter(Prompter):
    """Answers from CLI flags or an answers file; missing answers are empty."""

    def __init__(self, answers=None):
        self._answers = {k: v for k, v in (answers or {}).items() if v is not None}

    def ask(self, key: str, message: str) -> str:
        value = self._answers.get(key)
        if value is None:
            logger.debug(f"No scripted answer for {key}")
            return ""
        if isinstance(value, bool):
            return "yes" if value else "no"
        return str(value)


class _LayeredPrompter(Prompter):
    """Scripted answers first, terminal for the rest."""

    interactive = True

    def __init__(self, scripted: ScriptedPrompter, terminal: TerminalPrompter):
        self._scripted = scripted
        self._terminal = terminal
        self._used: set[str] = set()

    def ask(self, key: str, message: str) -> str:
        # A scripted answer is used once; a re-prompt after a bad value goes to the terminal
        if key not in self._used:
            self._used.add(key)
            answer = self._scripted.ask(key, message)
            if answer:
                return answer
        return self._terminal.ask(key, message)


def make_prompter(answers=None, non_interactive=False, stdin=None) -> Prompter:
    """Pick the prompt strategy from stdin interactivity.

    Scripted answers always win over the terminal: a flag given on the
    command line is never asked for again.
    """
    stdin = stdin or sys.stdin
    answers = {k: v for k, v in (answers or {}).items() if v is not None}
    if non_interactive or not stdin.isatty():
        return ScriptedPrompter(answers)
    if answers:
        return _LayeredPrompter(ScriptedPrompter(answers), TerminalPrompter())
    return TerminalPrompter()

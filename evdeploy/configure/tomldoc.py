"""Line-indexed TOML-like documents with section-scoped key edits.

Only the targeted lines are rewritten; everything else (comments, ordering,
formatting) is re-serialized verbatim.
"""

import json
import re
from pathlib import Path

from evdeploy.configure.atomic import write_text_atomic
from evdeploy.errors import ValidationError

_HEADER_RE = re.compile(r"^\[\s*([^\[\]]+?)\s*\]\s*(?:#.*)?$")
_ANY_HEADER_RE = re.compile(r"^\[")


def to_literal(value) -> str:
    """Render a Python value as a TOML literal."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    return json.dumps(str(value))


def _key_re(key: str) -> re.Pattern:
    # Anchored: commented-out keys and keys with a shared prefix never match
    return re.compile(rf"^(\s*){re.escape(key)}\s*=(.*)$")


class TomlDocument:
    def __init__(self, text: str = "", path=None):
        self.path = Path(path) if path is not None else None
        self._original = text
        self.lines = text.splitlines()

    @classmethod
    def load(cls, path) -> "TomlDocument":
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ValidationError(f"Config file not found or not readable: {path} ({e.strerror or e})") from e
        return cls(text, path)

    def sections(self) -> list[str]:
        return [m.group(1) for m in map(_HEADER_RE.match, self.lines) if m]

    def section_span(self, section: str) -> tuple[int, int] | None:
        """(header index, end index exclusive) of ``section``, or None if absent."""
        for i, line in enumerate(self.lines):
            match = _HEADER_RE.match(line)
            if match and match.group(1) == section:
                end = i + 1
                while end < len(self.lines) and not _ANY_HEADER_RE.match(self.lines[end]):
                    end += 1
                return i, end
        return None

    def get(self, section: str, key: str) -> str | None:
        """Raw value text of ``key`` inside ``section``."""
        span = self.section_span(section)
        if span is None:
            return None
        pattern = _key_re(key)
        for line in self.lines[span[0] + 1:span[1]]:
            match = pattern.match(line)
            if match:
                return match.group(2).strip()
        return None

    def set(self, section: str, key: str, value) -> bool:
        """Update ``key`` within ``section`` or insert it right after the header.

        Returns:
            False if the section does not exist (nothing is changed).
        """
        span = self.section_span(section)
        if span is None:
            return False
        header, end = span
        literal = to_literal(value)
        pattern = _key_re(key)
        for i in range(header + 1, end):
            match = pattern.match(self.lines[i])
            if match:
                self.lines[i] = f"{match.group(1)}{key} = {literal}"
                return True
        self.lines.insert(header + 1, f"  {key} = {literal}")
        return True

    def replace_all(self, old, new: str) -> int:
        """Document-wide substitution. Returns the number of lines touched.

        ``old`` is a literal string or a compiled regex.
        """
        pattern = old if isinstance(old, re.Pattern) else re.compile(re.escape(old))
        touched = 0
        for i, line in enumerate(self.lines):
            replaced, count = pattern.subn(lambda _: new, line)
            if count:
                self.lines[i] = replaced
                touched += 1
        return touched

    def render(self) -> str:
        return "\n".join(self.lines) + "\n" if self.lines else ""

    @property
    def changed(self) -> bool:
        return self.render() != self._original

    def save(self, path=None) -> bool:
        target = Path(path) if path is not None else self.path
        if target is None:
            raise ValueError("TomlDocument has no path to save to")
        if not self.changed and target == self.path:
            return False
        text = self.render()
        write_text_atomic(target, text)
        self._original = text
        return True

"""Line-indexed .env documents with structural key edits."""

import re
from pathlib import Path

from evdeploy.configure.atomic import write_text_atomic
from evdeploy.errors import ValidationError

_ASSIGN_RE = re.compile(r"^\s*(?:export\s+)?([A-Za-z_][A-Za-z0-9_]*)\s*=(.*)$")
_NUMERIC_RE = re.compile(r"^[0-9]+$")
# A quoted token, optionally followed by an inline comment
_DOUBLE_QUOTED_RE = re.compile(r'^"((?:[^"\\]|\\.)*)"\s*(?:#.*)?$')
_SINGLE_QUOTED_RE = re.compile(r"^'([^']*)'\s*(?:#.*)?$")


def parse_value(raw: str) -> str:
    """Decode the right-hand side of a KEY=VALUE line."""
    raw = raw.strip()
    match = _DOUBLE_QUOTED_RE.match(raw)
    if match:
        return re.sub(r'\\(["\\])', r"\1", match.group(1))
    match = _SINGLE_QUOTED_RE.match(raw)
    if match:
        return match.group(1)
    # Unquoted: an inline comment starts at ' #'
    return raw.split(" #", 1)[0].rstrip()


def format_value(value: str) -> str:
    """Numbers stay bare, everything else is double-quoted."""
    if _NUMERIC_RE.match(value):
        return value
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class EnvironmentFile:
    """An ordered KEY=VALUE document bound to a path.

    Lines that are not assignments (comments, blanks) are kept verbatim.
    When a key is duplicated the last assignment is the effective value.
    """

    def __init__(self, path, text: str = ""):
        self.path = Path(path)
        self._original = text
        self.lines = text.splitlines()

    @classmethod
    def load(cls, path) -> "EnvironmentFile":
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ValidationError(f"Environment file not found or not readable: {path} ({e.strerror or e})") from e
        return cls(path, text)

    def _indices(self, key: str) -> list[int]:
        found = []
        for i, line in enumerate(self.lines):
            match = _ASSIGN_RE.match(line)
            if match and match.group(1) == key:
                found.append(i)
        return found

    def keys(self) -> list[str]:
        seen = []
        for line in self.lines:
            match = _ASSIGN_RE.match(line)
            if match and match.group(1) not in seen:
                seen.append(match.group(1))
        return seen

    def has(self, key: str) -> bool:
        return bool(self._indices(key))

    def get(self, key: str) -> str | None:
        indices = self._indices(key)
        if not indices:
            return None
        return parse_value(_ASSIGN_RE.match(self.lines[indices[-1]]).group(2))

    def is_blank(self, key: str) -> bool:
        """True when the key is absent or present with an empty value."""
        return not self.get(key)

    def set(self, key: str, value: str) -> None:
        """Write ``key`` once: first occurrence rewritten, later duplicates dropped."""
        if "\n" in value or "\r" in value:
            raise ValidationError(f"Value for {key} in {self.path} must be a single line")
        line = f"{key}={format_value(value)}"
        indices = self._indices(key)
        if not indices:
            self.lines.append(line)
            return
        self.lines[indices[0]] = line
        for i in reversed(indices[1:]):
            del self.lines[i]

    def unset(self, key: str) -> bool:
        indices = self._indices(key)
        for i in reversed(indices):
            del self.lines[i]
        return bool(indices)

    def normalize(self, key: str) -> None:
        """Collapse duplicates and re-render the effective value, if the key is present."""
        value = self.get(key)
        if value is not None:
            self.set(key, value)

    def render(self) -> str:
        return "\n".join(self.lines) + "\n" if self.lines else ""

    @property
    def changed(self) -> bool:
        return self.render() != self._original

    def save(self) -> bool:
        """Write the document back if it changed. Returns True when written."""
        if not self.changed:
            return False
        text = self.render()
        write_text_atomic(self.path, text)
        self._original = text
        return True

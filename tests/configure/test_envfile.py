"""Unit tests for EnvironmentFile and the atomic writer."""

import os

import pytest

from evdeploy.configure import EnvironmentFile, format_value, parse_value
from evdeploy.configure.atomic import write_text_atomic
from evdeploy.errors import ConfigWriteError, ValidationError

# ── value codec ─────────────────────────────────────────────────


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("1234", "1234"),
        ('"abc123"', "abc123"),
        ("'single quoted'", "single quoted"),
        (r'"with \"quote\" and \\ slash"', 'with "quote" and \\ slash'),
        ("bare # trailing comment", "bare"),
        ('""', ""),
        ('"" # required', ""),
        ('"abc123"  # note', "abc123"),
        ("'single' # note", "single"),
        ("", ""),
    ],
)
def test_parse_value(raw, expected):
    assert parse_value(raw) == expected


def test_format_value_numeric_is_bare():
    assert format_value("1234") == "1234"


def test_format_value_quotes_and_escapes():
    assert format_value("abc123") == '"abc123"'
    assert format_value('a"b\\c') == '"a\\"b\\\\c"'
    assert format_value("") == '""'


# ── document edits ──────────────────────────────────────────────


SAMPLE = """# comment line
export CHAIN_ID=1
not an assignment

DA_NAMESPACE="first"
OTHER=keep # note
DA_NAMESPACE="second"
"""


def test_get_last_occurrence_wins(tmp_path):
    env = EnvironmentFile(tmp_path / ".env", SAMPLE)
    assert env.get("DA_NAMESPACE") == "second"
    assert env.get("CHAIN_ID") == "1"
    assert env.get("OTHER") == "keep"
    assert env.get("MISSING") is None
    assert env.keys() == ["CHAIN_ID", "DA_NAMESPACE", "OTHER"]


def test_set_collapses_duplicates_at_first_position(tmp_path):
    env = EnvironmentFile(tmp_path / ".env", SAMPLE)
    env.set("DA_NAMESPACE", "abc123")
    lines = env.render().splitlines()
    assert lines.count('DA_NAMESPACE="abc123"') == 1
    assert lines.index('DA_NAMESPACE="abc123"') == 4
    assert "not an assignment" in lines
    assert "# comment line" in lines


def test_set_appends_missing_key(tmp_path):
    env = EnvironmentFile(tmp_path / ".env", "A=1\n")
    env.set("B", "two")
    assert env.render() == 'A=1\nB="two"\n'


def test_unset_removes_every_occurrence(tmp_path):
    env = EnvironmentFile(tmp_path / ".env", SAMPLE)
    assert env.unset("DA_NAMESPACE") is True
    assert not env.has("DA_NAMESPACE")
    assert env.unset("DA_NAMESPACE") is False


def test_normalize_keeps_effective_value(tmp_path):
    env = EnvironmentFile(tmp_path / ".env", SAMPLE)
    env.normalize("DA_NAMESPACE")
    env.normalize("MISSING")
    assert env.get("DA_NAMESPACE") == "second"
    assert env.render().count("DA_NAMESPACE=") == 1
    assert not env.has("MISSING")


def test_set_rejects_line_breaks(tmp_path):
    env = EnvironmentFile(tmp_path / ".env", "CHAIN_ID=1\n")
    for value in ("my\nchain", "my\rchain"):
        with pytest.raises(ValidationError, match="CHAIN_ID"):
            env.set("CHAIN_ID", value)
    assert env.render() == "CHAIN_ID=1\n"


def test_is_blank(tmp_path):
    env = EnvironmentFile(tmp_path / ".env", 'EMPTY=\nQUOTED=""\nCOMMENTED="" # required\nSET=x\n')
    assert env.is_blank("EMPTY")
    assert env.is_blank("QUOTED")
    assert env.is_blank("COMMENTED")
    assert env.is_blank("ABSENT")
    assert not env.is_blank("SET")


# ── load / save ─────────────────────────────────────────────────


def test_load_missing_file(tmp_path):
    with pytest.raises(ValidationError, match="not found"):
        EnvironmentFile.load(tmp_path / ".env")


def test_save_only_when_changed(tmp_path):
    path = tmp_path / ".env"
    path.write_text("A=1\n")
    env = EnvironmentFile.load(path)
    assert env.save() is False
    env.set("A", "1")
    assert env.save() is False
    env.set("A", "2")
    assert env.save() is True
    assert path.read_text() == "A=2\n"


def test_save_preserves_mode(tmp_path):
    path = tmp_path / ".env"
    path.write_text("A=1\n")
    os.chmod(path, 0o600)
    env = EnvironmentFile.load(path)
    env.set("A", "2")
    env.save()
    assert os.stat(path).st_mode & 0o777 == 0o600


def test_atomic_write_failure_leaves_original(tmp_path, monkeypatch):
    path = tmp_path / ".env"
    path.write_text("A=1\n")

    def fail_replace(src, dst):
        raise OSError(28, "No space left on device")

    monkeypatch.setattr("evdeploy.configure.atomic.os.replace", fail_replace)
    with pytest.raises(ConfigWriteError) as exc_info:
        write_text_atomic(path, "A=2\n")
    assert exc_info.value.path == path
    assert path.read_text() == "A=1\n"
    assert sorted(p.name for p in tmp_path.iterdir()) == [".env"]


def test_atomic_write_into_missing_directory(tmp_path):
    with pytest.raises(ConfigWriteError):
        write_text_atomic(tmp_path / "absent" / ".env", "A=1\n")

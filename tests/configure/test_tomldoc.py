"""Unit tests for TomlDocument section-scoped edits."""

import re

import pytest

from evdeploy.configure import TomlDocument, to_literal

CONFIG = """# top comment
[Header]
  # TrustedHash = "commented"
  TrustedHashes = []
  TrustedHash = ""

[DASer]
  SampleFrom = 1

[State]
  DefaultKeyName = "my_celes_key"
"""


def test_to_literal():
    assert to_literal(True) == "true"
    assert to_literal(False) == "false"
    assert to_literal(42) == "42"
    assert to_literal("abc") == '"abc"'
    assert to_literal('a"b') == '"a\\"b"'


def test_sections():
    assert TomlDocument(CONFIG).sections() == ["Header", "DASer", "State"]


def test_section_span():
    doc = TomlDocument(CONFIG)
    assert doc.section_span("DASer") == (6, 9)
    assert doc.section_span("Missing") is None


def test_set_updates_only_matching_key():
    doc = TomlDocument(CONFIG)
    assert doc.set("Header", "TrustedHash", "ABCDEF") is True
    lines = doc.render().splitlines()
    assert '  TrustedHash = "ABCDEF"' in lines
    assert '  # TrustedHash = "commented"' in lines
    assert "  TrustedHashes = []" in lines


def test_set_inserts_after_header():
    doc = TomlDocument(CONFIG)
    doc.set("State", "TxWorkerAccounts", 8)
    lines = doc.render().splitlines()
    header = lines.index("[State]")
    assert lines[header + 1] == "  TxWorkerAccounts = 8"
    assert doc.get("State", "TxWorkerAccounts") == "8"


def test_set_is_scoped_to_section():
    doc = TomlDocument("[a]\n  port = 1\n[b]\n  port = 2\n")
    doc.set("b", "port", 3)
    assert doc.render() == "[a]\n  port = 1\n[b]\n  port = 3\n"


def test_set_missing_section():
    doc = TomlDocument(CONFIG)
    assert doc.set("grpc", "enable", True) is False
    assert not doc.changed


def test_replace_all():
    doc = TomlDocument('[grpc]\n  address = "localhost:9090"\n[api]\n  x = "localhost:9090"\n')
    assert doc.replace_all("localhost:9090", "0.0.0.0:9090") == 2
    assert "localhost" not in doc.render()


def test_replace_all_with_pattern():
    doc = TomlDocument('a = "localhost:9090"\nb = "localhost:90901"\n')
    assert doc.replace_all(re.compile(r"localhost:9090(?!\d)"), "0.0.0.0:9090") == 1
    assert doc.render() == 'a = "0.0.0.0:9090"\nb = "localhost:90901"\n'


def test_render_preserves_untouched_text():
    doc = TomlDocument(CONFIG)
    assert doc.render() == CONFIG
    assert not doc.changed


def test_save_roundtrip(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text(CONFIG)
    doc = TomlDocument.load(path)
    assert doc.save() is False
    doc.set("DASer", "SampleFrom", 500)
    assert doc.save() is True
    assert "  SampleFrom = 500" in path.read_text().splitlines()


def test_save_without_path():
    with pytest.raises(ValueError):
        TomlDocument("[a]\n").save()

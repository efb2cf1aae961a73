"""Configuration patching: .env documents, TOML-like node configs, patch rules."""

from evdeploy.configure.envfile import EnvironmentFile, format_value, parse_value
from evdeploy.configure.node_config import patch_app_config, patch_light_node_config
from evdeploy.configure.patcher import (
    CHAIN_ID_KEY,
    DA_NAMESPACE_KEY,
    RECOGNIZED_KEYS,
    SIGNER_PASSPHRASE_KEY,
    ConfigurationPatcher,
    generate_passphrase,
)
from evdeploy.configure.tomldoc import TomlDocument, to_literal

__all__ = [
    "CHAIN_ID_KEY",
    "DA_NAMESPACE_KEY",
    "RECOGNIZED_KEYS",
    "SIGNER_PASSPHRASE_KEY",
    "ConfigurationPatcher",
    "EnvironmentFile",
    "TomlDocument",
    "format_value",
    "generate_passphrase",
    "parse_value",
    "patch_app_config",
    "patch_light_node_config",
    "to_literal",
]

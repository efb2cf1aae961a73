"""Rollkit deployment orchestrator: provisions and configures ev-stacks on one host."""

__version__ = "0.1.0"

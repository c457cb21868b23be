"""Orchestrate external AI coding agents from one CLI."""

__version__ = "0.1.0"

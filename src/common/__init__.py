"""Shared helpers used across the CLI and the toolset package."""

"""Command-line interface for llmx"""

from llmx.cli.main import cli

__all__ = ["cli"]

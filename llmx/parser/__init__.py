"""Shorthand format compiler"""

from llmx.parser.shorthand import compile_format

__all__ = ["compile_format"]

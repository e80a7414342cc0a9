"""Main CLI entry point for llmx.

This module provides the command-line interface: `llmx [OPTIONS] [MESSAGE|-]`
sends one prompt to the selected provider and prints the answer on stdout,
`llmx profile edit|list` manages the profiles config file. Diagnostics go to
stderr so stdout stays clean for piping.
"""

import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import click
from rich.console import Console
from rich.markup import escape

from llmx.cli.config import (
    default_config_path,
    ensure_config_file,
    load_profile,
    read_profile_file,
)
from llmx.llm.factory import known_providers
from llmx.orchestration import InvocationSettings, run
from llmx.orchestration.settings import DEFAULT_TIMEOUT
from llmx.types.errors import LlmxError

__version__ = "0.1.0"

err_console = Console(stderr=True)

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


class DefaultCommandGroup(click.Group):
    """Group that routes unknown leading arguments to a default command.

    `llmx "question"` and `llmx -p claude "question"` both dispatch to
    `ask`, while `llmx profile edit` still reaches the profile group.
    """

    def __init__(self, *args, default_command: str = "ask", **kwargs):
        super().__init__(*args, **kwargs)
        self.default_command = default_command

    def parse_args(self, ctx: click.Context, args: List[str]) -> List[str]:
        group_flags = {"--version", *ctx.help_option_names}
        if not args or (args[0] not in self.commands and args[0] not in group_flags):
            args.insert(0, self.default_command)
        return super().parse_args(ctx, args)


@click.group(cls=DefaultCommandGroup, context_settings=CONTEXT_SETTINGS)
@click.version_option(version=__version__, prog_name="llmx", message="%(version)s")
def cli() -> None:
    """llmx - send a prompt to an LLM API and print the answer"""
    pass


def _configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stderr),  # Logs go to stderr
        ],
    )


def _stdin_is_tty() -> bool:
    return sys.stdin.isatty()


def _read_stdin() -> str:
    return sys.stdin.read()


def parse_headers(values: Sequence[str]) -> Dict[str, str]:
    """Parse repeated `--header "Name: value"` options.

    Raises:
        click.BadParameter: If an entry has no colon or an empty name
    """
    headers: Dict[str, str] = {}
    for value in values:
        name, sep, content = value.partition(":")
        name = name.strip()
        if not sep or not name:
            # The value may hold a credential, so it is not echoed back
            raise click.BadParameter(
                "expected 'Name: value'", param_hint="'--header'"
            )
        headers[name] = content.strip()
    return headers


def _first_set(*values):
    """Return the first value that is not None."""
    for value in values:
        if value is not None:
            return value
    return None


def _strip_trailing_newlines(text: str) -> str:
    return text.rstrip("\n")


@cli.command(context_settings=CONTEXT_SETTINGS)
@click.argument("message", required=False)
@click.option(
    "--provider",
    "-p",
    default=None,
    help=f"LLM provider or alias (known: {', '.join(known_providers())}; default: openai)",
)
@click.option("--model", "-m", default=None, help="Model name (default: provider's default)")
@click.option("--instructions", "-i", default=None, help="Instructions to guide the model")
@click.option(
    "--format",
    "-f",
    "format_",
    default=None,
    help='Output fields, e.g. "name:string,age:integer,tags:string[]"',
)
@click.option(
    "--only",
    default=None,
    help="Print only this top-level key from structured JSON output",
)
@click.option(
    "--error-key",
    default=None,
    help="Fail when this JSON key holds a non-empty error message",
)
@click.option("--base-url", default=None, help="Base URL for the LLM API")
@click.option(
    "--max-tokens",
    type=click.IntRange(min=0),
    default=None,
    help="Output token ceiling (0 = provider default)",
)
@click.option("--verbosity", default=None, help="Verbosity (low/medium/high)")
@click.option(
    "--reasoning-effort",
    default=None,
    help="Reasoning effort (minimal/low/medium/high)",
)
@click.option(
    "--api-key",
    default=None,
    help="API key (default: the provider's environment variable)",
)
@click.option(
    "--header",
    "-H",
    "headers",
    multiple=True,
    help='Extra request header "Name: value" (repeatable)',
)
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    envvar="LLMX_TIMEOUT",
    default=None,
    help=f"HTTP timeout in seconds (default: {DEFAULT_TIMEOUT:g})",
)
@click.option("--profile", "profile_name", envvar="LLMX_PROFILE", default=None, help="Profile name")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    envvar="LLMX_CONFIG",
    default=None,
    help="Path to config file (default: ~/.config/llmx/config.json)",
)
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def ask(
    ctx: click.Context,
    message: Optional[str],
    provider: Optional[str],
    model: Optional[str],
    instructions: Optional[str],
    format_: Optional[str],
    only: Optional[str],
    error_key: Optional[str],
    base_url: Optional[str],
    max_tokens: Optional[int],
    verbosity: Optional[str],
    reasoning_effort: Optional[str],
    api_key: Optional[str],
    headers: Tuple[str, ...],
    timeout: Optional[float],
    profile_name: Optional[str],
    config_path: Optional[Path],
    debug: bool,
) -> None:
    """Send a message to the LLM API and print the answer.

    MESSAGE is the prompt. Use "-" to read it from stdin; with no MESSAGE,
    piped stdin is read and an interactive terminal shows this help.
    Explicit flags override the selected profile, which overrides the
    provider's defaults.

    \b
    Example:
        llmx "what is the capital of France?"
        llmx -f "command,explanation" --only command "list go files recursively"
        git diff | llmx -p claude -i "write a commit message"
    """
    if message == "-":
        message = _read_stdin()
    elif message is None:
        if _stdin_is_tty():
            click.echo(ctx.get_help())
            ctx.exit(0)
        message = _read_stdin()

    extra_headers = parse_headers(headers)
    _configure_logging(debug)

    try:
        selected = load_profile(config_path or default_config_path(), profile_name)
        settings = InvocationSettings(
            provider=_first_set(provider, selected.provider, ""),
            model=_first_set(model, selected.model, ""),
            instructions=_first_set(instructions, selected.instructions, ""),
            format=_first_set(format_, selected.format, ""),
            base_url=_first_set(base_url, selected.base_url, ""),
            max_tokens=_first_set(max_tokens, selected.max_tokens, 0),
            verbosity=_first_set(verbosity, selected.verbosity, ""),
            reasoning_effort=_first_set(reasoning_effort, selected.reasoning_effort, ""),
            only=_first_set(only, selected.only, ""),
            error_key=_first_set(error_key, selected.error_key, ""),
            api_key=api_key,
            extra_headers=extra_headers,
            timeout=_first_set(timeout, selected.timeout, DEFAULT_TIMEOUT),
        )

        if debug:
            err_console.print(
                f"[dim]Provider: {escape(settings.provider or 'openai')} "
                f"(model: {escape(settings.model or 'default')})[/dim]",
                soft_wrap=True,
            )

        output = run(message, settings)

    except LlmxError as e:
        err_console.print(f"[bold red]Error:[/bold red] {escape(str(e))}", soft_wrap=True)
        if debug:
            err_console.print_exception()
        ctx.exit(1)
    except Exception as e:
        err_console.print(f"[bold red]Unexpected Error:[/bold red] {escape(str(e))}", soft_wrap=True)
        if debug:
            err_console.print_exception()
        ctx.exit(1)

    click.echo(_strip_trailing_newlines(output))


@cli.group()
def profile() -> None:
    """Manage llmx profiles"""
    pass


config_option = click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    envvar="LLMX_CONFIG",
    default=None,
    help="Path to config file (default: ~/.config/llmx/config.json)",
)


@profile.command("edit")
@config_option
def profile_edit(config_path: Optional[Path]) -> None:
    """Open the profiles config in your $EDITOR, creating it if missing."""
    path = config_path or default_config_path()
    try:
        if ensure_config_file(path):
            err_console.print(f"[green]Created[/green] {escape(str(path))}", soft_wrap=True)
    except LlmxError as e:
        err_console.print(f"[bold red]Error:[/bold red] {escape(str(e))}", soft_wrap=True)
        raise click.exceptions.Exit(1)

    click.edit(filename=str(path))


@profile.command("list")
@config_option
def profile_list(config_path: Optional[Path]) -> None:
    """List profile names; the default profile is marked with '*'."""
    path = config_path or default_config_path()
    try:
        config = read_profile_file(path)
    except LlmxError as e:
        err_console.print(f"[bold red]Error:[/bold red] {escape(str(e))}", soft_wrap=True)
        raise click.exceptions.Exit(1)

    if not config.profiles:
        err_console.print(f"[yellow]No profiles defined in[/yellow] {escape(str(path))}", soft_wrap=True)
        return

    for name in sorted(config.profiles):
        marker = "*" if name == config.default_profile else " "
        click.echo(f"{marker} {name}")


if __name__ == "__main__":
    cli()

import logging
import sys
from pathlib import Path

import click

from ellm.version import __version__
from ellm.logutil import setup_logging
from ellm.config import DEFAULT_CONFIG_PATH, DEFAULT_MAX_TOKENS, Config, ConfigResolver
from ellm.client import Client
from ellm.errors import EllmError


class FriendlyException(click.ClickException):
    pass


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("--api-key", default=None, help="API key (overrides ANTHROPIC_API_KEY and the config file)")
@click.option("--model", default=None, help="Model to use")
@click.option("--max-tokens", default=None, type=click.IntRange(min=1), help=f"Maximum tokens to generate [default: config file value, else {DEFAULT_MAX_TOKENS}]")
@click.option(
    "--config-file",
    type=click.Path(path_type=Path),
    default=DEFAULT_CONFIG_PATH,
    show_default=True,
    help="TOML config file holding api_key",
)
@click.option("--verbose", "verbose", is_flag=True, help="Enable verbose logging (DEBUG)")
@click.version_option(version=__version__, prog_name="ellm")
@click.pass_context
def cli(ctx: click.Context, api_key: str | None, model: str | None, max_tokens: int | None, config_file: Path, verbose: bool):
    """Interact with Claude from the command line."""
    setup_logging(debug=verbose)
    ctx.ensure_object(dict)
    ctx.obj["api_key"] = api_key
    ctx.obj["model"] = model
    ctx.obj["max_tokens"] = max_tokens
    ctx.obj["resolver"] = ConfigResolver(path=config_file)


def _load_config(ctx: click.Context) -> Config:
    # command-line overrides apply on top of whichever source supplied the key
    config = ctx.obj["resolver"].resolve(ctx.obj["api_key"])
    if ctx.obj["model"]:
        config = config.with_model(ctx.obj["model"])
    if ctx.obj["max_tokens"] is not None:
        config = config.with_max_tokens(ctx.obj["max_tokens"])
    return config


@cli.command()
@click.argument("message")
@click.pass_context
def send(ctx: click.Context, message: str):
    """Send a message to Claude and print the reply."""
    try:
        with Client(_load_config(ctx)) as client:
            reply = client.send_message(message)
    except EllmError as e:
        raise FriendlyException(str(e))
    click.echo(reply)


@cli.command("bool")
@click.argument("question")
@click.pass_context
def bool_(ctx: click.Context, question: str):
    """Ask a yes/no question. Exits 0 for true, 1 for false."""
    try:
        with Client(_load_config(ctx)) as client:
            answer = client.ask_bool(question)
    except EllmError as e:
        raise FriendlyException(str(e))
    click.echo("true" if answer else "false")
    if not answer:
        ctx.exit(1)


@cli.command()
@click.pass_context
def config(ctx: click.Context):
    """Show the current configuration (API key masked)."""
    resolver: ConfigResolver = ctx.obj["resolver"]
    try:
        cfg = _load_config(ctx)
    except EllmError as e:
        raise FriendlyException(str(e))

    click.echo("Current Configuration:")
    click.echo(f"  API Key:    {cfg.masked_key()}")
    click.echo(f"  Base URL:   {cfg.base_url}")
    click.echo(f"  Model:      {cfg.model}")
    click.echo(f"  Max Tokens: {cfg.max_tokens}")
    click.echo(f"\nConfig file location: {resolver.path}")
    status = "Found" if Path(resolver.path).exists() else "Not found"
    click.echo(f"  Status: {status}")


def main():
    # click reports FriendlyException itself and exits non-zero
    try:
        cli(prog_name="ellm")
    except Exception as e:
        logging.getLogger(__name__).exception("Unhandled error")
        err = click.ClickException(f"Unexpected error: {e}")
        err.show()
        sys.exit(err.exit_code)


if __name__ == "__main__":
    main()

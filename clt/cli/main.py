"""
clt CLI - record and replay command-line sessions.

Commands:
    clt rec -O <file>             - Record an interactive session
    clt rec -I <file> -O <file>   - Replay a transcript
    clt compile <file>            - Show a transcript with blocks expanded
    clt version                   - Show version
"""

import sys
from pathlib import Path
from typing import Optional

import click

from clt.config import DEFAULT_OUTPUT, ShellConfig
from clt.errors import CltError, ErrorKind, InputNotFound
from clt.logging import get_clt_logger, setup_logging

logger = get_clt_logger(__name__)


@click.group(invoke_without_command=True)
@click.option('--log-level', default='WARNING', envvar='CLT_LOG_LEVEL', show_default=True,
              help='Log level (DEBUG, INFO, WARNING, ERROR)')
@click.pass_context
def cli(ctx, log_level: str):
    """clt - record and replay command-line tests."""
    setup_logging(level=log_level)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@click.command()
@click.option('--input-file', '-I', type=click.Path(dir_okay=False),
              help='Transcript to replay (omit to record interactively)')
@click.option('--output-file', '-O', default=DEFAULT_OUTPUT, show_default=True,
              type=click.Path(dir_okay=False), help='File to save results to')
@click.option('--delay', '-D', default=0, envvar='CLT_DELAY', show_default=True,
              type=click.IntRange(min=0), help='Delay between commands in milliseconds')
def rec(input_file: Optional[str], output_file: str, delay: int):
    """
    Record a shell session, or replay one with -I.

    Example:
        clt rec -O tests/login.rec
        clt rec -I tests/login.rec -O tests/login.rep -D 100
    """
    from clt.core import runner

    config = ShellConfig.from_env()

    try:
        if input_file:
            if not Path(input_file).is_file():
                raise InputNotFound(input_file)
            result = runner.replay(input_file, output_file, delay_ms=delay, config=config)
            logger.success(f"Replayed {result.command_count} command(s) into {output_file} ({result.total_ms}ms)")
        else:
            click.echo("Recording session. Type commands one by one, then `exit` or ^D to save.", err=True)
            result = runner.record(output_file, config=config)
            logger.success(f"Recorded {result.command_count} command(s) into {output_file}")
    except CltError as e:
        _fail(e, e.exit_code)
    except Exception as e:
        logger.debug("Unclassified failure", exc_info=True)
        _fail(e, ErrorKind.TEST_FAILED.exit_code)


@cli.command("compile")
@click.argument('input_file', type=click.Path(dir_okay=False))
@click.option('--output', '-o', type=click.Path(dir_okay=False), help='Write result to file instead of stdout')
def compile_command(input_file: str, output: Optional[str]):
    """
    Show a transcript with all blocks expanded.

    Example:
        clt compile tests/login.rec
    """
    from clt.parser.compiler import compile_file

    config = ShellConfig.from_env()
    try:
        text = compile_file(input_file, config.block_extension)
    except CltError as e:
        _fail(e, e.exit_code)

    if output:
        Path(output).write_text(text + "\n", encoding="utf-8")
        click.echo(f"Compiled transcript saved to {output}")
    else:
        click.echo(text)


@cli.command()
def version():
    """Show clt version."""
    from clt import __version__
    click.echo(f"clt version {__version__}")


cli.add_command(rec)


def _fail(error: Exception, code: int) -> None:
    click.secho(f"rec: {error}", fg="red", err=True)
    sys.exit(code)


def main():
    """Entry point for CLI."""
    cli()


def rec_main():
    """Entry point for the standalone clt-rec command."""
    setup_logging()
    rec()


if __name__ == "__main__":
    main()

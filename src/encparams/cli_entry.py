"""Click CLI wiring and entry point for encparams."""

from __future__ import annotations

import json
import logging
from typing import NoReturn, Tuple

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from src.config_loader import ConfigError, ParameterValidationError
from src.encparams.core import parse_config_params
from src.encparams.registry import build_encoder_registry
from src.encparams.report import (
    build_params_table,
    params_to_dict,
    render_config_text,
    write_config_file,
)
from src.encparams.validation import check_parameters

logger = logging.getLogger(__name__)

EXIT_PARSE_ERROR = 2
EXIT_VALIDATION_ERROR = 3
EXIT_WRITE_ERROR = 4


def _configure_logging(*, verbose: bool, quiet: bool) -> None:
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING
    handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=False,
        rich_tracebacks=True,
    )
    logging.basicConfig(level=level, format="%(message)s", datefmt="[%X]", handlers=[handler])
    logging.getLogger("src").setLevel(level)


def _fail(exc: ConfigError, code: int) -> NoReturn:
    Console(stderr=True).print(f"[bold red]Error:[/] {escape(str(exc))}")
    raise click.exceptions.Exit(code) from exc


@click.command(
    context_settings={"ignore_unknown_options": True, "help_option_names": ["--help"]},
)
@click.option("--json", "json_mode", is_flag=True, help="Print resolved parameters as JSON.")
@click.option(
    "--write-config",
    "write_config",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write resolved parameters to a config file usable with -cf.",
)
@click.option("--no-validate", is_flag=True, help="Skip the cross-field consistency checks.")
@click.option("--no-probe", is_flag=True, help="Do not read geometry from a Y4M input header.")
@click.option("--verbose", is_flag=True, help="Show debug logging.")
@click.option("--quiet", is_flag=True, help="Only log errors.")
@click.argument("encoder_args", nargs=-1, type=click.UNPROCESSED)
def main(
    json_mode: bool,
    write_config: str | None,
    no_validate: bool,
    no_probe: bool,
    verbose: bool,
    quiet: bool,
    encoder_args: Tuple[str, ...],
) -> None:
    """Resolve encoder parameters from ENCODER_ARGS and config files.

    Pass encoder flags after `--`, for example:

        encparams -- -cf base.cfg -if clip.y4m -qp 28
    """

    if verbose and quiet:
        raise click.ClickException("Cannot use both --verbose and --quiet.")
    _configure_logging(verbose=verbose, quiet=quiet)

    registry = build_encoder_registry()
    try:
        params = parse_config_params(
            encoder_args,
            registry=registry,
            probe_container=not no_probe,
        )
    except ConfigError as exc:
        _fail(exc, EXIT_PARSE_ERROR)

    if not no_validate:
        try:
            check_parameters(params)
        except ParameterValidationError as exc:
            _fail(exc, EXIT_VALIDATION_ERROR)

    if write_config:
        try:
            text = render_config_text(params, registry)
        except ConfigError as exc:
            _fail(exc, EXIT_PARSE_ERROR)
        try:
            target = write_config_file(write_config, text)
        except ConfigError as exc:
            _fail(exc, EXIT_WRITE_ERROR)
        logger.info("Wrote config to %s", target)

    if json_mode:
        click.echo(json.dumps(params_to_dict(params), separators=(",", ":")))
    else:
        Console().print(build_params_table(params, registry, title="Encoder parameters"))

"""actkit CLI - Main entrypoint."""

from pathlib import Path
from typing import Annotated

import typer

from actkit import __version__
from actkit.cli.commands import audit_cmd, criteria_cmd, rules_cmd
from actkit.cli.utils import console
from actkit.kernel.config import load_config
from actkit.kernel.exceptions import ActKitError
from actkit.kernel.logging import configure_logging

app = typer.Typer(
    name="actkit",
    help="actkit - ACT rule engine for WCAG accessibility audits.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    pretty_exceptions_enable=False,
)

app.command("audit")(audit_cmd.audit)
app.command("rules")(rules_cmd.rules)
app.command("criteria")(criteria_cmd.criteria)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"[bold blue]actkit[/bold blue] version [green]{__version__}[/green]")
        raise typer.Exit()


@app.callback()
def callback(
    ctx: typer.Context,
    config_path: Annotated[
        Path | None,
        typer.Option("--config", help="kind: Config YAML or TOML file"),
    ] = None,
    log_level: Annotated[
        str | None,
        typer.Option("--log-level", help="Log level: debug|info|warning|error"),
    ] = None,
    verbose: Annotated[
        bool, typer.Option("-V", "--verbose", help="Enable verbose logging")
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-v",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
) -> None:
    """actkit - run ACT accessibility rules against HTML documents.

    Global flags are parsed here and stored on `ctx.obj` for subcommands.
    """
    if ctx.obj is None:
        ctx.obj = {}

    try:
        config = load_config(config_path)
    except (FileNotFoundError, ValueError, ActKitError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(2) from e

    logging_config = config.logging
    level = logging_config.level
    if verbose:
        level = "DEBUG"
    elif log_level:
        level = log_level.upper()

    configure_logging(
        level=level,  # type: ignore[arg-type]
        format=logging_config.format,
        output_file=logging_config.output_file,
        use_color=logging_config.use_color,
        include_timestamp=logging_config.include_timestamp,
        use_rich=logging_config.use_rich,
    )

    ctx.obj.update({"config": config, "log_level": level, "version": __version__})


def main() -> None:
    """Main CLI entrypoint."""
    app()


if __name__ == "__main__":
    main()

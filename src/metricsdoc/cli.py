"""Command-line entry point: ``metricsdoc ROOT... OUTPUT``."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Final, NoReturn
from uuid import uuid4

import typer

from metricsdoc import __version__
from metricsdoc.catalog import load_catalog
from metricsdoc.pipeline import generate_document
from metricsdoc_common.errors import (
    ConfigurationError,
    MetricsDocError,
    SettingsError,
)
from metricsdoc_common.fs import atomic_write
from metricsdoc_common.logging import LoggerAdapter, get_logger, setup_logging, with_fields
from metricsdoc_common.settings import load_settings

LOGGER = get_logger(__name__)

CLI_TITLE: Final[str] = "Generate metrics documentation from Go metric declarations"

EXIT_EXTRACTION_ERROR: Final[int] = 1
EXIT_CONFIG_ERROR: Final[int] = 2

MIN_PATHS: Final[int] = 2

app = typer.Typer(help=f"{CLI_TITLE} ({__version__})", add_completion=False)

PathsArgument = Annotated[
    list[Path],
    typer.Argument(
        metavar="ROOT... OUTPUT",
        help="Source roots to scan, followed by the markdown file to write.",
        show_default=False,
    ),
]
CatalogOption = Annotated[
    Path | None,
    typer.Option(
        "--catalog",
        "-c",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        help="Catalog replacing the bundled conventions (symbols, stability, patterns).",
    ),
]
LogLevelOption = Annotated[
    str | None,
    typer.Option("--log-level", help="Logging threshold (DEBUG, INFO, WARNING, ERROR)."),
]
LogFormatOption = Annotated[
    str | None,
    typer.Option("--log-format", help="Diagnostic format on stderr: json or text."),
]


def _exit_code_for(exc: MetricsDocError) -> int:
    if isinstance(exc, (ConfigurationError, SettingsError)):
        return EXIT_CONFIG_ERROR
    return EXIT_EXTRACTION_ERROR


def _fail(logger: LoggerAdapter, exc: MetricsDocError) -> NoReturn:
    logger.log(
        exc.log_level,
        "Metrics documentation generation failed",
        extra={
            "status": "error",
            "error_code": exc.code.value,
            "error_context": exc.context,
        },
    )
    typer.echo(str(exc), err=True)
    raise typer.Exit(code=_exit_code_for(exc)) from exc


@app.command(help=CLI_TITLE)
def generate(
    paths: PathsArgument,
    catalog: CatalogOption = None,
    log_level: LogLevelOption = None,
    log_format: LogFormatOption = None,
) -> None:
    """Scan source roots and write the metrics document to the last path."""
    if len(paths) < MIN_PATHS:
        message = "expected at least one source root followed by an output path"
        raise typer.BadParameter(message, param_hint="ROOT... OUTPUT")
    *roots, output = paths

    try:
        settings = load_settings(
            log_level=log_level,
            log_format=log_format.lower() if log_format else None,
            catalog_path=catalog,
        )
    except SettingsError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=EXIT_CONFIG_ERROR) from exc
    setup_logging(settings.log_level, json_format=settings.log_format == "json")

    with with_fields(LOGGER, correlation_id=uuid4().hex, operation="generate") as logger:
        logger.info(
            "Command started",
            extra={"status": "start", "roots": [str(root) for root in roots]},
        )
        try:
            document = generate_document(roots, load_catalog(settings.catalog_path))
        except MetricsDocError as exc:
            _fail(logger, exc)
        logger.info("Writing output", extra={"output": str(output)})
        try:
            atomic_write(output, document)
        except OSError as exc:
            logger.exception("Failed to write output", extra={"output": str(output)})
            typer.echo(f"error creating output file {output}, {exc}", err=True)
            raise typer.Exit(code=EXIT_EXTRACTION_ERROR) from exc
        logger.info("Command completed", extra={"status": "success", "output": str(output)})


def main() -> None:
    """Console-script entry point."""
    app()


if __name__ == "__main__":  # pragma: no cover - manual execution entrypoint
    main()

"""CLI entrypoint for agg-dsl — typer app for persisted aggregation configs."""

import json
import sys
from pathlib import Path

import structlog
import typer

from agg_dsl.aggregation.domain.persisted import PersistedAggConfig
from agg_dsl.aggregation.infrastructure.loader import YamlAggConfigLoader
from agg_dsl.aggregation.infrastructure.observer import StructlogAggConfigLoaderObserver
from agg_dsl.core.errors import AggDslError

app = typer.Typer(add_completion=False)


def _configure_structlog(log_format: str) -> None:
    """Configure structlog based on the requested format."""
    if log_format == "console":
        renderer: structlog.types.Processor = structlog.dev.ConsoleRenderer()
    elif log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        typer.echo(f"Invalid log format: {log_format!r}. Must be 'console' or 'json'.")
        raise typer.Exit(code=1)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(0),
        context_class=dict,
        # Logs go to stderr so stdout stays machine-readable.
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def _load(config_path: Path, log_format: str) -> list[PersistedAggConfig]:
    _configure_structlog(log_format=log_format)
    loader = YamlAggConfigLoader(observer=StructlogAggConfigLoaderObserver())
    try:
        return loader.load(path=config_path)
    except AggDslError as exc:
        typer.echo(str(exc))
        raise typer.Exit(code=1) from exc


@app.command("ensure-ids")
def ensure_ids(
    config_path: Path = typer.Argument(..., help="Path to persisted agg configs"),
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the JSON to this file instead of stdout",
    ),
    log_format: str = typer.Option(
        "console",
        "--log-format",
        help="Log format: 'console' or 'json'",
    ),
) -> None:
    """Print the configs in CONFIG_PATH as JSON, with ids assigned where missing."""
    configs = _load(config_path=config_path, log_format=log_format)
    payload = json.dumps(
        [config.model_dump(by_alias=True) for config in configs], indent=2
    )
    if output is None:
        typer.echo(payload)
        return
    output.write_text(payload + "\n", encoding="utf-8")
    typer.echo(f"Wrote {len(configs)} aggregation config(s) to {output}")


@app.command()
def validate(
    config_path: Path = typer.Argument(..., help="Path to persisted agg configs"),
    log_format: str = typer.Option(
        "console",
        "--log-format",
        help="Log format: 'console' or 'json'",
    ),
) -> None:
    """Check that CONFIG_PATH holds valid persisted aggregation configs."""
    configs = _load(config_path=config_path, log_format=log_format)
    typer.echo(f"{len(configs)} aggregation config(s) OK")


if __name__ == "__main__":
    app()

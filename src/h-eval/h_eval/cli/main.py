"""CLI entrypoint for h-eval — typer app with `submit`, `metrics` and `export` commands."""

import asyncio
import json
import sys
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

import structlog
import typer
from pydantic import ValidationError

from h_eval.catalog.infrastructure.jsonl_loader import JsonlCatalogLoader
from h_eval.catalog.infrastructure.memory import InMemoryResponseCatalog
from h_eval.catalog.infrastructure.observer import StructlogCatalogObserver
from h_eval.cli.output.snapshot import print_snapshot
from h_eval.config.domain.config import HEvalConfig
from h_eval.config.infrastructure.observer import StructlogConfigObserver
from h_eval.config.infrastructure.yaml_loader import YamlConfigLoader
from h_eval.core.errors import HEvalError
from h_eval.export.application.exporter import RecordExporter
from h_eval.export.domain.filter import ExportFilter
from h_eval.export.infrastructure.jsonl_writer import JsonlDatasetWriter, read_last_cursor
from h_eval.export.infrastructure.observer import StructlogExportObserver
from h_eval.metrics.application.aggregator import MetricAggregator
from h_eval.metrics.domain.snapshot import MetricSnapshot
from h_eval.metrics.infrastructure.observer import StructlogMetricsObserver
from h_eval.records.application.ingestion import EvaluationIngestor
from h_eval.records.infrastructure.jsonl_store import JsonlRecordStore
from h_eval.records.infrastructure.observer import StructlogRecordObserver

app = typer.Typer(add_completion=False)


@dataclass(frozen=True)
class _Services:
    config: HEvalConfig
    catalog: InMemoryResponseCatalog
    store: JsonlRecordStore


def _configure_structlog(log_format: str) -> None:
    """Configure structlog based on the requested format. Logs go to stderr."""
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
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def _load_services(config_path: Path) -> _Services:
    config = YamlConfigLoader(observer=StructlogConfigObserver()).load(path=config_path)
    catalog = JsonlCatalogLoader(observer=StructlogCatalogObserver()).load(
        path=config.catalog.path
    )
    store = JsonlRecordStore(
        path=config.store.path,
        catalog=catalog,
        observer=StructlogRecordObserver(),
    )
    return _Services(config=config, catalog=catalog, store=store)


def _parse_timestamp(value: str | None, option: str) -> datetime | None:
    """Parse an ISO-8601 timestamp option; naive values are rejected."""
    if value is None:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as exc:
        typer.echo(f"Invalid {option}: {value!r} is not an ISO-8601 timestamp.")
        raise typer.Exit(code=1) from exc
    if parsed.tzinfo is None:
        typer.echo(f"Invalid {option}: {value!r} must include a UTC offset.")
        raise typer.Exit(code=1)
    return parsed


def _run(command: str, action: Callable[[], None]) -> None:
    """Run action, mapping errors to a message and exit code 1 like every command."""
    try:
        action()
    except typer.Exit:
        raise
    except KeyboardInterrupt:
        typer.echo(f"{command} interrupted.")
        sys.exit(1)
    except HEvalError as exc:
        typer.echo(str(exc))
        sys.exit(1)
    except Exception as exc:  # noqa: BLE001
        typer.echo(f"Unexpected error: {exc}\nPlease report this bug.")
        sys.exit(1)


@app.command()
def submit(
    config_path: Path = typer.Argument(..., help="Path to h-eval config YAML"),
    payload_path: Path = typer.Argument(
        ..., help="JSON file with one evaluation payload, or '-' for stdin"
    ),
    log_format: str = typer.Option(
        "console", "--log-format", help="Log format: 'console' or 'json'"
    ),
) -> None:
    """Validate and store one evaluation record."""
    _configure_structlog(log_format=log_format)

    def action() -> None:
        services = _load_services(config_path=config_path)
        raw = (
            sys.stdin.read()
            if str(payload_path) == "-"
            else payload_path.read_text(encoding="utf-8")
        )
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            typer.echo(f"Invalid payload: {exc}")
            raise typer.Exit(code=1) from exc
        if not isinstance(payload, dict):
            typer.echo("Invalid payload: expected a JSON object.")
            raise typer.Exit(code=1)

        ingestor = EvaluationIngestor(
            store=services.store, observer=StructlogRecordObserver()
        )
        record_id = ingestor.ingest(payload=payload)
        typer.echo(record_id)

    _run(command="Submit", action=action)


@app.command()
def metrics(
    config_path: Path = typer.Argument(..., help="Path to h-eval config YAML"),
    model: str | None = typer.Option(None, "--model", "-m", help="Model scope"),
    prompt: str | None = typer.Option(None, "--prompt", "-p", help="Prompt scope"),
    as_of: str | None = typer.Option(
        None, "--as-of", help="Only count records submitted at or before this time"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the snapshot as JSON"),
    log_format: str = typer.Option(
        "console", "--log-format", help="Log format: 'console' or 'json'"
    ),
) -> None:
    """Compute a metric snapshot for one model or one prompt."""
    _configure_structlog(log_format=log_format)
    if (model is None) == (prompt is None):
        typer.echo("Pass exactly one of --model or --prompt.")
        raise typer.Exit(code=1)
    cutoff = _parse_timestamp(value=as_of, option="--as-of")

    def action() -> None:
        services = _load_services(config_path=config_path)
        aggregator = MetricAggregator(
            store=services.store,
            catalog=services.catalog,
            config=services.config.aggregation,
            observer=StructlogMetricsObserver(),
        )
        snapshot: MetricSnapshot
        if model is not None:
            snapshot = asyncio.run(aggregator.metrics_for_model(model, as_of=cutoff))
        elif prompt is not None:
            snapshot = asyncio.run(aggregator.metrics_for_prompt(prompt, as_of=cutoff))
        else:
            raise typer.Exit(code=1)

        if as_json:
            typer.echo(snapshot.model_dump_json(indent=2))
        else:
            print_snapshot(snapshot=snapshot)

    _run(command="Metrics", action=action)


@app.command()
def export(
    config_path: Path = typer.Argument(..., help="Path to h-eval config YAML"),
    output: Path = typer.Option(..., "--output", "-o", help="Dataset JSONL path"),
    prompt: str | None = typer.Option(None, "--prompt", help="Only this prompt"),
    model: str | None = typer.Option(None, "--model", help="Only this model"),
    submitted_from: str | None = typer.Option(
        None, "--from", help="Inclusive lower bound on submitted_at"
    ),
    submitted_to: str | None = typer.Option(
        None, "--to", help="Exclusive upper bound on submitted_at"
    ),
    resume: bool = typer.Option(
        False, "--resume", help="Continue after the last complete line of OUTPUT"
    ),
    log_format: str = typer.Option(
        "console", "--log-format", help="Log format: 'console' or 'json'"
    ),
) -> None:
    """Export evaluation records as a JSONL training/analysis dataset."""
    _configure_structlog(log_format=log_format)
    lower = _parse_timestamp(value=submitted_from, option="--from")
    upper = _parse_timestamp(value=submitted_to, option="--to")

    def action() -> None:
        try:
            export_filter = ExportFilter(
                prompt_id=prompt,
                model_name=model,
                submitted_from=lower,
                submitted_to=upper,
            )
        except ValidationError as exc:
            typer.echo(f"Invalid filter: {exc.errors()[0]['msg']}")
            raise typer.Exit(code=1) from exc

        services = _load_services(config_path=config_path)
        export_observer = StructlogExportObserver()
        exporter = RecordExporter(
            store=services.store,
            catalog=services.catalog,
            observer=export_observer,
            policy=services.config.aggregation.policy,
            batch_size=services.config.export.batch_size,
            require_rater_overlap=services.config.export.require_rater_overlap,
        )
        after = read_last_cursor(path=output) if resume else None
        records = exporter.iter_records(export_filter=export_filter, after=after)
        summary = JsonlDatasetWriter(
            catalog=services.catalog, observer=export_observer
        ).write(records=records, path=output, append=resume)
        typer.echo(f"Exported {summary.total_records} record(s) to {summary.path}")

    _run(command="Export", action=action)


if __name__ == "__main__":
    app()

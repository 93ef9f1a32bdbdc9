"""Command-line interface for Penny Trends."""

import asyncio
import json
import logging
import logging.config
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from penny_trends.client.polling import PollingController
from penny_trends.client.snapshot_client import SnapshotClient, sort_stocks
from penny_trends.config import Config
from penny_trends.models import Snapshot
from penny_trends.monitoring.metrics import PrometheusExporter
from penny_trends.reddit_client import RedditClient
from penny_trends.storage.snapshot_store import create_store
from penny_trends.worker import IngestionWorker, RunResult

app = typer.Typer(help="Penny Trends - Trending penny stocks from Reddit discussions")

logger = logging.getLogger(__name__)

ConfigOption = Annotated[str, typer.Option("--config", "-c", help="Path to configuration file")]
LogLevelOption = Annotated[str, typer.Option("--loglevel", "-l", help="Logging level")]


def setup_logging(log_level: str = "INFO") -> None:
    """
    Set up logging configuration.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    log_dir = Path("logs")
    log_dir.mkdir(exist_ok=True)

    log_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": log_level,
                "formatter": "standard",
                "stream": "ext://sys.stderr",
            },
            "file": {
                "class": "logging.handlers.RotatingFileHandler",
                "level": log_level,
                "formatter": "standard",
                "filename": "logs/penny_trends.log",
                "maxBytes": 10485760,  # 10 MB
                "backupCount": 5,
                "encoding": "utf8",
            },
        },
        "loggers": {
            "": {
                "handlers": ["console", "file"],
                "level": log_level,
                "propagate": True
            },
            "asyncio": {
                "level": "WARNING",
            },
            "aiohttp": {
                "level": "WARNING",
            },
        }
    }

    logging.config.dictConfig(log_config)


def load_config(config_path: str) -> Config:
    """Load and validate configuration, exiting with status 1 on errors."""
    config = Config.from_files(config_path)
    errors = config.validate()
    if errors:
        for error in errors:
            logger.error(f"Configuration error: {error}")
        raise typer.Exit(code=1)
    return config


def format_snapshot(snapshot: Snapshot, by: str = "posts", order: str = "desc") -> str:
    """Render a snapshot as a plain-text table."""
    updated = datetime.fromtimestamp(snapshot.last_updated / 1000, tz=timezone.utc)
    lines = [
        f"Snapshot {snapshot.status} from {snapshot.source_count} subreddits, "
        f"updated {updated:%Y-%m-%d %H:%M:%S} UTC",
        f"{'SYMBOL':<7}{'POSTS':>6}{'MENTIONS':>10}{'USERS':>7}{'SENTIMENT':>11}",
    ]
    for stock in sort_stocks(snapshot.stocks, by=by, order=order):
        lines.append(
            f"{stock.symbol:<7}{stock.unique_post_count:>6}{stock.mention_count:>10}"
            f"{stock.unique_user_count:>7}{stock.sentiment_score:>11.2f}"
        )
    return "\n".join(lines)


async def run_worker(config: Config) -> RunResult:
    """
    Run one ingestion pass with the configured store and monitoring.

    Args:
        config: Application configuration

    Returns:
        Result of the run
    """
    exporter = None
    if config.monitoring.enable_prometheus:
        exporter = PrometheusExporter(port=config.monitoring.prometheus_port)
        exporter.start_server()

    store = create_store(config.storage)
    try:
        async with RedditClient(config, prometheus_exporter=exporter) as client:
            worker = IngestionWorker(config, client, store, prometheus_exporter=exporter)
            return await worker.run()
    finally:
        store.close()


@app.command()
def run(
    config: ConfigOption = "config.yaml",
    loglevel: LogLevelOption = "INFO",
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable verbose output")] = False,
) -> None:
    """
    Collect, score and publish one snapshot.

    Exits with status 1 when the run failed and an error snapshot was published.
    """
    setup_logging("DEBUG" if verbose else loglevel)
    config_obj = load_config(config)

    try:
        result = asyncio.run(run_worker(config_obj))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        raise typer.Exit(code=130)

    for warning in result.warnings:
        logger.warning(f"Skipped r/{warning.source}: {warning.error_type}: {warning.message}")

    if not result.succeeded:
        logger.error(f"Run failed: {result.error}")
        raise typer.Exit(code=1)

    typer.echo(f"Published {len(result.snapshot.stocks)} symbols")


@app.command()
def show(
    config: ConfigOption = "config.yaml",
    sort_by: Annotated[str, typer.Option("--sort-by", help="posts, mentions or sentiment")] = "posts",
    order: Annotated[str, typer.Option("--order", help="asc or desc")] = "desc",
    as_json: Annotated[bool, typer.Option("--json", help="Print the raw wire payload")] = False,
) -> None:
    """Print the currently stored snapshot."""
    config_obj = load_config(config)
    store = create_store(config_obj.storage)
    try:
        snapshot = store.load()
    finally:
        store.close()

    if snapshot is None:
        typer.echo("No snapshot stored yet")
        raise typer.Exit(code=1)

    if as_json:
        typer.echo(json.dumps(snapshot.to_wire(), indent=2))
    else:
        typer.echo(format_snapshot(snapshot, by=sort_by, order=order))


@app.command()
def serve(
    config: ConfigOption = "config.yaml",
    host: Annotated[Optional[str], typer.Option("--host", help="Bind address (overrides config)")] = None,
    port: Annotated[Optional[int], typer.Option("--port", "-p", help="Port (overrides config)")] = None,
    loglevel: LogLevelOption = "INFO",
) -> None:
    """Serve the stored snapshot over HTTP."""
    import uvicorn

    from penny_trends.api.main import create_app

    setup_logging(loglevel)
    config_obj = load_config(config)

    store = create_store(config_obj.storage)
    try:
        uvicorn.run(
            create_app(store),
            host=host or config_obj.api.host,
            port=port or config_obj.api.port,
            log_config=None,
        )
    finally:
        store.close()


@app.command()
def watch(
    config: ConfigOption = "config.yaml",
    url: Annotated[Optional[str], typer.Option("--url", help="Snapshot endpoint (overrides config)")] = None,
    loglevel: LogLevelOption = "INFO",
) -> None:
    """Poll the snapshot endpoint and print every accepted snapshot."""
    setup_logging(loglevel)
    config_obj = load_config(config)
    polling = config_obj.polling

    def on_update(snapshot: Snapshot, is_new: bool) -> None:
        label = "New snapshot" if is_new else "Current snapshot"
        typer.echo(f"{label}:\n{format_snapshot(snapshot)}\n")

    async def watch_loop() -> None:
        client = SnapshotClient(url or polling.endpoint_url, timeout_sec=polling.request_timeout_sec)
        controller = PollingController(client.fetch, polling, on_update=on_update)
        try:
            await controller.run_forever()
        finally:
            await controller.close()
            await client.close()

    try:
        asyncio.run(watch_loop())
    except KeyboardInterrupt:
        logger.info("Interrupted by user")


@app.command("check-config")
def check_config(config: ConfigOption = "config.yaml") -> None:
    """Validate the configuration and print the effective settings."""
    config_obj = Config.from_files(config)
    errors = config_obj.validate()

    if errors:
        for error in errors:
            typer.echo(f"ERROR: {error}", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"Subreddits: {', '.join(config_obj.subreddits)}")
    typer.echo(f"Storage: {config_obj.storage.backend}")
    typer.echo(f"Credentials: {'set' if config_obj.client_id else 'not set'}")
    typer.echo("Configuration OK")


def main() -> None:
    """Main entry point for the CLI."""
    try:
        app()
    except Exception as e:
        logger.critical(f"Unhandled exception: {str(e)}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()

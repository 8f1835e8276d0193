from __future__ import annotations

import json
import sys
from typing import Optional

import click

from qvd.config.config import ReaderConfig
from qvd.core.document import QvdDocument
from qvd.core.errors import QvdError
from qvd.core.reader import QvdReader
from qvd.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _load(ctx: click.Context, path: str) -> QvdDocument:
    config: ReaderConfig = ctx.obj["config"]
    try:
        return QvdReader(config=config).read(path)
    except QvdError as exc:
        click.echo(f"error: {exc.kind}: {exc}", err=True)
        sys.exit(1)


@click.group()
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="YAML config file (defaults to QVD_* environment variables).",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Override the configured log level.",
)
@click.option("--workers", type=click.IntRange(min=1), default=None, help="Field decoding threads.")
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: Optional[str],
    log_level: Optional[str],
    workers: Optional[int],
) -> None:
    """Inspect QVD files."""
    config = ReaderConfig.from_yaml(config_path) if config_path else ReaderConfig.from_env()
    updates: dict[str, object] = {}
    if log_level is not None:
        updates["log_level"] = log_level
    if workers is not None:
        updates["max_workers"] = workers
    if updates:
        config = ReaderConfig(**{**config.model_dump(), **updates})

    configure_logging(level=config.log_level, json_output=config.log_json)
    ctx.ensure_object(dict)
    ctx.obj["config"] = config


@cli.command()
@click.argument("path", type=click.Path(dir_okay=False))
@click.pass_context
def info(ctx: click.Context, path: str) -> None:
    """Print table attributes and field layout."""
    doc = _load(ctx, path)
    header = doc.header
    click.echo(f"table:        {header.table_name}")
    click.echo(f"records:      {header.record_count}")
    click.echo(f"record bytes: {header.record_byte_size}")
    click.echo(f"fields:       {len(header.fields)}")
    for field, column in zip(header.fields, doc.columns()):
        click.echo(
            f"  {field.name}\tbits={field.bit_offset}+{field.bit_width}"
            f"\tbias={field.bias}\tsymbols={len(column.symbols)}"
        )


@cli.command()
@click.argument("path", type=click.Path(dir_okay=False))
@click.option("-n", "--rows", "limit", type=click.IntRange(min=0), default=10, show_default=True)
@click.option("--json", "as_json", is_flag=True, help="Print rows as JSON objects.")
@click.pass_context
def head(ctx: click.Context, path: str, limit: int, as_json: bool) -> None:
    """Print the first rows of a QVD file."""
    doc = _load(ctx, path)
    names = doc.field_names
    rows = doc.text_rows()[:limit]
    if as_json:
        for row in rows:
            click.echo(json.dumps(dict(zip(names, row)), ensure_ascii=False))
        return

    click.echo("\t".join(names))
    for row in rows:
        click.echo("\t".join(row))
    logger.debug("head_printed", path=path, rows=len(rows))


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()

"""
CLI command for browsing log records as a table.
"""
import json
from typing import List, Optional, Tuple

import click

from lantern.exceptions import LanternError
from lantern.models.log_record import ProtocolKind
from lantern.table import Badge, SortDirection, TableEngine, log_table

from .common import get_config, open_snapshot, style_badge

MAX_CELL_WIDTH = 40


def _plain_and_styled(value) -> Tuple[str, str]:
    """Cell text without and with ANSI styling (widths use the plain form)."""
    if isinstance(value, list) and all(isinstance(v, Badge) for v in value):
        plain = " ".join(f"[{b.label}]" for b in value)
        styled = " ".join(style_badge(b.label, b.color) for b in value)
        return plain, styled
    text = str(value)
    if len(text) > MAX_CELL_WIDTH:
        text = text[:MAX_CELL_WIDTH - 3] + "..."
    return text, text


def render_table(engine: TableEngine) -> List[str]:
    columns = engine.visible_columns()
    cells = []
    for row in engine.get_visible_rows():
        cells.append([_plain_and_styled(column.display(row)) for column in columns])

    widths = []
    for i, column in enumerate(columns):
        width = len(column.title)
        for row_cells in cells:
            width = max(width, len(row_cells[i][0]))
        widths.append(width)

    lines = ["  ".join(c.title.ljust(w) for c, w in zip(columns, widths)).rstrip()]
    lines.append("-" * len(lines[0]))
    for row_cells in cells:
        parts = [styled + " " * (w - len(plain)) for (plain, styled), w in zip(row_cells, widths)]
        lines.append("  ".join(parts).rstrip())
    return lines


@click.command()
@click.argument("snapshot", type=click.Path(exists=True, dir_okay=False))
@click.option("--kind", type=click.Choice([k.value for k in ProtocolKind]),
              help="Only records of this protocol kind")
@click.option("--sort", "sort_column", help="Column to sort on (default: config default_column)")
@click.option("--desc", is_flag=True, help="Sort descending")
@click.option("--filter", "filter_value", help="Filter text (substring for text columns, exact otherwise)")
@click.option("--filter-column", help="Column the filter applies to")
@click.option("--hide", multiple=True, help="Hide a column (repeatable)")
@click.option("--page", type=int, default=1, show_default=True, help="Page number (1-based)")
@click.option("--page-size", type=int, help="Rows per page")
@click.option("--format", "format", type=click.Choice(["table", "json"]),
              default="table", show_default=True, help="Output format")
@click.pass_context
def logs(ctx: click.Context, snapshot: str, kind: Optional[str], sort_column: Optional[str],
         desc: bool, filter_value: Optional[str], filter_column: Optional[str],
         hide: Tuple[str, ...], page: int, page_size: Optional[int], format: str):
    """
    List log records from a JSON snapshot.

    Example:
      lantern logs logs.json --kind http --filter POST --sort timestamp --desc
    """
    data = open_snapshot(snapshot)
    records = data.by_kind(kind) if kind else data.all()

    try:
        config = get_config(ctx).with_overrides(page_size=page_size)
        engine = log_table(
            records,
            default_column=config.default_column,
            page_size=config.page_size,
            badge_limit=config.badge_limit,
            timestamp_format=config.timestamp_format,
        )
        if sort_column or desc:
            target = sort_column or engine.view_state.sort_column
            if target is None:
                raise click.UsageError("--desc needs --sort when no default column is configured")
            engine.set_sort(target, SortDirection.DESC if desc else SortDirection.ASC)
        if filter_value:
            engine.set_filter(filter_value, filter_column)
        for column_id in hide:
            engine.toggle_column(column_id, visible=False)
        engine.set_page(page - 1)
    except LanternError as e:
        raise click.ClickException(str(e))

    if format == "json":
        payload = {
            "page": engine.page_index + 1,
            "page_count": engine.page_count(),
            "total": len(engine.get_rows()),
            "columns": [c.id for c in engine.visible_columns()],
            "rows": [record.to_dict() for record in engine.get_visible_rows()],
        }
        click.echo(json.dumps(payload, separators=(",", ":"), ensure_ascii=True))
        return

    for line in render_table(engine):
        click.echo(line)
    click.echo(f"\nPage {engine.page_index + 1}/{engine.page_count()} "
               f"({len(engine.get_rows())} of {len(engine)} records)")

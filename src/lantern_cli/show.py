"""
CLI command for one record's details: annotated request and response.
"""
from typing import Optional, Sequence

import click

from lantern.config import ViewConfig
from lantern.models.finding import Finding
from lantern.models.log_record import LogRecord, ProtocolKind
from lantern.overlay import (badge_label, color_for, compute_highlight_lines, annotate,
                             describe, unique_findings)
from lantern.exceptions import RecordNotFound
from lantern.table import format_timestamp

from .common import get_config, open_snapshot, style_badge


def render_block(title: str, text: str, findings: Sequence[Finding], config: ViewConfig) -> None:
    """Print one code block: header with badges, then the annotated text."""
    badges = " ".join(style_badge(badge_label(f), color_for(f.severity)) for f in findings)
    click.echo(click.style(f"== {title} ", bold=True) + badges)

    lines = compute_highlight_lines(text, findings)
    annotated = annotate(text, lines, config.highlight_marker)
    # Style by index; the payload itself may contain the marker
    for index, line in enumerate(annotated.split("\n") if annotated else []):
        if index in lines:
            click.echo(click.style(line, fg="red"))
        else:
            click.echo(line)

    for finding in unique_findings(findings):
        click.echo(f"  - {finding.rule_name or finding.rule_id}: {describe(finding)}")
    click.echo("")


def render_record(record: LogRecord, config: ViewConfig) -> None:
    click.echo(f"Log {record.id}  {record.kind.value.upper()}  from {record.remote_ip or '-'}  "
               f"at {format_timestamp(record.timestamp, config.timestamp_format)}")
    if record.verdict:
        click.echo(f"Verdict: {record.verdict}")
    if record.has_stream:
        click.echo(f"Stream:  {record.stream_id} (index {record.stream_index})")
    click.echo("")

    if record.kind is ProtocolKind.HTTP:
        render_block("Request", record.request_text, record.request_findings, config)
        render_block("Response", record.response_text, record.response_findings, config)
        return

    # Segment logs carry one side only
    if record.request_text:
        render_block("Ingress", record.request_text, record.request_findings, config)
    elif record.response_text:
        render_block("Egress", record.response_text, record.response_findings, config)
    else:
        click.echo("(no payload)")


@click.command()
@click.argument("snapshot", type=click.Path(exists=True, dir_okay=False))
@click.argument("record_id")
@click.option("--copy", "copy", type=click.Choice(["request", "response"]),
              help="Print the raw request or response only")
@click.pass_context
def show(ctx: click.Context, snapshot: str, record_id: str, copy: Optional[str]):
    """
    Show a record with its findings highlighted.

    Example:
      lantern show logs.json 3f2a9c
    """
    data = open_snapshot(snapshot)
    try:
        record = data.get(record_id)
    except RecordNotFound as e:
        raise click.ClickException(str(e))

    if copy == "request":
        click.echo(record.request_text, nl=False)
        return
    if copy == "response":
        click.echo(record.response_text, nl=False)
        return

    render_record(record, get_config(ctx))

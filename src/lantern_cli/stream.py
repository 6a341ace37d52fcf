"""
CLI command for the segments of one tcp/udp stream.
"""
import click

from lantern.exceptions import RecordNotFound

from .common import get_config, open_snapshot
from .show import render_block


@click.command()
@click.argument("snapshot", type=click.Path(exists=True, dir_okay=False))
@click.argument("stream_id")
@click.pass_context
def stream(ctx: click.Context, snapshot: str, stream_id: str):
    """
    Show every segment of a stream in order.

    Example:
      lantern stream logs.json 0b4e7c1e-...
    """
    config = get_config(ctx)
    data = open_snapshot(snapshot)
    try:
        segments = data.stream(stream_id)
    except RecordNotFound as e:
        raise click.ClickException(str(e))

    click.echo(f"Stream {stream_id}: {len(segments)} segment(s)\n")
    for record in segments:
        index = "-" if record.stream_index is None else record.stream_index
        if record.request_text:
            render_block(f"#{index} Ingress", record.request_text, record.request_findings, config)
        elif record.response_text:
            render_block(f"#{index} Egress", record.response_text, record.response_findings, config)
        else:
            click.echo(f"#{index} (no payload)\n")

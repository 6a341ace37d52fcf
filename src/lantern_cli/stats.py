"""
CLI command for collection statistics.
"""
import json

import click

from lantern.analysis import AnalysisEngine

from .common import open_snapshot

BAR_WIDTH = 30


def _bar(count: int, peak: int) -> str:
    if peak <= 0:
        return ""
    return "#" * max(1 if count else 0, round(count * BAR_WIDTH / peak))


@click.command()
@click.argument("snapshot", type=click.Path(exists=True, dir_okay=False))
@click.option("--format", "format", type=click.Choice(["table", "json"]),
              default="table", show_default=True, help="Output format")
def stats(snapshot: str, format: str):
    """
    Summarize methods, stream directions and verdicts.

    Example:
      lantern stats logs.json --format json
    """
    data = open_snapshot(snapshot)
    report = AnalysisEngine.with_defaults().run(data.all())

    if format == "json":
        click.echo(json.dumps(report.to_dict(), separators=(",", ":"), ensure_ascii=True))
        return

    methods = report.get("http_methods").results["methods"]
    peak = max(methods.values()) if methods else 0
    click.echo(f"Records: {report.records_total}\n")
    click.echo("HTTP METHODS")
    click.echo("-" * 50)
    for method, count in methods.items():
        click.echo(f"{method:<8} {count:>6}  {_bar(count, peak)}")

    directions = report.get("directions").results["totals"]
    click.echo("\nSTREAM DIRECTIONS")
    click.echo("-" * 50)
    for direction, count in directions.items():
        click.echo(f"{direction:<8} {count:>6}")

    verdicts = report.get("verdicts").results["verdicts"]
    if verdicts:
        click.echo("\nVERDICTS")
        click.echo("-" * 50)
        for verdict, count in verdicts.items():
            click.echo(f"{verdict:<8} {count:>6}")

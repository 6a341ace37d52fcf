"""
Helpers shared by the CLI commands.
"""
import click

from lantern.config import ViewConfig
from lantern.exceptions import LanternError
from lantern.overlay.badges import ColorToken
from lantern.store import LogSnapshot

BADGE_STYLES = {
    ColorToken.NEUTRAL: {},
    ColorToken.WARNING: {"fg": "yellow", "bold": True},
    ColorToken.ELEVATED: {"fg": "bright_red"},
    ColorToken.CRITICAL: {"fg": "red", "bold": True, "reverse": True},
}


def get_config(ctx: click.Context) -> ViewConfig:
    obj = ctx.find_object(dict) or {}
    return obj.get("config") or ViewConfig()


def open_snapshot(path: str) -> LogSnapshot:
    try:
        return LogSnapshot.load(path)
    except OSError as e:
        raise click.ClickException(f"Failed to open snapshot: {e}")
    except LanternError as e:
        raise click.ClickException(f"Invalid snapshot {path}: {e}")


def style_badge(label: str, color: ColorToken) -> str:
    return click.style(f"[{label}]", **BADGE_STYLES.get(color, {}))

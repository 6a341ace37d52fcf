"""
View configuration.

Defaults match the dashboard. A YAML file can override any of them:

    badge_limit: 5
    page_size: 25
    default_column: remote_ip
"""
from __future__ import annotations

from dataclasses import dataclass, fields, replace
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .exceptions import ValidationError
from .overlay.badges import DEFAULT_BADGE_LIMIT
from .overlay.highlight import HIGHLIGHT_MARKER
from .table.log_schema import DEFAULT_TIMESTAMP_FORMAT

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ViewConfig:
    badge_limit: int = DEFAULT_BADGE_LIMIT
    page_size: int = 10
    highlight_marker: str = HIGHLIGHT_MARKER
    default_column: Optional[str] = "method"
    timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT

    def __post_init__(self):
        if self.badge_limit < 0:
            raise ValidationError(f"badge_limit must be >= 0, got {self.badge_limit}")
        if self.page_size <= 0:
            raise ValidationError(f"page_size must be > 0, got {self.page_size}")

    def with_overrides(self, **overrides: Any) -> "ViewConfig":
        """Copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ViewConfig":
        known = {f.name for f in fields(cls)}
        for key in data:
            if key not in known:
                logger.warning("Ignoring unknown config key %r", key)
        return cls(**{k: v for k, v in data.items() if k in known})


def load_config(path: Union[str, Path]) -> ViewConfig:
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ValidationError(f"failed to read config file '{path}': {e}") from e

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ValidationError(f"failed to parse config file '{path}': {e}") from e

    if data is None:
        return ViewConfig()
    if not isinstance(data, dict):
        raise ValidationError(f"config file '{path}' does not contain a mapping at top level")

    try:
        return ViewConfig.from_dict(data)
    except TypeError as e:
        raise ValidationError(f"invalid config file '{path}': {e}") from e

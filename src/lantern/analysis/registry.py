"""Name -> analyzer class registry."""
from __future__ import annotations

from typing import Dict, List, Type

from .base import Analyzer

_REGISTRY: Dict[str, Type[Analyzer]] = {}


def register_analyzer(cls: Type[Analyzer]) -> Type[Analyzer]:
    if not cls.name:
        raise ValueError(f"{cls.__name__} has no name")
    if cls.name in _REGISTRY and _REGISTRY[cls.name] is not cls:
        raise ValueError(f"analyzer name {cls.name!r} already registered")
    _REGISTRY[cls.name] = cls
    return cls


def create_analyzer(name: str, **kwargs) -> Analyzer:
    try:
        cls = _REGISTRY[name]
    except KeyError:
        raise KeyError(f"unknown analyzer {name!r} (available: {', '.join(list_analyzers())})") from None
    return cls(**kwargs)


def list_analyzers() -> List[str]:
    return sorted(_REGISTRY)

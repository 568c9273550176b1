"""Analysis settings, loadable from and savable to YAML."""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

from ._types import CooccurrenceScope, Flow, SelectionMode, SortMode

logger = logging.getLogger(__name__)

_ENUM_FIELDS: dict[str, type[Enum]] = {
    "flow": Flow,
    "cooccurrence_scope": CooccurrenceScope,
    "selection": SelectionMode,
    "sort_mode": SortMode,
}


@dataclass(slots=True)
class AnalysisConfig:
    """Settings shared by analysis, weave and fibras calls."""
    top_n: int = 25
    synset_depth: int = 2
    decay: float = 0.5
    flow: Flow = Flow.BIDIRECTIONAL
    window: int = 5
    cooccurrence_scope: CooccurrenceScope = CooccurrenceScope.SENTENCE
    segment_count: int = 10
    selection: SelectionMode = SelectionMode.RECURRENT
    sort_mode: SortMode = SortMode.FREQUENCY
    passage_window: int = 5

    def __post_init__(self) -> None:
        for name, enum_cls in _ENUM_FIELDS.items():
            setattr(self, name, enum_cls(getattr(self, name)))

    def validate(self) -> AnalysisConfig:
        """Raise ValueError on an out-of-range setting; return self."""
        for name in ("top_n", "window", "segment_count", "passage_window"):
            value = getattr(self, name)
            if value <= 0:
                raise ValueError(f"{name} must be >= 1, got {value}")
        if self.synset_depth < 0:
            raise ValueError(f"synset_depth must be >= 0, got {self.synset_depth}")
        if not 0.0 < self.decay < 1.0:
            raise ValueError(f"decay must be in (0, 1), got {self.decay}")
        return self

    def replace(self, **changes: Any) -> AnalysisConfig:
        """Copy with ``changes`` applied and validated."""
        return dataclasses.replace(self, **changes).validate()

    def to_dict(self) -> dict[str, Any]:
        data = dataclasses.asdict(self)
        for name in _ENUM_FIELDS:
            data[name] = data[name].value
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AnalysisConfig:
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(unknown)}")
        return cls(**data).validate()

    @classmethod
    def from_yaml(cls, path: str | Path) -> AnalysisConfig:
        """Load configuration from a YAML file.

        Keys may sit at the top level or under an ``analysis`` section.
        """
        path = Path(path)
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        if "analysis" in data:
            data = data["analysis"] or {}
        config = cls.from_dict(data)
        logger.debug("loaded config from %s", path)
        return config

    def to_yaml(self, path: str | Path) -> None:
        """Save configuration to a YAML file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

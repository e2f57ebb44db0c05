# patchforge/models/options.py
from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Mapping, Optional, Tuple

from ..errors.options import InvalidOptionsError
from .enums import StrategyId

DEFAULT_STRATEGIES: Tuple[StrategyId, ...] = (
    StrategyId.EXACT,
    StrategyId.WHITESPACE_INSENSITIVE,
    StrategyId.INDENTATION_PRESERVING,
    StrategyId.FUZZY,
)

# Keys of the wire-level options object accepted by from_mapping().
_CAMEL_KEYS = {
    "strict": "strict",
    "enableTelemetry": "enable_telemetry",
    "matchingStrategies": "matching_strategies",
    "fuzzyThreshold": "fuzzy_threshold",
    "fuzzyScanRadius": "fuzzy_scan_radius",
    "fuzzyMinLines": "fuzzy_min_lines",
    "reindentReplacement": "reindent_replacement",
    "previewChars": "preview_chars",
}


def _coerce_strategy(value: Any) -> StrategyId:
    if isinstance(value, StrategyId):
        return value
    if isinstance(value, str):
        key = value.strip()
        for sid in StrategyId:
            if key.lower() == sid.value or key.upper() == sid.name:
                return sid
    raise InvalidOptionsError(f"unknown matching strategy: {value!r}")


@dataclass(frozen=True)
class ApplyOptions:
    """
    Per-call configuration for apply_diff().

    Instances are immutable and validated on construction; build a new one
    (dataclasses.replace) to change a setting.

    Attributes:
        strict: Raise on the first failing block and expose only the original
            source. When False, failures are recorded and later blocks still run.
        enable_telemetry: Collect per-block timing/strategy entries.
        matching_strategies: Ordered strategy cascade, most literal first.
            Strings ("fuzzy", "FUZZY") are accepted and coerced.
        fuzzy_threshold: Minimum similarity, in (0, 1], for a fuzzy window.
        fuzzy_scan_radius: If set, the fuzzy scan only visits windows starting
            within this many lines of the previous applied block.
        fuzzy_min_lines: Search blocks with fewer non-blank lines skip the
            fuzzy strategy. The default of 2 deliberately keeps one-line
            searches out of fuzzy scoring: a one-line near miss is usually a
            different statement (`const y = 2;` vs `const x = 1;`) and must
            report NoMatchFound. Set it to 1 to score every window regardless
            of its height.
        reindent_replacement: Translate the replacement's indentation to the
            file's when a line-aligned match was found at another indentation.
        preview_chars: Bound on search-text previews carried by failures.
    """

    strict: bool = False
    enable_telemetry: bool = False
    matching_strategies: Tuple[StrategyId, ...] = field(default=DEFAULT_STRATEGIES)
    fuzzy_threshold: float = 0.8
    fuzzy_scan_radius: Optional[int] = None
    fuzzy_min_lines: int = 2
    reindent_replacement: bool = True
    preview_chars: int = 200

    def __post_init__(self):
        strategies = self.matching_strategies
        if isinstance(strategies, (str, StrategyId)):
            strategies = (strategies,)
        try:
            coerced = tuple(_coerce_strategy(s) for s in strategies)
        except TypeError:
            raise InvalidOptionsError("matching_strategies must be a sequence") from None
        object.__setattr__(self, "matching_strategies", coerced)
        self.validate()

    def validate(self) -> None:
        for name in ("strict", "enable_telemetry", "reindent_replacement"):
            value = getattr(self, name)
            if not isinstance(value, bool):
                raise InvalidOptionsError(f"{name} must be a bool, got {value!r}")
        if not self.matching_strategies:
            raise InvalidOptionsError("matching_strategies must not be empty")
        if len(set(self.matching_strategies)) != len(self.matching_strategies):
            raise InvalidOptionsError("matching_strategies contains duplicates")
        threshold = self.fuzzy_threshold
        if isinstance(threshold, bool) or not isinstance(threshold, (int, float)):
            raise InvalidOptionsError(f"fuzzy_threshold must be a number, got {threshold!r}")
        if not 0.0 < threshold <= 1.0:
            raise InvalidOptionsError(f"fuzzy_threshold must be in (0, 1], got {threshold!r}")
        radius = self.fuzzy_scan_radius
        if radius is not None and (isinstance(radius, bool) or not isinstance(radius, int) or radius < 0):
            raise InvalidOptionsError(f"fuzzy_scan_radius must be a non-negative int, got {radius!r}")
        min_lines = self.fuzzy_min_lines
        if isinstance(min_lines, bool) or not isinstance(min_lines, int) or min_lines < 1:
            raise InvalidOptionsError(f"fuzzy_min_lines must be a positive int, got {min_lines!r}")
        if not isinstance(self.preview_chars, int) or self.preview_chars < 1:
            raise InvalidOptionsError("preview_chars must be a positive int")

    def priority(self, strategy: StrategyId) -> int:
        """Lower is more literal (higher priority)."""
        return self.matching_strategies.index(strategy)

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "ApplyOptions":
        """Build options from a plain dict using snake_case or camelCase keys."""
        if not data:
            return cls()
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            name = _CAMEL_KEYS.get(key, key)
            if name not in known:
                raise InvalidOptionsError(f"unknown option: {key!r}")
            kwargs[name] = value
        return cls(**kwargs)

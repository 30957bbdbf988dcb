# MIT License
#
# Copyright (c) 2024 SQL Report Integrator Contributors
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

"""Configuration for the report integrator.

Configuration is loosely validated: unknown keys are ignored and invalid
values fall back to their defaults, so a partially broken configuration
never prevents a report from being produced.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_DIMENSION_WEIGHTS = {"performance": 0.4, "security": 0.4, "standards": 0.2}
DEFAULT_PRIORITY_FACTORS = {"severity": 0.5, "impact": 0.3, "effort": 0.2}
DEFAULT_SIMILARITY_THRESHOLD = 0.8

# Flat keys accepted for compatibility with older configuration files.
LEGACY_WEIGHT_KEYS = {
    "performanceWeight": "performance",
    "securityWeight": "security",
    "standardsWeight": "standards",
}
LEGACY_FACTOR_KEYS = {
    "severityWeight": "severity",
    "impactWeight": "impact",
    "effortWeight": "effort",
}
KNOWN_KEYS = (
    {
        "weights",
        "priorityFactors",
        "priority_factors",
        "similarityThreshold",
        "similarity_threshold",
        "fuzzyDedup",
        "fuzzy_dedup",
    }
    | set(LEGACY_WEIGHT_KEYS)
    | set(LEGACY_FACTOR_KEYS)
)


def _valid_weight(name: str, value: Any, default: float) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
        logger.warning(f"Invalid value for {name}: {value!r}, using default {default}")
        return default
    return float(value)


def _frozen(mapping: Mapping[str, float]) -> Mapping[str, float]:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class IntegratorConfig:
    """Immutable configuration captured when the integrator is constructed."""

    weights: Mapping[str, float] = field(
        default_factory=lambda: _frozen(DEFAULT_DIMENSION_WEIGHTS)
    )
    priority_factors: Mapping[str, float] = field(
        default_factory=lambda: _frozen(DEFAULT_PRIORITY_FACTORS)
    )
    # Only consulted when fuzzy_dedup is enabled.
    similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD
    fuzzy_dedup: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "weights", _frozen(self.weights))
        object.__setattr__(self, "priority_factors", _frozen(self.priority_factors))

    def weight_for(self, dimension: str) -> float:
        """Weight of a dimension in the overall score (0 if unconfigured)."""
        return self.weights.get(dimension, 0.0)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any] | None) -> IntegratorConfig:
        """Build a configuration from nested or flat legacy keys.

        Args:
            raw: Configuration mapping, e.g. parsed from JSON

        Returns:
            IntegratorConfig with defaults for anything missing or invalid
        """
        if not raw:
            return cls()
        if not isinstance(raw, Mapping):
            logger.warning(f"Ignoring non-mapping configuration: {type(raw).__name__}")
            return cls()

        for key in raw:
            if key not in KNOWN_KEYS:
                logger.debug(f"Ignoring unknown configuration key: {key}")

        weights = dict(DEFAULT_DIMENSION_WEIGHTS)
        nested_weights = raw.get("weights")
        if isinstance(nested_weights, Mapping):
            for dimension, value in nested_weights.items():
                weights[str(dimension)] = _valid_weight(
                    f"weights.{dimension}", value, weights.get(str(dimension), 0.0)
                )
        for legacy_key, dimension in LEGACY_WEIGHT_KEYS.items():
            if legacy_key in raw:
                weights[dimension] = _valid_weight(
                    legacy_key, raw[legacy_key], DEFAULT_DIMENSION_WEIGHTS[dimension]
                )

        factors = dict(DEFAULT_PRIORITY_FACTORS)
        nested_factors = raw.get("priorityFactors", raw.get("priority_factors"))
        if isinstance(nested_factors, Mapping):
            for factor, value in nested_factors.items():
                if factor not in DEFAULT_PRIORITY_FACTORS:
                    logger.debug(f"Ignoring unknown priority factor: {factor}")
                    continue
                factors[factor] = _valid_weight(
                    f"priorityFactors.{factor}", value, DEFAULT_PRIORITY_FACTORS[factor]
                )
        for legacy_key, factor in LEGACY_FACTOR_KEYS.items():
            if legacy_key in raw:
                factors[factor] = _valid_weight(
                    legacy_key, raw[legacy_key], DEFAULT_PRIORITY_FACTORS[factor]
                )

        threshold = raw.get("similarityThreshold", raw.get("similarity_threshold"))
        if threshold is None:
            similarity_threshold = DEFAULT_SIMILARITY_THRESHOLD
        else:
            similarity_threshold = _valid_weight(
                "similarityThreshold", threshold, DEFAULT_SIMILARITY_THRESHOLD
            )
            if similarity_threshold > 1.0:
                logger.warning(
                    f"similarityThreshold {similarity_threshold} above 1.0, using default"
                )
                similarity_threshold = DEFAULT_SIMILARITY_THRESHOLD

        fuzzy = raw.get("fuzzyDedup", raw.get("fuzzy_dedup", False))

        return cls(
            weights=weights,
            priority_factors=factors,
            similarity_threshold=similarity_threshold,
            fuzzy_dedup=fuzzy is True,
        )

    @classmethod
    def from_file(cls, path: str | Path) -> IntegratorConfig:
        """Load configuration from a JSON file.

        Raises:
            ConfigurationError: If the file cannot be read or is not a JSON object
        """
        config_path = Path(path)
        try:
            with open(config_path, encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(
                f"Failed to load configuration from {config_path}: {e}",
                config_path=str(config_path),
            ) from e

        if not isinstance(raw, dict):
            raise ConfigurationError(
                f"Configuration in {config_path} must be a JSON object",
                config_path=str(config_path),
            )

        logger.info(f"Loaded configuration from {config_path}")
        return cls.from_dict(raw)

    def to_dict(self) -> dict[str, Any]:
        return {
            "weights": dict(self.weights),
            "priorityFactors": dict(self.priority_factors),
            "similarityThreshold": self.similarity_threshold,
            "fuzzyDedup": self.fuzzy_dedup,
        }

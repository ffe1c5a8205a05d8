"""
Audit weight configuration.

The weight table holds every tunable constant of the scoring heuristic. It
is built once per run from the built-in defaults, optionally overlaid with a
JSON document whose keys mirror the table::

    {
        "sizeThresholds": {"small": 200, "medium": 1000},
        "baseTimes": {"small": 5, "medium": 20, "large": 50},
        "complexityFactors": {
            "functionTime": 0.5,
            "upgradeability": {"proxyPattern": 3}
        }
    }

Overlays are merged leaf by leaf, so a partial group only replaces the keys it
names. The merged result is validated: unknown keys, negative weights and
non-increasing size thresholds are rejected with ``InvalidConfig``.
"""

import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator
from pydantic.alias_generators import to_camel

from ..exceptions import InvalidConfig
from ..utils.file_utils import read_json

logger = logging.getLogger(__name__)


class _WeightModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        frozen=True,
    )


class SizeThresholds(_WeightModel):
    """Inclusive line-count upper bounds of the small and medium buckets."""
    small: int = Field(200, gt=0)
    medium: int = Field(1000, gt=0)

    @model_validator(mode="after")
    def check_increasing(self) -> "SizeThresholds":
        if self.small >= self.medium:
            raise ValueError(
                f"sizeThresholds.small ({self.small}) must be lower than "
                f"sizeThresholds.medium ({self.medium})"
            )
        return self


class BaseTimes(_WeightModel):
    """Base audit hours per size bucket."""
    small: float = Field(5, ge=0)
    medium: float = Field(20, ge=0)
    large: float = Field(50, ge=0)


class UpgradeabilityWeights(_WeightModel):
    """Hours added for upgradeable contracts; all five are summed together."""
    proxy_pattern: float = Field(3, ge=0)
    storage_layout: float = Field(5, ge=0)
    admin_rights: float = Field(2, ge=0)
    initialization: float = Field(2, ge=0)
    inter_contract_consistency: float = Field(4, ge=0)

    def total(self) -> float:
        return (
            self.proxy_pattern
            + self.storage_layout
            + self.admin_rights
            + self.initialization
            + self.inter_contract_consistency
        )


class ComplexityFactors(_WeightModel):
    """Per-signal hours used by the complexity score."""
    function_time: float = Field(0.5, ge=0)
    base_function_count: int = Field(10, ge=0)
    external_call_time: float = Field(2, ge=0)
    import_time_per_import: float = Field(3, ge=0)
    import_time_flat_rate: float = Field(5, ge=0)
    assembly_time: float = Field(3, ge=0)
    upgradeability: UpgradeabilityWeights = Field(default_factory=UpgradeabilityWeights)


class WeightConfig(_WeightModel):
    """Complete weight table driving the scoring heuristic."""
    size_thresholds: SizeThresholds = Field(default_factory=SizeThresholds)
    base_times: BaseTimes = Field(default_factory=BaseTimes)
    complexity_factors: ComplexityFactors = Field(default_factory=ComplexityFactors)

    def to_document(self) -> Dict[str, Any]:
        """Return the table in overlay document form (camelCase keys)."""
        return self.model_dump(by_alias=True)


DEFAULT_WEIGHTS = WeightConfig()


def load_overlay(path: Union[str, Path]) -> Dict[str, Any]:
    """Load a weight overlay document.

    Args:
        path: Path to a JSON file holding a (partial) weight table

    Returns:
        The parsed overlay as a dictionary

    Raises:
        InvalidConfig: If the file cannot be read or is not a JSON object
    """
    try:
        overlay = read_json(path)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise InvalidConfig(str(path), e) from e

    if not isinstance(overlay, dict):
        raise InvalidConfig(
            str(path), f"expected a JSON object at top level, got {type(overlay).__name__}"
        )
    logger.debug("Loaded weight overlay from %s", path)
    return overlay


def _deep_merge(base: Dict[str, Any], overlay: Mapping[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in overlay.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def merge(
    defaults: WeightConfig,
    overlay: Optional[Mapping[str, Any]],
    source: Optional[str] = None,
) -> WeightConfig:
    """Merge an overlay over a weight table, leaf by leaf.

    Args:
        defaults: Table supplying every value the overlay leaves out
        overlay: Partial table in document (camelCase) form
        source: Where the overlay came from, used in error messages

    Returns:
        A new validated ``WeightConfig``

    Raises:
        InvalidConfig: If the merged table fails validation
    """
    if not overlay:
        return defaults

    merged = _deep_merge(defaults.to_document(), overlay)
    try:
        return WeightConfig.model_validate(merged)
    except ValidationError as e:
        raise InvalidConfig(source or "<overlay>", e) from e


def build_weight_config(config_path: Optional[Union[str, Path]] = None) -> WeightConfig:
    """Build the weight table for one run: defaults plus an optional overlay file."""
    if config_path is None:
        return DEFAULT_WEIGHTS
    overlay = load_overlay(config_path)
    weights = merge(DEFAULT_WEIGHTS, overlay, source=str(config_path))
    logger.info("Using weight overlay from %s", config_path)
    return weights

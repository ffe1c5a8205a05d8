"""
Audit time scoring.

Turns a contract's text and its compiled inventory into an hour estimate
split into base, complexity and upgradeability time. Every function here is
pure: the same inputs and weight table always give the same breakdown.
"""

import logging
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Dict, Mapping

from ..core.compiler import UnitInventory
from ..core.weights import WeightConfig
from .source_document import SourceDocument

logger = logging.getLogger(__name__)


class ScoringMode(str, Enum):
    """How document-wide signals are counted against contract units.

    ``PER_UNIT`` adds the external call, import and assembly terms once for
    every contract unit in the artifact, so a file defining three contracts
    pays them three times. ``AGGREGATE_ONCE`` adds them a single time.
    """
    PER_UNIT = "per_unit"
    AGGREGATE_ONCE = "aggregate_once"


@dataclass(frozen=True)
class EstimateBreakdown:
    """Estimated audit hours per component."""
    base_time: float
    complexity_time: float
    upgradeability_time: float

    @property
    def total(self) -> float:
        return self.base_time + self.complexity_time + self.upgradeability_time

    def to_dict(self) -> Dict[str, float]:
        data = asdict(self)
        data["total"] = self.total
        return data


def calculate_base_time(lines: int, weights: WeightConfig) -> float:
    """Base hours for a file of ``lines`` lines; bucket bounds are inclusive."""
    if lines <= weights.size_thresholds.small:
        return weights.base_times.small
    if lines <= weights.size_thresholds.medium:
        return weights.base_times.medium
    return weights.base_times.large


def _function_time(unit: UnitInventory, weights: WeightConfig) -> float:
    factors = weights.complexity_factors
    surplus = max(unit.function_count - factors.base_function_count, 0)
    return factors.function_time * surplus


def _document_signal_time(document: SourceDocument, weights: WeightConfig, count_imports: bool) -> float:
    factors = weights.complexity_factors
    total = factors.external_call_time * document.external_call_count
    if count_imports:
        total += factors.import_time_per_import * document.import_count
    else:
        total += factors.import_time_flat_rate
    if document.has_assembly:
        total += factors.assembly_time
    return total


def calculate_complexity_time(
    document: SourceDocument,
    artifact: Mapping[str, UnitInventory],
    weights: WeightConfig,
    count_imports: bool = False,
    mode: ScoringMode = ScoringMode.PER_UNIT,
) -> float:
    """Complexity hours from function counts and document signals.

    An artifact without contract units scores zero in either mode.
    """
    if not artifact:
        return 0

    complexity_time = sum(_function_time(unit, weights) for unit in artifact.values())
    signal_time = _document_signal_time(document, weights, count_imports)

    if ScoringMode(mode) is ScoringMode.PER_UNIT:
        complexity_time += signal_time * len(artifact)
    else:
        complexity_time += signal_time
    return complexity_time


def estimate_upgradeability_time(document: SourceDocument, weights: WeightConfig) -> float:
    """All five upgradeability weights if any marker is present, else zero."""
    if not document.is_upgradeable:
        return 0
    return weights.complexity_factors.upgradeability.total()


def estimate(
    document: SourceDocument,
    artifact: Mapping[str, UnitInventory],
    weights: WeightConfig,
    count_imports: bool = False,
    mode: ScoringMode = ScoringMode.PER_UNIT,
) -> EstimateBreakdown:
    """Score a compiled contract."""
    breakdown = EstimateBreakdown(
        base_time=calculate_base_time(document.line_count, weights),
        complexity_time=calculate_complexity_time(document, artifact, weights, count_imports, mode),
        upgradeability_time=estimate_upgradeability_time(document, weights),
    )
    logger.debug(
        "Scored %d line(s), %d unit(s): %s",
        document.line_count, len(artifact), breakdown.to_dict(),
    )
    return breakdown

"""
Audit time estimation pipeline.

Runs the stages in order: read the contract, build the weight table,
resolve the compiler version, compile, score. Any stage that fails raises
an ``AuditScopeError`` and stops the remaining stages.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .analyzers import EstimateBreakdown, ScoringMode, SourceDocument, estimate
from .config import Settings
from .core.compiler import CompilerBridge
from .core.import_resolver import ImportResolver
from .core.version_resolver import VersionResolver, extract_constraint
from .core.weights import WeightConfig, build_weight_config
from .utils.file_utils import read_source

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EstimateResult:
    """An estimate together with what it was computed from."""
    breakdown: EstimateBreakdown
    constraint: str
    solc_version: str
    line_count: int
    contract_units: List[str] = field(default_factory=list)
    contract_path: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'contract_path': self.contract_path,
            'constraint': self.constraint,
            'solc_version': self.solc_version,
            'line_count': self.line_count,
            'contract_units': list(self.contract_units),
            'estimate': self.breakdown.to_dict(),
        }


class AuditEstimator:
    """Estimates manual audit time for Solidity contracts."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        resolver: Optional[VersionResolver] = None,
        bridge: Optional[CompilerBridge] = None,
    ) -> None:
        self.settings = settings or Settings.from_env()
        self.resolver = resolver or VersionResolver(
            self.settings.SOLC_LIST_URL,
            timeout=self.settings.REQUEST_TIMEOUT,
        )
        self.bridge = bridge or CompilerBridge(
            import_resolver=ImportResolver(self.settings.VENDOR_BASE_DIR),
            source_unit_name=self.settings.SOURCE_UNIT_NAME,
        )

    def close(self) -> None:
        """Release network resources held by the version resolver."""
        self.resolver.close()

    def __enter__(self) -> "AuditEstimator":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def get_estimate(
        self,
        contract_path: Union[str, Path],
        config_path: Optional[Union[str, Path]] = None,
        optimizer_runs: int = 0,
        count_imports: bool = False,
        mode: Optional[ScoringMode] = None,
    ) -> EstimateResult:
        """Estimate audit time for a contract file.

        Args:
            contract_path: Path to the Solidity file
            config_path: Optional JSON weight overlay
            optimizer_runs: Optimizer runs passed to the compiler (0 disables it)
            count_imports: Charge per import instead of a flat import rate
            mode: Scoring mode (default: from settings)

        Returns:
            The estimate and its inputs

        Raises:
            AuditScopeError: If any stage of the pipeline fails
        """
        logger.info("Estimating audit time for %s", contract_path)
        source = read_source(contract_path)
        weights = build_weight_config(config_path)
        result = self.estimate_source(source, weights, optimizer_runs, count_imports, mode)
        return EstimateResult(
            breakdown=result.breakdown,
            constraint=result.constraint,
            solc_version=result.solc_version,
            line_count=result.line_count,
            contract_units=result.contract_units,
            contract_path=str(contract_path),
        )

    def estimate_source(
        self,
        source: str,
        weights: Optional[WeightConfig] = None,
        optimizer_runs: int = 0,
        count_imports: bool = False,
        mode: Optional[ScoringMode] = None,
    ) -> EstimateResult:
        """Estimate audit time for contract text already in memory."""
        weights = weights or build_weight_config()
        mode = ScoringMode(mode or self.settings.SCORING_MODE)
        document = SourceDocument(source)

        constraint = extract_constraint(source)
        resolved = self.resolver.resolve(constraint)
        artifact = self.bridge.compile(source, resolved, optimizer_runs)

        breakdown = estimate(document, artifact, weights, count_imports, mode)
        logger.info("Estimated %.2f hours in total", breakdown.total)
        return EstimateResult(
            breakdown=breakdown,
            constraint=constraint,
            solc_version=str(resolved),
            line_count=document.line_count,
            contract_units=list(artifact),
        )

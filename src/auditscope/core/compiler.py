"""
Compiler invocation.

The compiler is a pluggable capability (:class:`Compiler`) that takes a
standard-JSON job and returns standard-JSON output. :class:`SolcxCompiler`
drives native ``solc`` binaries through py-solc-x. :class:`CompilerBridge`
builds the job for one contract, runs it once and turns the output into a
:class:`StructuralArtifact` or raises :class:`CompileDiagnostics`.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional

import solcx
from solcx.exceptions import SolcError, SolcNotInstalled

from ..config import DEFAULT_SOURCE_UNIT_NAME
from ..exceptions import CompileDiagnostics, CompilerLoadFailed
from .import_resolver import ImportResolver, collect_sources
from .version_resolver import ResolvedVersion

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Diagnostic:
    """A compiler error or warning."""
    message: str
    severity: str = "error"
    type: str = "Error"
    source_location: Optional[Dict[str, Any]] = None

    @property
    def is_error(self) -> bool:
        return self.severity == "error"

    @classmethod
    def from_solc(cls, entry: Mapping[str, Any]) -> "Diagnostic":
        message = entry.get("formattedMessage") or entry.get("message") or "Unknown compiler error"
        return cls(
            message=message.strip(),
            severity=entry.get("severity", "error"),
            type=entry.get("type", "Error"),
            source_location=entry.get("sourceLocation"),
        )

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class UnitInventory:
    """Members of one compiled contract unit, taken from its ABI."""
    name: str
    abi: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def functions(self) -> List[Dict[str, Any]]:
        return [item for item in self.abi if item.get("type") == "function"]

    @property
    def events(self) -> List[Dict[str, Any]]:
        return [item for item in self.abi if item.get("type") == "event"]

    @property
    def function_count(self) -> int:
        return len(self.functions)


class StructuralArtifact(Mapping[str, UnitInventory]):
    """Read-only mapping of contract unit name to its inventory."""

    def __init__(self, units: Optional[Mapping[str, UnitInventory]] = None) -> None:
        self._units: Dict[str, UnitInventory] = dict(units or {})

    @classmethod
    def from_solc_output(cls, contracts: Mapping[str, Any]) -> "StructuralArtifact":
        """Build from the ``contracts[<source unit>]`` section of solc output."""
        units = {
            name: UnitInventory(name=name, abi=list(data.get("abi") or []))
            for name, data in (contracts or {}).items()
        }
        return cls(units)

    def __getitem__(self, name: str) -> UnitInventory:
        return self._units[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._units)

    def __len__(self) -> int:
        return len(self._units)

    def __repr__(self) -> str:
        return f"StructuralArtifact({list(self._units)})"


class Compiler(ABC):
    """A compiler that accepts and returns standard-JSON documents."""

    @abstractmethod
    def load(self, version: ResolvedVersion) -> None:
        """Make the compiler for ``version`` available.

        Raises:
            CompilerLoadFailed: If the compiler cannot be loaded
        """

    @abstractmethod
    def compile(self, job: Dict[str, Any], version: ResolvedVersion) -> Dict[str, Any]:
        """Run one standard-JSON compilation job."""


class SolcxCompiler(Compiler):
    """Native solc binaries managed by py-solc-x."""

    def __init__(self, show_progress: bool = False) -> None:
        self.show_progress = show_progress

    def load(self, version: ResolvedVersion) -> None:
        release = version.release
        try:
            installed = {str(v) for v in solcx.get_installed_solc_versions()}
            if release not in installed:
                logger.info("Installing solc %s...", release)
                solcx.install_solc(release, show_progress=self.show_progress)
        except Exception as e:
            logger.error("Could not install solc %s: %s", release, e)
            raise CompilerLoadFailed(str(version), e) from e

    def compile(self, job: Dict[str, Any], version: ResolvedVersion) -> Dict[str, Any]:
        try:
            return solcx.compile_standard(job, solc_version=version.release, allow_empty=True)
        except SolcNotInstalled as e:
            raise CompilerLoadFailed(str(version), e) from e
        except SolcError as e:
            # solcx raises on error diagnostics; hand them back as regular output
            if e.error_dict:
                return {"errors": e.error_dict}
            # Crash or unreadable output: report it as a single compiler error
            logger.error("solc %s failed: %s", version.release, e)
            return {"errors": [{
                "severity": "error",
                "type": "CompilerError",
                "message": str(e).strip() or "solc failed without output",
            }]}


class CompilerBridge:
    """Compiles one contract and extracts its structural artifact."""

    def __init__(
        self,
        compiler: Optional[Compiler] = None,
        import_resolver: Optional[ImportResolver] = None,
        source_unit_name: str = DEFAULT_SOURCE_UNIT_NAME,
    ) -> None:
        self.compiler = compiler or SolcxCompiler()
        self.import_resolver = import_resolver or ImportResolver()
        self.source_unit_name = source_unit_name

    def build_job(self, sources: Mapping[str, str], optimizer_runs: int) -> Dict[str, Any]:
        return {
            "language": "Solidity",
            "sources": {name: {"content": text} for name, text in sources.items()},
            "settings": {
                "optimizer": {"enabled": optimizer_runs > 0, "runs": optimizer_runs},
                "outputSelection": {"*": {"*": ["*"]}},
            },
        }

    def compile(
        self,
        source: str,
        resolved_version: ResolvedVersion,
        optimizer_runs: int = 0,
    ) -> StructuralArtifact:
        """Compile a contract and return its artifact.

        Args:
            source: Contract text
            resolved_version: Compiler build to use
            optimizer_runs: 0 disables the optimizer, any positive value enables it

        Returns:
            Inventory of every contract unit defined in the source

        Raises:
            ValueError: If ``optimizer_runs`` is negative
            CompilerLoadFailed: If the compiler cannot be loaded
            CompileDiagnostics: If the compiler reports any error
        """
        if not isinstance(optimizer_runs, int) or optimizer_runs < 0:
            raise ValueError(f"optimizer_runs must be a non-negative integer, got {optimizer_runs!r}")

        self.compiler.load(resolved_version)

        sources, import_errors = collect_sources(self.source_unit_name, source, self.import_resolver)
        job = self.build_job(sources, optimizer_runs)

        logger.info("Compiling %s with solc %s", self.source_unit_name, resolved_version)
        output = self.compiler.compile(job, resolved_version)

        diagnostics = [Diagnostic.from_solc(entry) for entry in output.get("errors") or []]
        # Unreadable imports are errors even if the compiler stays silent about them
        reported = " ".join(d.message for d in diagnostics)
        for unit, message in import_errors.items():
            if unit not in reported:
                diagnostics.append(Diagnostic(message=f"{unit}: {message}", type="ImportError"))

        errors = [d for d in diagnostics if d.is_error]
        for warning in (d for d in diagnostics if not d.is_error):
            logger.warning("Compiler %s: %s", warning.severity, warning.message)
        if errors:
            raise CompileDiagnostics(errors)

        contracts = (output.get("contracts") or {}).get(self.source_unit_name, {})
        artifact = StructuralArtifact.from_solc_output(contracts)
        logger.debug("Compiled %d contract unit(s): %s", len(artifact), ", ".join(artifact))
        return artifact

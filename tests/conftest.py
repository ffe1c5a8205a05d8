"""
Shared fixtures for the AuditScope test suite.
"""
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock

import pytest

# Add the src directory to the path so the package imports without installing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from auditscope.config import Settings
from auditscope.core.compiler import Compiler, CompilerBridge
from auditscope.core.import_resolver import ImportResolver
from auditscope.core.version_resolver import ResolvedVersion, VersionCache, VersionResolver

CATALOG_URL = "https://solc-bin.example.org/bin/list.json"

CATALOG = {
    "builds": [],
    "releases": {
        "0.8.0": "soljson-v0.8.0+commit.c7dfd78e.js",
        "^0.8.0": "soljson-v0.8.0+commit.c7dfd78e.js",
        "0.7.6": "soljson-v0.7.6+commit.7338295f.js",
    },
}


def make_abi(function_count: int, event_count: int = 0) -> List[Dict[str, Any]]:
    abi = [{"type": "function", "name": f"f{i}"} for i in range(function_count)]
    abi.extend({"type": "event", "name": f"E{i}"} for i in range(event_count))
    return abi


def make_source(lines: int, body: str = "", pragma: str = "pragma solidity ^0.8.0;") -> str:
    """Build contract text with exactly ``lines`` newline-separated lines."""
    head = [pragma, "contract Sample {"]
    head.extend(line for line in body.split("\n") if line)
    head.append("}")
    if len(head) > lines:
        raise ValueError("body does not fit in the requested line count")
    padding = ["// padding"] * (lines - len(head))
    return "\n".join(head[:-1] + padding + head[-1:])


class FakeCompiler(Compiler):
    """Records jobs and returns a canned standard-JSON output."""

    def __init__(self, output: Optional[Dict[str, Any]] = None, load_error: Optional[Exception] = None):
        self.output = output if output is not None else {"contracts": {}}
        self.load_error = load_error
        self.loaded: List[ResolvedVersion] = []
        self.jobs: List[Dict[str, Any]] = []

    def load(self, version: ResolvedVersion) -> None:
        if self.load_error is not None:
            raise self.load_error
        self.loaded.append(version)

    def compile(self, job: Dict[str, Any], version: ResolvedVersion) -> Dict[str, Any]:
        self.jobs.append(job)
        return self.output


def solc_output(units: Dict[str, int], source_unit: str = "contract.sol") -> Dict[str, Any]:
    return {"contracts": {source_unit: {name: {"abi": make_abi(n)} for name, n in units.items()}}}


@pytest.fixture
def http_client():
    client = MagicMock()
    client.get_json.return_value = CATALOG
    return client


@pytest.fixture
def version_cache():
    return VersionCache()


@pytest.fixture
def resolver(http_client, version_cache):
    return VersionResolver(CATALOG_URL, cache=version_cache, http_client=http_client)


@pytest.fixture
def import_resolver(tmp_path):
    return ImportResolver(vendor_base=tmp_path / "node_modules" / "@openzeppelin", root=tmp_path)


@pytest.fixture
def settings():
    return Settings(SOLC_LIST_URL=CATALOG_URL)


@pytest.fixture
def fake_compiler():
    return FakeCompiler(solc_output({"Sample": 3}))


@pytest.fixture
def bridge(fake_compiler, import_resolver):
    return CompilerBridge(compiler=fake_compiler, import_resolver=import_resolver)

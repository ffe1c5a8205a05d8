"""
Tests for the compiler module.
"""
from unittest.mock import patch

import pytest
from solcx.exceptions import SolcError, SolcNotInstalled

from auditscope.core.compiler import (
    CompilerBridge,
    Diagnostic,
    SolcxCompiler,
    StructuralArtifact,
    UnitInventory,
)
from auditscope.core.version_resolver import ResolvedVersion
from auditscope.exceptions import CompileDiagnostics, CompilerLoadFailed

from conftest import FakeCompiler, make_abi, solc_output

VERSION = ResolvedVersion("v0.8.0+commit.c7dfd78e")
SOURCE = "pragma solidity ^0.8.0;\ncontract Sample {}"


def solc_error(message, severity="error"):
    return {
        "severity": severity,
        "type": "ParserError" if severity == "error" else "Warning",
        "message": message,
        "formattedMessage": f"{severity.title()}: {message}\n --> contract.sol:1:1:",
    }


class TestStructuralArtifact:
    """Test cases for the artifact types."""

    def test_function_inventory_ignores_other_abi_entries(self):
        unit = UnitInventory("Token", make_abi(4, event_count=2) + [{"type": "constructor"}])
        assert unit.function_count == 4
        assert len(unit.events) == 2

    def test_from_solc_output(self):
        artifact = StructuralArtifact.from_solc_output({
            "A": {"abi": make_abi(2)},
            "B": {"abi": []},
            "C": {},
        })
        assert list(artifact) == ["A", "B", "C"]
        assert artifact["A"].function_count == 2
        assert artifact["C"].function_count == 0

    def test_empty_artifact(self):
        assert len(StructuralArtifact.from_solc_output({})) == 0


class TestDiagnostic:
    """Test cases for Diagnostic."""

    def test_prefers_formatted_message(self):
        diagnostic = Diagnostic.from_solc(solc_error("Expected ';'"))
        assert diagnostic.message.startswith("Error: Expected ';'")
        assert diagnostic.is_error

    def test_falls_back_to_message(self):
        diagnostic = Diagnostic.from_solc({"severity": "warning", "message": "unused variable"})
        assert diagnostic.message == "unused variable"
        assert not diagnostic.is_error


class TestCompilerBridge:
    """Test cases for CompilerBridge.compile."""

    def test_returns_artifact_for_entry_unit(self, bridge, fake_compiler):
        artifact = bridge.compile(SOURCE, VERSION)
        assert list(artifact) == ["Sample"]
        assert artifact["Sample"].function_count == 3
        assert fake_compiler.loaded == [VERSION]

    def test_job_shape(self, bridge, fake_compiler):
        bridge.compile(SOURCE, VERSION)
        job = fake_compiler.jobs[0]
        assert job["language"] == "Solidity"
        assert job["sources"] == {"contract.sol": {"content": SOURCE}}
        assert job["settings"]["outputSelection"] == {"*": {"*": ["*"]}}

    @pytest.mark.parametrize("runs, enabled", [(0, False), (1, True), (200, True)])
    def test_optimizer_settings(self, bridge, fake_compiler, runs, enabled):
        bridge.compile(SOURCE, VERSION, optimizer_runs=runs)
        assert fake_compiler.jobs[0]["settings"]["optimizer"] == {"enabled": enabled, "runs": runs}

    def test_negative_optimizer_runs(self, bridge, fake_compiler):
        with pytest.raises(ValueError):
            bridge.compile(SOURCE, VERSION, optimizer_runs=-1)
        assert fake_compiler.jobs == []

    def test_all_error_diagnostics_are_reported(self, import_resolver):
        compiler = FakeCompiler({"errors": [
            solc_error("first problem"),
            solc_error("unused variable", severity="warning"),
            solc_error("second problem"),
        ]})
        bridge = CompilerBridge(compiler=compiler, import_resolver=import_resolver)

        with pytest.raises(CompileDiagnostics) as exc_info:
            bridge.compile(SOURCE, VERSION)

        messages = [d.message for d in exc_info.value.diagnostics]
        assert len(messages) == 2
        assert "first problem" in messages[0]
        assert "second problem" in messages[1]
        assert "second problem" in str(exc_info.value)

    def test_warnings_do_not_block_compilation(self, import_resolver):
        output = solc_output({"Sample": 1})
        output["errors"] = [solc_error("shadowing", severity="warning")]
        bridge = CompilerBridge(compiler=FakeCompiler(output), import_resolver=import_resolver)
        assert bridge.compile(SOURCE, VERSION)["Sample"].function_count == 1

    def test_unreadable_import_becomes_diagnostic(self, bridge, fake_compiler):
        source = 'pragma solidity ^0.8.0;\nimport "./Missing.sol";\ncontract Sample {}'
        with pytest.raises(CompileDiagnostics) as exc_info:
            bridge.compile(source, VERSION)
        assert "Missing.sol" in exc_info.value.diagnostics[0].message
        # The compiler still ran once with the readable sources
        assert len(fake_compiler.jobs) == 1

    def test_commented_out_import_is_not_collected(self, bridge, fake_compiler):
        source = 'pragma solidity ^0.8.0;\n/*\nimport "./Old.sol";\n*/\ncontract Sample {}'
        artifact = bridge.compile(source, VERSION)
        assert list(artifact) == ["Sample"]
        assert list(fake_compiler.jobs[0]["sources"]) == ["contract.sol"]

    def test_import_error_reported_by_compiler_is_not_duplicated(self, import_resolver):
        compiler = FakeCompiler({"errors": [solc_error('Source "Missing.sol" not found')]})
        bridge = CompilerBridge(compiler=compiler, import_resolver=import_resolver)
        source = 'import "./Missing.sol";\ncontract Sample {}'
        with pytest.raises(CompileDiagnostics) as exc_info:
            bridge.compile(source, VERSION)
        assert len(exc_info.value.diagnostics) == 1

    def test_load_failure_stops_compilation(self, import_resolver):
        compiler = FakeCompiler(load_error=CompilerLoadFailed(str(VERSION), "download failed"))
        bridge = CompilerBridge(compiler=compiler, import_resolver=import_resolver)
        with pytest.raises(CompilerLoadFailed):
            bridge.compile(SOURCE, VERSION)
        assert compiler.jobs == []

    def test_custom_source_unit_name(self, import_resolver):
        compiler = FakeCompiler(solc_output({"Sample": 2}, source_unit="Sample.sol"))
        bridge = CompilerBridge(compiler=compiler, import_resolver=import_resolver,
                                source_unit_name="Sample.sol")
        assert bridge.compile(SOURCE, VERSION)["Sample"].function_count == 2


class TestSolcxCompiler:
    """Test cases for the py-solc-x backed compiler."""

    @patch("auditscope.core.compiler.solcx")
    def test_installs_missing_release(self, mock_solcx):
        mock_solcx.get_installed_solc_versions.return_value = []
        SolcxCompiler().load(VERSION)
        mock_solcx.install_solc.assert_called_once_with("0.8.0", show_progress=False)

    @patch("auditscope.core.compiler.solcx")
    def test_skips_installed_release(self, mock_solcx):
        mock_solcx.get_installed_solc_versions.return_value = ["0.8.0"]
        SolcxCompiler().load(VERSION)
        mock_solcx.install_solc.assert_not_called()

    @patch("auditscope.core.compiler.solcx")
    def test_install_failure(self, mock_solcx):
        mock_solcx.get_installed_solc_versions.return_value = []
        mock_solcx.install_solc.side_effect = OSError("no network")
        with pytest.raises(CompilerLoadFailed) as exc_info:
            SolcxCompiler().load(VERSION)
        assert exc_info.value.version == str(VERSION)

    @patch("auditscope.core.compiler.solcx")
    def test_compile_passes_release(self, mock_solcx):
        mock_solcx.compile_standard.return_value = {"contracts": {}}
        job = {"language": "Solidity", "sources": {}}
        assert SolcxCompiler().compile(job, VERSION) == {"contracts": {}}
        mock_solcx.compile_standard.assert_called_once_with(job, solc_version="0.8.0", allow_empty=True)

    @patch("auditscope.core.compiler.solcx")
    def test_compile_errors_are_returned_as_output(self, mock_solcx):
        errors = [solc_error("bad")]
        mock_solcx.compile_standard.side_effect = SolcError(
            "bad", command=["solc"], return_code=1, stdin_data="", stdout_data="",
            stderr_data="", error_dict=errors,
        )
        assert SolcxCompiler().compile({}, VERSION) == {"errors": errors}

    @patch("auditscope.core.compiler.solcx")
    def test_crash_without_error_output_becomes_error_entry(self, mock_solcx):
        mock_solcx.compile_standard.side_effect = SolcError(
            "solc crashed", command=["solc"], return_code=-11, stdin_data="", stdout_data="",
            stderr_data="Segmentation fault", error_dict=None,
        )
        output = SolcxCompiler().compile({}, VERSION)
        assert len(output["errors"]) == 1
        assert output["errors"][0]["severity"] == "error"
        assert "solc crashed" in output["errors"][0]["message"]

    @patch("auditscope.core.compiler.solcx")
    def test_crash_is_reported_through_the_bridge(self, mock_solcx, import_resolver):
        mock_solcx.get_installed_solc_versions.return_value = ["0.8.0"]
        mock_solcx.compile_standard.side_effect = SolcError(
            "solc crashed", command=["solc"], return_code=-11, stdin_data="", stdout_data="",
            stderr_data="Segmentation fault", error_dict=None,
        )
        bridge = CompilerBridge(compiler=SolcxCompiler(), import_resolver=import_resolver)
        with pytest.raises(CompileDiagnostics) as exc_info:
            bridge.compile(SOURCE, VERSION)
        assert len(exc_info.value.diagnostics) == 1
        assert "solc crashed" in exc_info.value.diagnostics[0].message

    @patch("auditscope.core.compiler.solcx")
    def test_missing_binary_at_compile_time(self, mock_solcx):
        mock_solcx.compile_standard.side_effect = SolcNotInstalled("solc 0.8.0 is not installed")
        with pytest.raises(CompilerLoadFailed) as exc_info:
            SolcxCompiler().compile({}, VERSION)
        assert exc_info.value.version == str(VERSION)

"""
Core estimation pipeline: version resolution, import resolution,
compiler invocation and the weight configuration.
"""

from .compiler import (
    Compiler,
    CompilerBridge,
    Diagnostic,
    SolcxCompiler,
    StructuralArtifact,
    UnitInventory,
)
from .import_resolver import ImportResolver, collect_sources
from .version_resolver import (
    ResolvedVersion,
    VersionCache,
    VersionResolver,
    default_cache,
    extract_constraint,
)
from .weights import DEFAULT_WEIGHTS, WeightConfig, build_weight_config, load_overlay, merge

__all__ = [
    'Compiler',
    'CompilerBridge',
    'Diagnostic',
    'SolcxCompiler',
    'StructuralArtifact',
    'UnitInventory',
    'ImportResolver',
    'collect_sources',
    'ResolvedVersion',
    'VersionCache',
    'VersionResolver',
    'default_cache',
    'extract_constraint',
    'DEFAULT_WEIGHTS',
    'WeightConfig',
    'build_weight_config',
    'load_overlay',
    'merge',
]

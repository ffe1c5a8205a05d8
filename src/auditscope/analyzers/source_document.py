"""
Lexical signals read from contract source text.

All detection is plain substring/regex scanning of the raw text. Comments and
string literals are not skipped and nothing is parsed, so every pattern below
can be swapped for a different lexer without touching the scoring code.
"""

import re
from dataclasses import dataclass
from functools import cached_property

from ..core.version_resolver import PRAGMA_PATTERN

# Literal low-level call syntax. Matches `.call(` only; `.call{value: x}(` and
# `.delegatecall(` are not counted as external calls.
EXTERNAL_CALL_PATTERN = re.compile(r"\.call\(")

# Every occurrence of the word fragment `import`, including ones inside
# comments or identifiers such as `importer`.
IMPORT_PATTERN = re.compile(r"import")

# Any `assembly` token marks inline assembly.
ASSEMBLY_PATTERN = re.compile(r"assembly")

# Upgradeability markers: delegatecall syntax, a lowercase `proxy` token,
# or an `initialize` token (also matches `initializer`).
UPGRADEABILITY_PATTERNS = (
    re.compile(r"delegatecall"),
    re.compile(r"proxy"),
    re.compile(r"initialize"),
)


@dataclass(frozen=True)
class SourceDocument:
    """Immutable contract text plus the signals derived from it."""
    text: str

    @cached_property
    def line_count(self) -> int:
        return len(self.text.split("\n"))

    @cached_property
    def has_version_declaration(self) -> bool:
        return PRAGMA_PATTERN.search(self.text) is not None

    @cached_property
    def external_call_count(self) -> int:
        return len(EXTERNAL_CALL_PATTERN.findall(self.text))

    @cached_property
    def import_count(self) -> int:
        return len(IMPORT_PATTERN.findall(self.text))

    @cached_property
    def has_assembly(self) -> bool:
        return ASSEMBLY_PATTERN.search(self.text) is not None

    @cached_property
    def is_upgradeable(self) -> bool:
        return any(pattern.search(self.text) for pattern in UPGRADEABILITY_PATTERNS)

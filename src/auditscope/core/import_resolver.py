"""
Import resolution for Solidity sources.

Maps import paths used inside a contract to file contents. Imports under the
``@openzeppelin/`` namespace are read from a vendored package directory;
every other path is read relative to the working directory. Read failures
are returned as error markers so that one broken import never stops the
remaining ones from being resolved.
"""

import logging
import posixpath
import re
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from ..config import DEFAULT_VENDOR_BASE_DIR
from ..exceptions import SourceUnreadable
from ..utils.file_utils import read_source

logger = logging.getLogger(__name__)

PACKAGE_PREFIX = "@openzeppelin/"

# Path of every import form: `import "x";`, `import "x" as y;`,
# `import * as y from "x";`, `import {a, b} from "x";`
IMPORT_PATH_PATTERN = re.compile(
    r"""^\s*import\s+(?:[^;"']*?\s+from\s+)?["']([^"']+)["']""",
    re.MULTILINE,
)

# String literals are matched first so that `//` inside a quoted path is kept
COMMENT_PATTERN = re.compile(
    r"""("(?:\\.|[^"\\\n])*"|'(?:\\.|[^'\\\n])*')|(/\*.*?\*/|//[^\n]*)""",
    re.DOTALL,
)

ImportResult = Dict[str, str]


def strip_comments(source: str) -> str:
    """Blank out line and block comments, keeping line breaks in place."""
    def replace(match: "re.Match[str]") -> str:
        if match.group(1) is not None:
            return match.group(1)
        return "\n" * match.group(2).count("\n")
    return COMMENT_PATTERN.sub(replace, source)


class ImportResolver:
    """Reads import targets, applying the vendored package alias."""

    def __init__(
        self,
        vendor_base: Union[str, Path] = DEFAULT_VENDOR_BASE_DIR,
        package_prefix: str = PACKAGE_PREFIX,
        root: Optional[Union[str, Path]] = None,
    ) -> None:
        self.vendor_base = Path(vendor_base)
        self.package_prefix = package_prefix
        self.root = Path(root) if root is not None else None

    def to_filesystem_path(self, import_path: str) -> Path:
        if import_path.startswith(self.package_prefix):
            return self.vendor_base / import_path[len(self.package_prefix):]
        path = Path(import_path)
        if self.root is not None and not path.is_absolute():
            return self.root / path
        return path

    def resolve_import(self, import_path: str) -> ImportResult:
        """Return ``{"contents": ...}`` or ``{"error": ...}`` for an import path."""
        full_path = self.to_filesystem_path(import_path)
        try:
            return {"contents": read_source(full_path)}
        except SourceUnreadable as e:
            logger.error("Error reading %s: %s", full_path, e.cause)
            return {"error": f"Error reading {full_path}"}

    def __call__(self, import_path: str) -> ImportResult:
        return self.resolve_import(import_path)


def find_imports(source: str) -> List[str]:
    """Return import paths in the order they appear in the source.

    Commented-out imports are ignored.
    """
    return IMPORT_PATH_PATTERN.findall(strip_comments(source))


def normalize_import(importer: str, import_path: str) -> str:
    """Turn an import path into a source unit name.

    Relative paths (``./`` or ``../``) are resolved against the importing
    unit's directory; any other path is already a unit name.
    """
    if import_path.startswith("./") or import_path.startswith("../"):
        return posixpath.normpath(posixpath.join(posixpath.dirname(importer), import_path))
    return import_path


def collect_sources(
    entry_name: str,
    source: str,
    resolver: ImportResolver,
) -> Tuple[Dict[str, str], Dict[str, str]]:
    """Gather the entry source and everything it imports, transitively.

    Args:
        entry_name: Source unit name of the analysed contract
        source: Contract text
        resolver: Import resolver used for every imported unit

    Returns:
        ``(sources, errors)``: unit name -> text for every readable unit, and
        unit name -> error message for every import that could not be read
    """
    sources: Dict[str, str] = {entry_name: source}
    errors: Dict[str, str] = {}
    pending = [(entry_name, source)]

    while pending:
        importer, text = pending.pop()
        for raw_path in find_imports(text):
            unit = normalize_import(importer, raw_path)
            if unit in sources or unit in errors:
                continue
            result = resolver.resolve_import(unit)
            if "error" in result:
                errors[unit] = result["error"]
                continue
            sources[unit] = result["contents"]
            pending.append((unit, result["contents"]))

    logger.debug("Collected %d source unit(s), %d unreadable import(s)", len(sources), len(errors))
    return sources, errors

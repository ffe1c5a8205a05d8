"""
Compiler version resolution.

Reads the ``pragma solidity`` constraint from a source file and maps it to a
fully qualified compiler build (``v0.8.0+commit.c7dfd78e``) using the solc
release list. Resolutions are memoised in a :class:`VersionCache`.
"""

import logging
import re
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

import requests

from ..exceptions import CatalogUnreachable, MissingVersionDeclaration, VersionNotFound
from ..utils.http_client import HTTPClient

logger = logging.getLogger(__name__)

# First ``pragma solidity X.Y.Z;`` line, optionally with a comparison or
# compatibility prefix. Ranges such as ">=0.8.0 <0.9.0" are not matched.
PRAGMA_PATTERN = re.compile(r"^pragma solidity ((?:\^|~|>=|<=|>|<|=)?\d+\.\d+\.\d+);", re.MULTILINE)
CONSTRAINT_PREFIX_PATTERN = re.compile(r"^(?:\^|~|>=|<=|>|<|=)")

BUILD_PREFIX = "soljson-"
BUILD_SUFFIX = ".js"


@dataclass(frozen=True)
class ResolvedVersion:
    """A fully qualified compiler build identifier."""
    build: str

    @property
    def release(self) -> str:
        """Plain release number, e.g. ``0.8.0`` for ``v0.8.0+commit.c7dfd78e``."""
        return self.build.lstrip("v").split("+", 1)[0]

    def __str__(self) -> str:
        return self.build


def extract_constraint(source: str) -> str:
    """Return the version constraint declared by the first pragma line.

    Raises:
        MissingVersionDeclaration: If the source declares no version
    """
    match = PRAGMA_PATTERN.search(source)
    if not match:
        raise MissingVersionDeclaration()
    return match.group(1)


def strip_constraint_prefix(constraint: str) -> str:
    return CONSTRAINT_PREFIX_PATTERN.sub("", constraint)


def build_from_filename(filename: str) -> str:
    """Turn ``soljson-v0.8.0+commit.c7dfd78e.js`` into ``v0.8.0+commit.c7dfd78e``."""
    build = filename
    if build.startswith(BUILD_PREFIX):
        build = build[len(BUILD_PREFIX):]
    if build.endswith(BUILD_SUFFIX):
        build = build[:-len(BUILD_SUFFIX)]
    return build


class _Flight:
    """One in-progress resolution that other callers can wait on."""

    def __init__(self) -> None:
        self.done = threading.Event()
        self.error: Optional[BaseException] = None


class VersionCache:
    """Get-or-populate cache of constraint resolutions.

    A key, once stored, is never overwritten. Only one resolution per key runs
    at a time; concurrent callers for the same key wait for the first caller
    and share its outcome. Lookups that end in ``VersionNotFound`` are stored
    as negative entries, other failures are not stored.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._values: Dict[str, Optional[ResolvedVersion]] = {}
        self._flights: Dict[str, _Flight] = {}

    def __contains__(self, constraint: str) -> bool:
        with self._lock:
            return constraint in self._values

    def __len__(self) -> int:
        with self._lock:
            return len(self._values)

    def peek(self, constraint: str) -> Optional[ResolvedVersion]:
        with self._lock:
            return self._values.get(constraint)

    def get_or_populate(
        self,
        constraint: str,
        populate: Callable[[], Optional[ResolvedVersion]],
    ) -> ResolvedVersion:
        """Return the cached resolution, calling ``populate`` on first use.

        ``populate`` returns ``None`` when the catalog has no entry; that miss
        is cached and reported as ``VersionNotFound``.
        """
        while True:
            with self._lock:
                if constraint in self._values:
                    value = self._values[constraint]
                    logger.info("Using cached version for Solidity %s...", constraint)
                    if value is None:
                        raise VersionNotFound(constraint)
                    return value
                flight = self._flights.get(constraint)
                if flight is None:
                    flight = _Flight()
                    self._flights[constraint] = flight
                    owner = True
                else:
                    owner = False

            if not owner:
                flight.done.wait()
                if flight.error is not None:
                    raise flight.error
                # The owner stored a value (or a negative entry); read it back
                continue

            try:
                value = populate()
            except BaseException as e:
                flight.error = e
                with self._lock:
                    del self._flights[constraint]
                flight.done.set()
                raise

            with self._lock:
                self._values.setdefault(constraint, value)
                del self._flights[constraint]
            flight.done.set()

            if value is None:
                raise VersionNotFound(constraint)
            return value


# Shared by every resolver that is not given its own cache
default_cache = VersionCache()


class VersionResolver:
    """Resolves version constraints against the solc release list."""

    def __init__(
        self,
        catalog_url: str,
        cache: Optional[VersionCache] = None,
        http_client: Optional[HTTPClient] = None,
        timeout: float = 10.0,
    ) -> None:
        self.catalog_url = catalog_url
        self.cache = cache if cache is not None else default_cache
        self.http_client = http_client or HTTPClient(timeout=timeout)

    def fetch_catalog(self) -> Dict[str, Any]:
        """Download the ``releases`` map of the catalog.

        Raises:
            CatalogUnreachable: On network, HTTP or decoding failure
        """
        logger.debug("Fetching compiler catalog from %s", self.catalog_url)
        try:
            document = self.http_client.get_json(self.catalog_url)
        except (requests.exceptions.RequestException, ValueError) as e:
            raise CatalogUnreachable(self.catalog_url, e) from e

        if not isinstance(document, dict) or not isinstance(document.get("releases"), dict):
            raise CatalogUnreachable(self.catalog_url, "catalog has no 'releases' map")
        return document["releases"]

    def _lookup(self, constraint: str) -> Optional[ResolvedVersion]:
        logger.info("Resolving full version for Solidity %s...", constraint)
        releases = self.fetch_catalog()

        filename = releases.get(constraint)
        if filename is None:
            filename = releases.get(strip_constraint_prefix(constraint))
        if not filename:
            logger.warning("Version %s is not in the compiler catalog", constraint)
            return None

        resolved = ResolvedVersion(build_from_filename(filename))
        logger.info("Resolved Solidity %s to %s", constraint, resolved)
        return resolved

    def resolve(self, constraint: str) -> ResolvedVersion:
        """Resolve a constraint to a compiler build.

        Raises:
            VersionNotFound: If the catalog has no build for the constraint
            CatalogUnreachable: If the catalog cannot be fetched
        """
        return self.cache.get_or_populate(constraint, lambda: self._lookup(constraint))

    def close(self) -> None:
        """Release the HTTP session used for catalog fetches."""
        self.http_client.close()

"""Async client for the Spring Initializr metadata service.

Fetches the client metadata document (``GET /metadata/client``), decodes it,
and keeps it in a :class:`~spring_scaffold.cache.MetadataCache` for an hour so
repeated ``new`` invocations do not hit the network.

Typical usage::

    client = MetadataClient()
    metadata = await client.fetch()
    catalog = DependencyCatalog.from_metadata(metadata)
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .cache import MetadataCache
from .config import SPRING_METADATA_URL
from .errors import DecodeError, NetworkError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Dependency catalog
# ---------------------------------------------------------------------------


class DependencyEntry(BaseModel):
    """A single selectable dependency (e.g. ``web``, ``data-jpa``)."""

    model_config = ConfigDict(extra="ignore")

    id: str
    name: str = ""
    description: str = ""


class DependencyGroup(BaseModel):
    """A named category of dependencies (e.g. "Web", "SQL")."""

    model_config = ConfigDict(extra="ignore")

    name: str
    values: list[DependencyEntry] = Field(default_factory=list)


class DependencyCatalog(BaseModel):
    """The grouped dependency list presented to the user."""

    groups: list[DependencyGroup] = Field(default_factory=list)

    @classmethod
    def from_metadata(cls, metadata: Any) -> "DependencyCatalog":
        """Extract ``dependencies.values`` from a metadata document.

        Anything that does not look like a catalog yields an empty one; no
        other part of the document is inspected. Groups without a string name
        and entries that fail validation are skipped.
        """
        if not isinstance(metadata, dict):
            return cls()
        dependencies = metadata.get("dependencies")
        if not isinstance(dependencies, dict):
            return cls()
        raw_groups = dependencies.get("values")
        if not isinstance(raw_groups, list):
            return cls()

        groups: list[DependencyGroup] = []
        for raw in raw_groups:
            if not isinstance(raw, dict) or not isinstance(raw.get("name"), str):
                logger.debug("Skipping dependency group without a name: %r", raw)
                continue
            raw_values = raw.get("values")
            if not isinstance(raw_values, list):
                raw_values = []
            entries = [entry for entry in map(_parse_entry, raw_values) if entry is not None]
            groups.append(DependencyGroup(name=raw["name"], values=entries))
        return cls(groups=groups)

    def is_empty(self) -> bool:
        return not any(group.values for group in self.groups)

    def ids(self) -> list[str]:
        """Every dependency id in catalog order."""
        return [entry.id for group in self.groups for entry in group.values]


def _parse_entry(value: Any) -> DependencyEntry | None:
    if not isinstance(value, dict) or not value.get("id"):
        return None
    try:
        return DependencyEntry.model_validate(value)
    except ValidationError as exc:
        logger.debug("Skipping invalid dependency entry %r: %s", value, exc)
        return None


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class MetadataClient:
    """Fetches and caches the Initializr metadata document.

    Args:
        url: Metadata endpoint.
        ttl: Cache lifetime in seconds.
        timeout: Request timeout in seconds; ``None`` disables the timeout.
        cache: Cache instance to use; a private one is created if omitted.
    """

    def __init__(
        self,
        url: str = SPRING_METADATA_URL,
        ttl: float = 3600.0,
        timeout: float | None = 30.0,
        cache: MetadataCache | None = None,
    ) -> None:
        self.url = url
        self.ttl = ttl
        self.timeout = timeout
        self.cache = cache or MetadataCache()

    def _client(self) -> httpx.AsyncClient:
        """Return a fresh ``AsyncClient`` configured with our timeout."""
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            headers={"Accept": "application/json"},
            follow_redirects=True,
        )

    async def _download(self, url: str) -> Any:
        """GET *url* and decode the body as JSON.

        Raises:
            NetworkError: On any transport failure or non-2xx status.
            DecodeError: If the body is not valid JSON.
        """
        logger.info("Fetching generator metadata from %s", url)
        try:
            async with self._client() as client:
                response = await client.get(url)
                response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise NetworkError(url, f"HTTP {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise NetworkError(url, exc) from exc

        try:
            return response.json()
        except ValueError as exc:
            raise DecodeError(str(exc)) from exc

    async def fetch(self, url: str | None = None) -> Any:
        """Return the metadata document, from cache when still fresh.

        A failed fetch leaves the cache untouched.
        """
        target = url or self.url
        return await self.cache.get_or_fetch(target, self.ttl, lambda: self._download(target))

    async def fetch_catalog(self, url: str | None = None) -> DependencyCatalog:
        """Fetch the metadata and return only its dependency catalog."""
        return DependencyCatalog.from_metadata(await self.fetch(url))

    def invalidate(self, url: str | None = None) -> None:
        """Drop the cached document so the next fetch hits the network."""
        self.cache.invalidate(url or self.url)

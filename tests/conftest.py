"""
Shared fixtures: a controllable clock, an in-process catalog fetcher,
and a tiered cache backed by a temporary directory.
"""
import pytest

from mcp_seraphim.adapters import FilesystemStore, MemoryStore
from mcp_seraphim.core.cache import TieredCache
from mcp_seraphim.core.domain import RawEntry
from mcp_seraphim.core.errors import NotFoundError, UpstreamUnavailableError
from mcp_seraphim.core.ports import CatalogFetcher

SAMPLE_DOC = """## Series A
**[COD1] Phone One:**
`MN-100`: Base Edition
`MN-101`: Pro Edition
**Phone Two:**
`MN-200`: Standard
"""

ZETA_DOC = """# Zeta phones

**Zeta Z1:**
`Z-1`: Base
"""


class FakeClock:
    """Wall clock in seconds that only moves when told to"""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeFetcher(CatalogFetcher):
    """Catalog fetcher serving documents from a dict"""

    def __init__(self, documents: dict[str, str], failing: tuple[str, ...] = ()):
        self.documents = documents
        self.failing = set(failing)
        self.calls: list[tuple[str, str | None]] = []

    def list_entries(self) -> list[RawEntry]:
        self.calls.append(("list", None))
        return [RawEntry(filename=name) for name in self.documents]

    def fetch_document(self, name: str) -> str:
        self.calls.append(("fetch", name))
        if name in self.failing:
            raise UpstreamUnavailableError(f"Network error while fetching {name}")
        if name not in self.documents:
            raise NotFoundError(f"{name} not found")
        return self.documents[name]

    def count(self, kind: str) -> int:
        return sum(1 for k, _ in self.calls if k == kind)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(tmp_path, clock):
    return TieredCache(
        fast=MemoryStore(),
        durable=FilesystemStore(tmp_path / "cache"),
        default_ttl=3600,
        clock=clock,
    )


@pytest.fixture
def fetcher():
    return FakeFetcher({
        "acme_global_en.md": SAMPLE_DOC,
        "zeta_cn.md": ZETA_DOC,
        "README.md": "",
    })

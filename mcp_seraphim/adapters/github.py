"""
GitHub Adapter

Implements CatalogFetcher port against a GitHub repository of brand
documents (directory listing via the contents API, documents via raw URLs).
"""
import logging
from typing import Optional

import httpx

from ..core.domain import RawEntry
from ..core.errors import NotFoundError, UpstreamUnavailableError
from ..core.names import is_document
from ..core.ports import CatalogFetcher

logger = logging.getLogger(__name__)

GITHUB_API_BASE = "https://api.github.com"
GITHUB_RAW_BASE = "https://raw.githubusercontent.com"


class GitHubFetcher(CatalogFetcher):
    """Brand catalog fetcher using httpx"""

    def __init__(
        self,
        repo: str,
        branch: str = "master",
        brands_dir: str = "brands",
        token: Optional[str] = None,
        require_token: bool = False,
        user_agent: str = "SERAPHIM-Phone-Search",
        timeout: float = 30.0,
        client: Optional[httpx.Client] = None,
    ):
        self.repo = repo
        self.branch = branch
        self.brands_dir = brands_dir.strip("/")
        self.token = token
        self.require_token = require_token
        self.client = client or httpx.Client(
            timeout=httpx.Timeout(timeout),
            follow_redirects=True,
            headers={"User-Agent": user_agent},
        )

    @property
    def directory_url(self) -> str:
        return f"{GITHUB_API_BASE}/repos/{self.repo}/contents/{self.brands_dir}"

    def document_url(self, name: str) -> str:
        return f"{GITHUB_RAW_BASE}/{self.repo}/{self.branch}/{self.brands_dir}/{name}"

    def _get(self, url: str, headers: dict[str, str], what: str) -> httpx.Response:
        """GET url, mapping failures to NotFound / UpstreamUnavailable"""
        logger.info(f"Fetching {what} from: {url}")
        try:
            response = self.client.get(url, headers=headers)
        except httpx.TimeoutException as e:
            raise UpstreamUnavailableError(f"GitHub timeout while fetching {what}: {e}") from e
        except httpx.HTTPError as e:
            raise UpstreamUnavailableError(f"Network error while fetching {what}: {e}") from e

        logger.info(f"Response: {response.status_code} {response.reason_phrase}")

        if response.status_code == 404:
            raise NotFoundError(f"{what} not found: {url}")
        if response.status_code in (401, 403, 429):
            raise UpstreamUnavailableError(
                f"GitHub API rate limit exceeded or invalid token ({response.status_code}) "
                f"while fetching {what}"
            )
        if not response.is_success:
            raise UpstreamUnavailableError(
                f"GitHub API error: {response.status_code} {response.reason_phrase} while fetching {what}"
            )
        return response

    def list_entries(self) -> list[RawEntry]:
        """List brand documents (.md files) in the brands directory"""
        if self.require_token and not self.token:
            raise UpstreamUnavailableError(
                "GitHub token not configured: set GITHUB_TOKEN"
            )

        headers = {"Accept": "application/vnd.github.v3+json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        response = self._get(self.directory_url, headers, "brand directory")
        try:
            files = response.json()
        except ValueError as e:
            raise UpstreamUnavailableError(f"Malformed directory listing: {e}") from e
        if not isinstance(files, list):
            raise UpstreamUnavailableError("Malformed directory listing: expected a list")

        entries = [
            RawEntry(filename=f["name"])
            for f in files
            if isinstance(f, dict) and isinstance(f.get("name"), str) and is_document(f["name"])
        ]
        logger.info(f"Found markdown files: {len(entries)}")
        return entries

    def fetch_document(self, name: str) -> str:
        """Download raw markdown for a brand document"""
        # Raw content is public; no auth header
        response = self._get(self.document_url(name), {}, name)
        content = response.text
        logger.info(f"Successfully fetched {name}, content length: {len(content)}")
        return content

    def close(self) -> None:
        self.client.close()

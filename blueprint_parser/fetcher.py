"""
Document source: downloads listing and detail pages from the blueprint site.

The only asynchronous part of the package.  A non-success status or a
transport error becomes FetchError; nothing is retried here.
"""

from typing import Optional
from urllib.parse import urlencode

import httpx

from .config import DEFAULT_BASE_URL, DEFAULT_REQUEST_TIMEOUT
from .exceptions import FetchError, InvalidRequestError
from .schemas import BlueprintSearchParams
from .logger import get_module_logger

logger = get_module_logger("fetcher")

USER_AGENT = "blueprint-parser/0.1 (+https://www.dysonsphereblueprints.com)"


def build_search_url(params: BlueprintSearchParams, base_url: str = DEFAULT_BASE_URL) -> str:
    """
    URL of the listing page for a search.

    The site's search form always submits every field, so the unused ones are
    sent empty with the form's defaults.
    """
    query = urlencode({
        "search": params.search,
        "tags": " ".join(params.tags),
        "author": params.author,
        "max_structures": "",
        "color": "",
        "color_similarity": "80",
        "order": "recent",
        "commit": "Search",
    })
    return f"{base_url}/blueprints?{query}"


def build_details_url(path: str, base_url: str = DEFAULT_BASE_URL) -> str:
    """
    URL of a detail page from its site-relative path (e.g. /blueprints/slug).

    Only paths on the blueprint site are accepted: absolute URLs and
    protocol-relative "//host" paths are rejected.
    """
    path = path.strip()
    if not path.startswith("/") or path.startswith("//"):
        raise InvalidRequestError(
            f"Path must be relative to the site root: {path!r}",
            parameter="path"
        )
    return f"{base_url}{path}"


class BlueprintFetcher:
    """Async HTTP client for blueprint pages."""

    def __init__(
        self,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        client: Optional[httpx.AsyncClient] = None
    ):
        """
        Args:
            timeout: Request timeout in seconds (ignored with an injected client)
            client: Shared client to use instead of one per request
                    (tests pass one built on httpx.MockTransport)
        """
        self.timeout = timeout
        self.client = client

    async def fetch(self, url: str) -> str:
        """
        Download a page and return its body text.

        Raises:
            FetchError: non-success status or transport failure
        """
        logger.info(f"Fetching {url}")

        try:
            if self.client is not None:
                response = await self.client.get(url, headers={"User-Agent": USER_AGENT})
            else:
                async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
                    response = await client.get(url, headers={"User-Agent": USER_AGENT})
        except httpx.HTTPError as e:
            logger.error(f"Request failed for {url}: {e}")
            raise FetchError(f"Request failed: {e}", url=url, details={"error": str(e)})

        if not response.is_success:
            logger.error(f"Request failed for {url}: {response.status_code} {response.reason_phrase}")
            raise FetchError(
                f"Request failed: {response.status_code} {response.reason_phrase}",
                url=url,
                status_code=response.status_code
            )

        html = response.text
        logger.debug(f"Loaded {len(html)} chars from {url}")
        return html

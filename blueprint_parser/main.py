"""
Main orchestrator for the blueprint parser.

Wires the stages together for one query:
    cache lookup → fetch page (async) → extract records → cache store

The extraction stage never sees the cache or the network; it is only
called on a cache miss, with the page text.
"""

from typing import Optional

from .cache import ResultCache, details_cache_key, get_default_cache, search_cache_key
from .config import AppConfig, get_app_config
from .extractor import BlueprintExtractor
from .fetcher import BlueprintFetcher, build_details_url, build_search_url
from .exceptions import InvalidRequestError
from .schemas import Blueprint, BlueprintDetails, BlueprintSearchParams
from .logger import get_module_logger

logger = get_module_logger("main")


class BlueprintService:
    """
    Cached access to blueprint search results and detail pages.

    Stages:
    1. ResultCache: returns a previous result while it is fresh
    2. BlueprintFetcher: downloads the page (FetchError propagates)
    3. BlueprintExtractor: turns the page into records
    """

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        fetcher: Optional[BlueprintFetcher] = None,
        extractor: Optional[BlueprintExtractor] = None,
        cache: Optional[ResultCache] = None
    ):
        self.config = config or get_app_config()
        self.fetcher = fetcher or BlueprintFetcher(timeout=self.config.request_timeout)
        self.extractor = extractor or BlueprintExtractor()
        self.cache = cache if cache is not None else get_default_cache()

        logger.info(f"BlueprintService initialized (cache ttl {self.config.cache_ttl_ms} ms)")

    async def search(self, params: BlueprintSearchParams) -> list[Blueprint]:
        """
        Search blueprints on the listing page.

        Args:
            params: Search text (required), tags and author

        Returns:
            Blueprints in page order

        Raises:
            InvalidRequestError: empty search text
            FetchError: the listing page could not be downloaded
        """
        if not params.search:
            raise InvalidRequestError("Query parameter 'search' is required.", parameter="search")

        key = search_cache_key(params)
        cached = self.cache.get(key)
        if cached is not None:
            logger.info(f"Cache hit: {key}")
            return cached

        html = await self.fetcher.fetch(build_search_url(params, self.config.base_url))
        blueprints = self.extractor.parse_listing(html)

        self.cache.put(key, blueprints, self.config.cache_ttl_ms)
        return blueprints

    async def fetch_details(self, path: str, include_blueprint: bool = False) -> BlueprintDetails:
        """
        Fetch and parse one blueprint detail page.

        Args:
            path: Site-relative path of the blueprint, e.g. /blueprints/slug
            include_blueprint: Also return the raw blueprint string

        Returns:
            BlueprintDetails

        Raises:
            InvalidRequestError: empty or non-relative path
            FetchError: the detail page could not be downloaded
        """
        path = (path or "").strip()
        if not path:
            raise InvalidRequestError("Query parameter 'path' is required.", parameter="path")
        url = build_details_url(path, self.config.base_url)

        key = details_cache_key(path, include_blueprint)
        cached = self.cache.get(key)
        if cached is not None:
            logger.info(f"Cache hit: {key}")
            return cached

        html = await self.fetcher.fetch(url)
        details = self.extractor.parse_detail(html, include_blueprint=include_blueprint)

        self.cache.put(key, details, self.config.cache_ttl_ms)
        return details


async def search_blueprints(params: BlueprintSearchParams) -> list[Blueprint]:
    """Convenience function to search blueprints."""
    return await BlueprintService().search(params)


async def fetch_blueprint_details(path: str, include_blueprint: bool = False) -> BlueprintDetails:
    """Convenience function to fetch a blueprint detail page."""
    return await BlueprintService().fetch_details(path, include_blueprint)

"""
Blueprint Parser

Extracts blueprint records from dysonsphereblueprints.com pages by scanning
the raw HTML text, without building a DOM.
- Markup: entity decoding, whitespace normalization, section splitting,
  balanced-region location
- Extractor: field extractors and the listing / detail record assemblers
- Service: cache → fetch → extract, plus an HTTP API (server.py)

Public API surface:
  Extraction      — parse_listing, parse_detail, BlueprintExtractor
  Layout          — MarkupLayout, FieldRule, DEFAULT_LAYOUT
  Data models     — Blueprint, BlueprintDetails, BlueprintRequirement,
                    BlueprintRequirementRecipe, BlueprintSearchParams
  Service         — BlueprintService, BlueprintFetcher, ResultCache
  Error types     — FetchError (fatal), InvalidRequestError (rejected)
"""

# --- Extraction engine (pure, synchronous) ---
from .extractor import BlueprintExtractor, parse_listing, parse_detail
from .layout import MarkupLayout, FieldRule, DEFAULT_LAYOUT

# --- Data models ---
from .schemas import (
    Blueprint,
    BlueprintDetails,
    BlueprintRequirement,
    BlueprintRequirementRecipe,
    BlueprintSearchParams,
)

# --- Service layer (async fetch + cache) ---
from .main import BlueprintService
from .fetcher import BlueprintFetcher
from .cache import ResultCache, get_default_cache
from .config import AppConfig, get_app_config

# --- Exceptions ---
from .exceptions import BlueprintParserError, FetchError, InvalidRequestError

__version__ = "0.1.0"
__all__ = [
    "BlueprintExtractor",
    "parse_listing",
    "parse_detail",
    "MarkupLayout",
    "FieldRule",
    "DEFAULT_LAYOUT",
    "Blueprint",
    "BlueprintDetails",
    "BlueprintRequirement",
    "BlueprintRequirementRecipe",
    "BlueprintSearchParams",
    "BlueprintService",
    "BlueprintFetcher",
    "ResultCache",
    "get_default_cache",
    "AppConfig",
    "get_app_config",
    "BlueprintParserError",
    "FetchError",
    "InvalidRequestError",
]

"""
Pydantic schemas for the records extracted from blueprint pages.

Blueprint:        one card of the search listing page
BlueprintDetails: one blueprint detail page, with its requirements tree

Field names match the JSON the HTTP API returns, so the models are
serialized as-is with model_dump().

Data flow:
  search params → fetcher → listing HTML → parse_listing → list[Blueprint]
  detail path   → fetcher → detail HTML  → parse_detail  → BlueprintDetails
"""

from pydantic import BaseModel, ConfigDict, Field


# --- Caller input ---

class BlueprintSearchParams(BaseModel):
    """Query for the listing page."""
    model_config = ConfigDict(frozen=True)

    search: str
    tags: list[str] = Field(default_factory=list)
    author: str = ""


# --- Listing page output ---

class Blueprint(BaseModel):
    """A blueprint card from the listing page. Identity is `id`."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1, description="Numeric blueprint id, as text")
    name: str = ""
    author: str = ""
    tags: list[str] = Field(default_factory=list)
    url: str = Field(default="", description="Link to the detail page, as written in the card")


# --- Detail page output ---

class BlueprintRequirementRecipe(BaseModel):
    """A quantified recipe under a requirement."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    count: int = Field(default=0, ge=0)


class BlueprintRequirement(BaseModel):
    """A component the blueprint needs, with the recipes that produce it."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    count: int = Field(default=0, ge=0)
    recipes: list[BlueprintRequirementRecipe] = Field(default_factory=list)


class BlueprintDetails(BaseModel):
    """Everything extracted from one detail page."""
    model_config = ConfigDict(frozen=True)

    # Raw blueprint string; only filled when the caller asks for it
    blueprint: str = ""
    requirements: list[BlueprintRequirement] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    description: str = ""


class ErrorResponse(BaseModel):
    """Body of a 4xx/5xx answer from the HTTP API."""
    error: str

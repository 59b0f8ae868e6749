"""
Rule-based record extraction for blueprint pages.

Listing page:  split into cards → per-card field extractors → list[Blueprint]
Detail page:   four independent sub-extractions (raw blueprint, requirements
               tree, tags, description) → BlueprintDetails

All markers come from the layout table (layout.py).  Field extractors are
pure functions of one bounded section; a missing field gives "", [] or 0,
never an exception.  Cards without an id and requirements without a name are
dropped, everything else degrades to empty fields.
"""

import re
from functools import lru_cache
from typing import Optional

from .layout import DEFAULT_LAYOUT, FieldRule, MarkupLayout
from .markup import (
    decode_entities,
    extract_quantity,
    locate_balanced_region,
    normalize_text,
    split_sections,
    strip_tags,
)
from .schemas import Blueprint, BlueprintDetails, BlueprintRequirement, BlueprintRequirementRecipe
from .logger import get_module_logger

logger = get_module_logger("extractor")

# First anchor of a region: group 1 = attributes, group 2 = inner markup
ANCHOR_PATTERN = re.compile(r"<a\b([^>]*)>(.*?)</a>", re.DOTALL)


# --- Pattern builders (compiled once per layout value) ---

@lru_cache(maxsize=64)
def _attribute_pattern(attribute: str, value_pattern: str = r'[^"]*') -> re.Pattern:
    """attribute="value" with the value in group 1."""
    return re.compile(rf'(?<![\w-]){re.escape(attribute)}\s*=\s*"({value_pattern})"')


@lru_cache(maxsize=64)
def _cue_anchor_pattern(cue: str, open_tag: str, close_tag: str) -> re.Pattern:
    """Inner markup of the first tag right after a textual cue, e.g. 'by <a>'."""
    return re.compile(
        rf"(?<!\w){re.escape(cue)}\s*{re.escape(open_tag)}\b[^>]*>(.*?){re.escape(close_tag)}",
        re.DOTALL
    )


@lru_cache(maxsize=64)
def _item_pattern(marker: str, close_tag: str) -> re.Pattern:
    """Inner markup of every item opening with marker."""
    return re.compile(rf"{re.escape(marker)}[^>]*>(.*?){re.escape(close_tag)}", re.DOTALL)


def _region(section: str, rule: FieldRule) -> Optional[str]:
    return locate_balanced_region(section, rule.marker, rule.nested_tag, rule.close_tag)


# --- Field extractors ---

def extract_id(card: str, layout: MarkupLayout = DEFAULT_LAYOUT) -> str:
    """Numeric id attribute of a card, or ""."""
    match = _attribute_pattern(layout.card_id.attribute, r"\d+").search(card)
    return match.group(1) if match else ""


def _title_anchor(card: str, layout: MarkupLayout) -> Optional[re.Match]:
    title = _region(card, layout.card_title)
    if title is None:
        return None
    return ANCHOR_PATTERN.search(title)


def extract_name(card: str, layout: MarkupLayout = DEFAULT_LAYOUT) -> str:
    """Text of the anchor inside the card title."""
    anchor = _title_anchor(card, layout)
    return strip_tags(anchor.group(2)) if anchor else ""


def extract_url(card: str, layout: MarkupLayout = DEFAULT_LAYOUT) -> str:
    """href of the card title anchor, entities decoded."""
    anchor = _title_anchor(card, layout)
    if anchor is None:
        return ""
    match = _attribute_pattern(layout.card_link.attribute).search(anchor.group(1))
    return normalize_text(match.group(1)) if match else ""


def extract_author(card: str, layout: MarkupLayout = DEFAULT_LAYOUT) -> str:
    """Text of the first anchor after the "by" cue."""
    rule = layout.card_author
    match = _cue_anchor_pattern(rule.marker, rule.nested_tag, rule.close_tag).search(card)
    return strip_tags(match.group(1)) if match else ""


def extract_tags(card: str, layout: MarkupLayout = DEFAULT_LAYOUT) -> list[str]:
    """Text of every item in the card's tag list, blanks skipped."""
    tags_html = _region(card, layout.card_tags)
    if tags_html is None:
        logger.warning("No tag list in card")
        return []

    item = layout.card_tag_item
    tags = []
    for match in _item_pattern(item.marker, item.close_tag).finditer(tags_html):
        tag = strip_tags(match.group(1))
        if tag:
            tags.append(tag)

    if not tags:
        logger.warning("No tags found")
    return tags


def extract_tooltip(section: str, layout: MarkupLayout = DEFAULT_LAYOUT) -> str:
    """First tooltip attribute value in the section, normalized."""
    match = _attribute_pattern(layout.tooltip.attribute).search(section)
    return normalize_text(match.group(1)) if match else ""


def extract_tooltips(section: str, layout: MarkupLayout = DEFAULT_LAYOUT) -> list[str]:
    """Every non-empty tooltip attribute value in the section, in order."""
    values = []
    for match in _attribute_pattern(layout.tooltip.attribute).finditer(section):
        value = normalize_text(match.group(1))
        if value:
            values.append(value)
    return values


def extract_count(section: str, tally: FieldRule) -> int:
    """Quantity from the tally container's text; 0 if missing or digit-free."""
    tally_html = _region(section, tally)
    if tally_html is None:
        return 0
    return extract_quantity(tally_html)


# --- Detail sub-extractions ---

def _parse_recipes(entry: str, layout: MarkupLayout) -> list[BlueprintRequirementRecipe]:
    recipes_html = _region(entry, layout.recipes)
    if recipes_html is None:
        return []

    recipes = []
    for section in split_sections(recipes_html, layout.recipe_entry.marker):
        name = extract_tooltip(section, layout)
        count = extract_count(section, layout.recipe_tally)
        # Nameless or zero-count recipes carry no information
        if not name or count == 0:
            logger.debug(f"Skipping recipe (name={name!r}, count={count})")
            continue
        recipes.append(BlueprintRequirementRecipe(name=name, count=count))
    return recipes


def parse_requirement(entry: str, layout: MarkupLayout = DEFAULT_LAYOUT) -> Optional[BlueprintRequirement]:
    """
    Parse one requirement entry (with its recipes sub-list).

    Name and count are read only from the part before the recipes list, so
    the recipes' own tooltips and tallies cannot leak into the requirement.
    A requirement without a name is dropped along with its recipes.
    """
    recipes_at = entry.find(layout.recipes.marker)
    head = entry if recipes_at == -1 else entry[:recipes_at]

    name = extract_tooltip(head, layout)
    count = extract_count(head, layout.requirement_tally)
    recipes = _parse_recipes(entry, layout)

    if not name:
        logger.warning(f"Requirement without name dropped ({len(recipes)} recipes lost)")
        return None

    return BlueprintRequirement(name=name, count=count, recipes=recipes)


def _extract_requirements(document: str, layout: MarkupLayout) -> list[BlueprintRequirement]:
    requirements_html = _region(document, layout.requirements)
    if requirements_html is None:
        logger.warning("Requirements list not found")
        return []

    requirements = []
    for entry in split_sections(requirements_html, layout.requirement_entry.marker):
        requirement = parse_requirement(entry, layout)
        if requirement is not None:
            requirements.append(requirement)
    return requirements


def _extract_detail_tags(document: str, layout: MarkupLayout) -> list[str]:
    tags_html = _region(document, layout.tags)
    if tags_html is None:
        logger.warning("Tag container not found")
        return []
    return extract_tooltips(tags_html, layout)


def _extract_description(document: str, layout: MarkupLayout) -> str:
    outer = _region(document, layout.description)
    if outer is None:
        logger.warning("Description container not found")
        return ""
    body = _region(outer, layout.description_body)
    if body is None:
        logger.warning("Description body not found")
        return ""
    return strip_tags(body)


def _extract_blueprint_data(document: str, layout: MarkupLayout) -> str:
    data = _region(document, layout.blueprint_data)
    if data is None:
        logger.warning("Blueprint data not found")
        return ""
    # Payload is opaque: decode but keep inner whitespace as-is
    return decode_entities(data).strip()


# --- Record assemblers ---

class BlueprintExtractor:
    """Extracts blueprint records from listing and detail pages."""

    def __init__(self, layout: MarkupLayout = DEFAULT_LAYOUT):
        self.layout = layout

    def parse_card(self, card: str) -> Optional[Blueprint]:
        """Build a Blueprint from one card, or None when the id is missing."""
        blueprint_id = extract_id(card, self.layout)
        if not blueprint_id:
            logger.warning("Card without blueprint id skipped")
            return None

        return Blueprint(
            id=blueprint_id,
            name=extract_name(card, self.layout),
            author=extract_author(card, self.layout),
            tags=extract_tags(card, self.layout),
            url=extract_url(card, self.layout),
        )

    def parse_listing(self, document: str) -> list[Blueprint]:
        """
        Extract every blueprint card from a listing page.

        Args:
            document: Raw listing page HTML

        Returns:
            Blueprints in page order; cards without an id are left out
        """
        cards = split_sections(document, self.layout.card.marker)
        if not cards:
            logger.warning("No blueprint cards found")
            return []

        blueprints = []
        for card in cards:
            blueprint = self.parse_card(card)
            if blueprint is not None:
                blueprints.append(blueprint)

        logger.info(f"Parsed {len(blueprints)} blueprints from {len(cards)} cards")
        return blueprints

    def parse_detail(self, document: str, include_blueprint: bool = False) -> BlueprintDetails:
        """
        Extract a blueprint detail page.

        The four fields are extracted independently; one missing section
        leaves only its own field empty.

        Args:
            document: Raw detail page HTML
            include_blueprint: Also extract the raw blueprint string (large)

        Returns:
            BlueprintDetails
        """
        blueprint = _extract_blueprint_data(document, self.layout) if include_blueprint else ""
        requirements = _extract_requirements(document, self.layout)
        tags = _extract_detail_tags(document, self.layout)
        description = _extract_description(document, self.layout)

        logger.info(
            f"Parsed details: {len(requirements)} requirements, {len(tags)} tags, "
            f"description {len(description)} chars"
        )
        return BlueprintDetails(
            blueprint=blueprint,
            requirements=requirements,
            tags=tags,
            description=description,
        )


def parse_listing(document: str, layout: MarkupLayout = DEFAULT_LAYOUT) -> list[Blueprint]:
    """Convenience function to parse a listing page."""
    return BlueprintExtractor(layout).parse_listing(document)


def parse_detail(
    document: str,
    include_blueprint: bool = False,
    layout: MarkupLayout = DEFAULT_LAYOUT
) -> BlueprintDetails:
    """Convenience function to parse a detail page."""
    return BlueprintExtractor(layout).parse_detail(document, include_blueprint)

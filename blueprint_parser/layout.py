"""
Markup layout table for dysonsphereblueprints.com pages.

Every marker, class name and attribute name the extractors depend on lives
here, one FieldRule per field.  The site's markup is unversioned and changes
without notice; when it does, this table is the only thing to update.

FieldRule columns:
  marker     - literal text that starts the field's container (usually the
               prefix of the opening tag, up to and including the class)
  nested_tag - opening prefix of the tag family that can nest inside the
               container (e.g. "<ul" for a list of lists)
  close_tag  - closing tag of that family
  attribute  - attribute name carrying the value, for attribute-based fields
"""

from pydantic import BaseModel, ConfigDict


class FieldRule(BaseModel):
    """One row of the layout table."""
    model_config = ConfigDict(frozen=True)

    marker: str = ""
    nested_tag: str = ""
    close_tag: str = ""
    attribute: str = ""


class MarkupLayout(BaseModel):
    """The full set of rules for the listing and detail pages."""
    model_config = ConfigDict(frozen=True)

    # --- Listing page: one <li> card per blueprint ---
    card: FieldRule
    card_id: FieldRule
    card_title: FieldRule
    card_link: FieldRule
    card_author: FieldRule
    card_tags: FieldRule
    card_tag_item: FieldRule

    # --- Detail page ---
    blueprint_data: FieldRule
    requirements: FieldRule
    requirement_entry: FieldRule
    requirement_tally: FieldRule
    recipes: FieldRule
    recipe_entry: FieldRule
    recipe_tally: FieldRule
    tags: FieldRule
    tooltip: FieldRule
    description: FieldRule
    description_body: FieldRule


DEFAULT_LAYOUT = MarkupLayout(
    card=FieldRule(marker='<li class="o-blueprint-card factory"'),
    card_id=FieldRule(attribute="data-blueprint-id"),
    # Title is the anchor inside the card's <h2>
    card_title=FieldRule(marker="<h2", nested_tag="<h2", close_tag="</h2>"),
    card_link=FieldRule(marker="<a", close_tag="</a>", attribute="href"),
    # Author is the first anchor after the "by" cue
    card_author=FieldRule(marker="by", nested_tag="<a", close_tag="</a>"),
    card_tags=FieldRule(marker='<ul class="o-blueprint-card__tags"', nested_tag="<ul", close_tag="</ul>"),
    card_tag_item=FieldRule(marker='<li class="o-blueprint-card__tags-tag', close_tag="</li>"),

    blueprint_data=FieldRule(marker='<textarea id="blueprint-data"', nested_tag="<textarea",
                             close_tag="</textarea>"),
    requirements=FieldRule(marker='<ul class="t-blueprint__requirements"', nested_tag="<ul", close_tag="</ul>"),
    requirement_entry=FieldRule(marker='<li class="t-blueprint__requirements-component"'),
    requirement_tally=FieldRule(marker='<div class="t-blueprint__requirements-component-tally"',
                                nested_tag="<div", close_tag="</div>"),
    recipes=FieldRule(marker='<ul class="t-blueprint__requirements-recipes"', nested_tag="<ul", close_tag="</ul>"),
    recipe_entry=FieldRule(marker='<li class="t-blueprint__requirements-recipe"'),
    recipe_tally=FieldRule(marker='<div class="t-blueprint__requirements-recipe-tally"',
                           nested_tag="<div", close_tag="</div>"),
    tags=FieldRule(marker='<div class="t-blueprint__tags"', nested_tag="<div", close_tag="</div>"),
    tooltip=FieldRule(attribute="data-tippy-content"),
    description=FieldRule(marker='<div class="t-blueprint__description"', nested_tag="<div", close_tag="</div>"),
    # First generic container one level inside the description
    description_body=FieldRule(marker="<div", nested_tag="<div", close_tag="</div>"),
)

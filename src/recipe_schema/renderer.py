"""Schema.org structured data renderer (microdata + JSON-LD)"""

import json
import logging
from typing import Any, Dict, List, Optional

from bs4 import BeautifulSoup, Tag
from pydantic import BaseModel

from config.settings import Settings, settings as default_settings
from recipe_schema.duration import format_duration
from recipe_schema.models import ExternalContext, Person, RecipeDocument

logger = logging.getLogger(__name__)

# Output order of Recipe properties in both formats
PROPERTY_ORDER = [
    "name",
    "description",
    "image",
    "url",
    "author",
    "datePublished",
    "prepTime",
    "cookTime",
    "totalTime",
    "recipeYield",
    "recipeCategory",
    "recipeCuisine",
    "cookingMethod",
    "keywords",
    "suitableForDiet",
    "recipeIngredient",
    "recipeInstructions",
    "nutrition",
    "video",
    "tool",
    "supply",
    "estimatedCost",
    "aggregateRating",
]

# Microdata keeps empty nodes for these so crawlers see a stable structure
PLACEHOLDER_PROPERTIES = {
    "description",
    "prepTime",
    "cookTime",
    "totalTime",
    "recipeYield",
    "recipeCategory",
    "recipeCuisine",
    "cookingMethod",
    "keywords",
}

URL_PROPERTIES = {"url", "image", "thumbnailUrl", "contentUrl", "embedUrl"}


class RenderedRecipe(BaseModel):
    """Microdata fragment and JSON-LD object describing the same recipe"""
    microdata: str
    jsonld: Dict[str, Any]

    def jsonld_script(self, indent: Optional[int] = None) -> str:
        encoded = json.dumps(self.jsonld, ensure_ascii=False, indent=indent)
        # A literal </script> inside a value would end the element early
        encoded = encoded.replace("</", "<\\/")
        return f'<script type="application/ld+json">{encoded}</script>'

    def to_html(self, indent: Optional[int] = None) -> str:
        return f"{self.microdata}\n{self.jsonld_script(indent)}"


def _number(value: float) -> Any:
    """Emit integral numbers as ints so both formats print the same text"""
    if float(value).is_integer():
        return int(value)
    return value


def resolve_author(document: RecipeDocument, context: ExternalContext) -> Optional[Person]:
    if document.author is not None and document.author.name:
        return document.author
    if context.author_name:
        return Person(name=context.author_name, url=context.author_url or "")
    return None


def resolve_date_published(document: RecipeDocument, context: ExternalContext) -> str:
    return document.date_published or context.fallback_publish_date


def resolve_images(document: RecipeDocument, context: ExternalContext) -> List[str]:
    images = [image.url for image in document.images if image.url]
    return images or list(context.featured_images)


def resolve_aggregate_rating(context: ExternalContext) -> Optional[Dict[str, Any]]:
    if not context.has_valid_rating():
        logger.debug(
            f"Omitting aggregate rating (value={context.rating_value}, reviews={context.review_count})"
        )
        return None
    return {
        "@type": "AggregateRating",
        "ratingValue": _number(context.rating_value),
        "reviewCount": int(context.review_count),
    }


def build_steps(instructions: List[str]) -> List[Dict[str, Any]]:
    """Number instructions as HowToStep objects, Step 1 first"""
    return [
        {"@type": "HowToStep", "name": f"Step {position}", "text": text, "position": position}
        for position, text in enumerate(instructions, 1)
    ]


def resolve_properties(document: RecipeDocument, context: ExternalContext) -> Dict[str, Any]:
    """
    Resolve every populated Recipe property, keyed by Schema.org name

    This is the single source both output formats are generated from.
    Identity defaults are left out, except the recipe name which is
    always present.

    Args:
        document: Recipe document
        context: Host-supplied author, rating and date values

    Returns:
        Ordered dict of Schema.org properties
    """
    properties: Dict[str, Any] = {"name": document.recipe_name}

    if document.description:
        properties["description"] = document.description

    images = resolve_images(document, context)
    if images:
        properties["image"] = images

    if context.post_url:
        properties["url"] = context.post_url

    author = resolve_author(document, context)
    if author is not None:
        properties["author"] = {"@type": "Person", "name": author.name}
        if author.url:
            properties["author"]["url"] = author.url

    date_published = resolve_date_published(document, context)
    if date_published:
        properties["datePublished"] = date_published

    for key, duration in (
        ("prepTime", document.prep_time),
        ("cookTime", document.cook_time),
        ("totalTime", document.total_time),
    ):
        if not duration.is_zero():
            properties[key] = format_duration(duration)

    if document.recipe_yield:
        properties["recipeYield"] = document.recipe_yield
    if document.recipe_category:
        properties["recipeCategory"] = list(document.recipe_category)
    if document.recipe_cuisine:
        properties["recipeCuisine"] = document.recipe_cuisine
    if document.cooking_method:
        properties["cookingMethod"] = document.cooking_method
    if document.keywords:
        properties["keywords"] = ", ".join(document.keywords)
    if document.suitable_for_diet:
        properties["suitableForDiet"] = list(document.suitable_for_diet)
    if document.recipe_ingredient:
        properties["recipeIngredient"] = list(document.recipe_ingredient)
    if document.recipe_instructions:
        properties["recipeInstructions"] = build_steps(document.recipe_instructions)

    nutrients = document.nutrition.populated()
    if nutrients:
        properties["nutrition"] = {"@type": "NutritionInformation", **nutrients}

    if document.video is not None:
        video = {
            key: value
            for key, value in document.video.model_dump(by_alias=True).items()
            if value
        }
        if video:
            properties["video"] = {"@type": "VideoObject", **video}

    if document.tool:
        properties["tool"] = list(document.tool)
    if document.supply:
        properties["supply"] = list(document.supply)
    if document.estimated_cost:
        properties["estimatedCost"] = document.estimated_cost

    rating = resolve_aggregate_rating(context)
    if rating is not None:
        properties["aggregateRating"] = rating

    return {key: properties[key] for key in PROPERTY_ORDER if key in properties}


class MicrodataBuilder:
    """Builds nested itemscope/itemprop markup from resolved properties"""

    def __init__(self, schema_context: str):
        self.schema_context = schema_context
        self.soup = BeautifulSoup("", "html.parser")

    def item_type(self, type_name: str) -> str:
        return f"{self.schema_context}/{type_name}"

    def scope(self, type_name: str, itemprop: Optional[str] = None, **attrs) -> Tag:
        scope_attrs = dict(attrs)
        if itemprop:
            scope_attrs["itemprop"] = itemprop
        scope_attrs["itemscope"] = ""
        scope_attrs["itemtype"] = self.item_type(type_name)
        return self.soup.new_tag("div", attrs=scope_attrs)

    def value(self, itemprop: str, value: Any) -> Tag:
        if itemprop in URL_PROPERTIES and value:
            return self.soup.new_tag("link", attrs={"itemprop": itemprop, "href": str(value)})
        return self.soup.new_tag("meta", attrs={"itemprop": itemprop, "content": str(value)})

    def append_property(self, parent: Tag, itemprop: str, value: Any) -> None:
        if isinstance(value, list):
            for item in value:
                self.append_property(parent, itemprop, item)
        elif isinstance(value, dict):
            child = self.scope(value["@type"], itemprop=itemprop)
            for key, nested in value.items():
                if key != "@type":
                    self.append_property(child, key, nested)
            parent.append(child)
        else:
            parent.append(self.value(itemprop, value))


def render_microdata(properties: Dict[str, Any], settings: Settings) -> str:
    builder = MicrodataBuilder(settings.schema_context)
    root = builder.scope(
        "Recipe",
        **{"class": settings.microdata_container_class, "data-structured-data": "recipe"},
    )

    for key in PROPERTY_ORDER:
        if key in properties:
            builder.append_property(root, key, properties[key])
        elif settings.emit_microdata_placeholders and key in PLACEHOLDER_PROPERTIES:
            root.append(builder.value(key, ""))

    return str(root)


def render_jsonld(properties: Dict[str, Any], settings: Settings) -> Dict[str, Any]:
    return {"@context": settings.schema_context, "@type": "Recipe", **properties}


def render(
    document: RecipeDocument,
    context: Optional[ExternalContext] = None,
    settings: Optional[Settings] = None,
) -> RenderedRecipe:
    """
    Render a recipe document as microdata and JSON-LD

    Both outputs are generated from the same resolved properties and
    therefore describe the same logical document. The document is not
    modified.

    Args:
        document: Recipe document to render
        context: Host-supplied author, rating and fallback date
        settings: Output settings (defaults to the global settings)

    Returns:
        RenderedRecipe with the microdata fragment and JSON-LD object
    """
    if context is None:
        context = ExternalContext()
    if settings is None:
        settings = default_settings

    properties = resolve_properties(document, context)
    logger.debug(f"Rendering recipe '{document.recipe_name}' with {len(properties)} properties")

    return RenderedRecipe(
        microdata=render_microdata(properties, settings),
        jsonld=render_jsonld(properties, settings),
    )

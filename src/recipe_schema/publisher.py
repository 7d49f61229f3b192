"""Recipe publish handler: agent parameters in, recipe block out"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from config.settings import Settings
from recipe_schema.models import ExternalContext, NUTRIENT_KEYS, RecipeDocument
from recipe_schema.serializer import SerializationError, serialize_block
from utils.helpers import coerce_string_list, coerce_text, sanitize_text, sanitize_url

logger = logging.getLogger(__name__)

TEXT_PARAMETERS = [
    "recipeName",
    "prepTime",
    "cookTime",
    "totalTime",
    "recipeYield",
    "recipeCuisine",
    "cookingMethod",
    "estimatedCost",
    "datePublished",
]

LIST_PARAMETERS = [
    "recipeIngredient",
    "recipeInstructions",
    "recipeCategory",
    "keywords",
    "suitableForDiet",
    "tool",
    "supply",
]

VIDEO_URL_KEYS = {"thumbnailUrl", "contentUrl", "embedUrl"}


def _string_param(description: str) -> Dict[str, Any]:
    return {"type": "string", "description": description}


def _array_param(description: str) -> Dict[str, Any]:
    return {"type": "array", "items": {"type": "string"}, "description": description}


class RecipePublishHandler:
    """Turns a flat recipe parameter map into a persisted recipe block"""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.block_name = settings.block_name

    def get_tool_parameters(self) -> Dict[str, Dict[str, Any]]:
        """
        Describe the parameters an agent may supply

        Returns:
            Parameter name to JSON-schema-like definition
        """
        return {
            "recipeName": {"type": "string", "required": True, "description": "The name of the recipe"},
            "description": _string_param("A description of the recipe"),
            "images": {
                "type": "array",
                "items": {
                    "type": "object",
                    "properties": {"url": {"type": "string"}, "alt": {"type": "string"}},
                },
                "description": "Recipe images (the post's featured image is used when omitted)",
            },
            "prepTime": _string_param("Preparation time in ISO 8601 format (e.g., PT30M for 30 minutes)"),
            "cookTime": _string_param("Cooking time in ISO 8601 format (e.g., PT1H for 1 hour)"),
            "totalTime": _string_param("Total time in ISO 8601 format (prep + cook time)"),
            "recipeYield": _string_param('Number of servings or yield (e.g., "4 servings", "12 muffins")'),
            "recipeCategory": _array_param('Recipe categories (e.g., ["appetizer", "main course", "dessert"])'),
            "recipeCuisine": _string_param('The cuisine type (e.g., "Italian", "Mexican", "American")'),
            "cookingMethod": _string_param('Cooking method (e.g., "baking", "grilling", "frying")'),
            "recipeIngredient": _array_param('List of ingredients with quantities (e.g., ["2 cups flour", "1 tsp salt"])'),
            "recipeInstructions": _array_param("Step-by-step cooking instructions"),
            "keywords": _array_param("Keywords or tags for the recipe"),
            "suitableForDiet": _array_param('Dietary restrictions (e.g., ["vegetarian", "gluten-free"])'),
            "nutrition": {
                "type": "object",
                "properties": {key: {"type": "string"} for key in NUTRIENT_KEYS},
                "description": "Nutritional information per serving",
            },
            "video": {
                "type": "object",
                "properties": {
                    "name": _string_param("Video title"),
                    "description": _string_param("Video description"),
                    "thumbnailUrl": _string_param("Video thumbnail URL"),
                    "contentUrl": _string_param("Video URL"),
                    "embedUrl": _string_param("Embeddable player URL"),
                    "uploadDate": _string_param("Upload date in ISO 8601 format"),
                    "duration": _string_param("Video duration in ISO 8601 format"),
                },
                "description": "Recipe video information",
            },
            "tool": _array_param("Cooking tools or equipment needed"),
            "supply": _array_param("Supplies consumed during cooking (beyond ingredients)"),
            "estimatedCost": _string_param("Estimated cost to make the recipe"),
            "datePublished": _string_param("Publication date in ISO 8601 format (auto-generated if not provided)"),
        }

    def validate_parameters(self, parameters: Dict[str, Any]) -> tuple[bool, str]:
        """
        Check the parameters a host should insist on before publishing

        Args:
            parameters: Agent tool parameters

        Returns:
            Tuple of (is_valid, reason)
        """
        if not sanitize_text(parameters.get("recipeName")):
            return False, "Recipe title is required"

        if not any(item.strip() for item in coerce_string_list(parameters.get("recipeIngredient"))):
            return False, "Recipe is missing ingredients"

        if not any(item.strip() for item in coerce_string_list(parameters.get("recipeInstructions"))):
            return False, "Recipe is missing instructions"

        return True, "Recipe is valid"

    def _resolve_author(self, parameters: Dict[str, Any], context: ExternalContext) -> Optional[Dict[str, str]]:
        raw_author = parameters.get("author")
        if isinstance(raw_author, dict) and sanitize_text(raw_author.get("name")):
            return {"name": sanitize_text(raw_author.get("name")), "url": sanitize_url(raw_author.get("url"))}

        if context.author_name:
            return {"name": sanitize_text(context.author_name), "url": sanitize_url(context.author_url)}

        if self.settings.default_author_name:
            return {
                "name": sanitize_text(self.settings.default_author_name),
                "url": sanitize_url(self.settings.default_author_url),
            }

        return None

    def _resolve_date(self, parameters: Dict[str, Any], context: ExternalContext) -> str:
        return (
            sanitize_text(parameters.get("datePublished"))
            or context.fallback_publish_date
            or datetime.now(timezone.utc).isoformat(timespec="seconds")
        )

    def _clean_list(self, value: Any) -> List[str]:
        # Blank entries only make sense while editing
        return [text for text in (sanitize_text(item) for item in coerce_string_list(value)) if text]

    def _clean_images(self, value: Any) -> List[Dict[str, str]]:
        if not isinstance(value, list):
            return []
        images = []
        for image in value:
            if not isinstance(image, dict):
                continue
            url = sanitize_url(image.get("url"))
            if url:
                images.append({"url": url, "alt": sanitize_text(image.get("alt"))})
        return images

    def _clean_video(self, value: Any) -> Optional[Dict[str, str]]:
        if not isinstance(value, dict):
            return None
        video = {}
        for key in ("name", "description", "thumbnailUrl", "contentUrl", "embedUrl", "uploadDate", "duration"):
            if key in VIDEO_URL_KEYS:
                video[key] = sanitize_url(value.get(key))
            else:
                video[key] = sanitize_text(value.get(key))
        return video

    def build_document(
        self,
        parameters: Dict[str, Any],
        context: Optional[ExternalContext] = None,
    ) -> RecipeDocument:
        """
        Build a recipe document from a (possibly partial) parameter map

        Args:
            parameters: Agent tool parameters keyed by recipe field names
            context: Host author and publish date used as fallbacks

        Returns:
            RecipeDocument with sanitized values and defaults applied
        """
        context = context or ExternalContext()
        data: Dict[str, Any] = {key: sanitize_text(parameters.get(key)) for key in TEXT_PARAMETERS}
        data["description"] = coerce_text(parameters.get("description")).strip()

        for key in LIST_PARAMETERS:
            data[key] = self._clean_list(parameters.get(key))

        data["images"] = self._clean_images(parameters.get("images"))
        data["author"] = self._resolve_author(parameters, context)
        data["datePublished"] = self._resolve_date(parameters, context)

        nutrition = parameters.get("nutrition")
        if isinstance(nutrition, dict):
            data["nutrition"] = {key: sanitize_text(value) for key, value in nutrition.items()}

        data["video"] = self._clean_video(parameters.get("video"))

        unknown = set(parameters) - set(data) - {"nutrition"}
        if unknown:
            logger.debug(f"Ignoring unknown recipe parameters: {sorted(unknown)}")

        document = RecipeDocument.model_validate(data)
        logger.info(f"Built recipe document: {document.recipe_name or '(untitled)'}")
        return document

    def create_recipe_block(
        self,
        parameters: Dict[str, Any],
        context: Optional[ExternalContext] = None,
    ) -> str:
        """
        Build the persisted block for a recipe

        Args:
            parameters: Agent tool parameters
            context: Host author and publish date

        Returns:
            Block markup carrying the serialized recipe payload

        Raises:
            SerializationError: If the recipe cannot be encoded; the host
                should abort the publish instead of saving a broken document
        """
        try:
            document = self.build_document(parameters, context)
            block = serialize_block(document, self.block_name)
        except (SerializationError, ValidationError) as e:
            logger.error(f"Failed to create recipe block: {e}")
            raise SerializationError(f"Failed to create recipe block: {e}") from e

        logger.info(f"Created {self.block_name} block for recipe: {document.recipe_name}")
        return block

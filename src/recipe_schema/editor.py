"""Editing session for a single recipe document"""

import logging
from typing import Any, Dict, List, Optional

from recipe_schema.models import CUISINE_OPTIONS, NutritionInformation, RecipeDocument
from recipe_schema.serializer import deserialize, encode_payload, serialize
from recipe_schema.widgets import DurationField, FieldWidget, ListField, TagField

logger = logging.getLogger(__name__)


class EditorSession:
    """
    One actor editing one recipe

    The session owns its document; every change goes through the widgets
    or the nested-field helpers and is applied before the next one.
    """

    def __init__(self, payload: Optional[Dict[str, Any]] = None):
        self.document = deserialize(payload) if payload is not None else RecipeDocument()
        self.widgets: Dict[str, FieldWidget] = self._build_widgets()
        logger.debug(f"Editor session opened for '{self.document.recipe_name}'")

    def _build_widgets(self) -> Dict[str, FieldWidget]:
        document = self.document
        return {
            "prepTime": DurationField(document, "prepTime", "Prep Time"),
            "cookTime": DurationField(document, "cookTime", "Cook Time"),
            "totalTime": DurationField(document, "totalTime", "Total Time"),
            "recipeCategory": TagField(document, "recipeCategory", "Recipe Categories"),
            "recipeIngredient": ListField(
                document, "recipeIngredient", "Recipe Ingredients",
                placeholder="e.g., 1 cup flour, 2 eggs, 1/2 cup sugar",
            ),
            "recipeInstructions": ListField(
                document, "recipeInstructions", "Recipe Instructions",
                placeholder="Enter each step of the recipe",
            ),
            "keywords": TagField(document, "keywords", "Keywords/Tags"),
            "suitableForDiet": TagField(document, "suitableForDiet", "Suitable for Diet"),
            "tool": ListField(document, "tool", "Tools/Equipment", placeholder="e.g., mixing bowl, whisk, oven"),
            "supply": ListField(document, "supply", "Supplies", placeholder="e.g., parchment paper"),
        }

    def widget(self, field_name: str) -> FieldWidget:
        return self.widgets[field_name]

    def set_text(self, field_name: str, value: Any) -> None:
        """Plain text inputs (name, description, yield, cuisine, ...)"""
        self.document.set_field(field_name, value)

    def update_nutrition(self, name: str, value: Any) -> NutritionInformation:
        return self.document.update_nutrition(name, value)

    def cuisine_options(self) -> List[Dict[str, str]]:
        options = [{"label": "Select Cuisine", "value": ""}]
        options.extend({"label": cuisine, "value": cuisine} for cuisine in CUISINE_OPTIONS)
        return options

    def render(self) -> Dict[str, Dict[str, Any]]:
        return {name: widget.render() for name, widget in self.widgets.items()}

    def save(self) -> Dict[str, Any]:
        """
        Freeze the document into its attribute payload

        Returns:
            Payload dict, already checked to be storable

        Raises:
            SerializationError: If the document cannot be encoded
        """
        payload = serialize(self.document)
        encode_payload(payload)
        logger.info(f"Saved recipe '{self.document.recipe_name}'")
        return payload

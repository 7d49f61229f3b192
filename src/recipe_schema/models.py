"""Data models for Schema.org recipe documents"""

import logging
import math
from typing import Annotated, Any, Dict, List, Optional

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    PlainSerializer,
    field_serializer,
    field_validator,
)
from pydantic.alias_generators import to_camel

from recipe_schema.duration import Duration, ZERO_DURATION, coerce_duration, format_duration
from utils.helpers import coerce_string_list, coerce_text, unique_tags

logger = logging.getLogger(__name__)

CUISINE_OPTIONS = [
    "American",
    "Italian",
    "Mexican",
    "Chinese",
    "Indian",
    "French",
    "Mediterranean",
    "Asian",
    "European",
    "Other",
]


def _coerce_tags(value: Any) -> List[str]:
    return unique_tags(coerce_string_list(value))


def _coerce_number(value: Any) -> float:
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return value
    try:
        return float(coerce_text(value) or 0)
    except ValueError:
        return 0


def _coerce_count(value: Any) -> int:
    number = _coerce_number(value)
    # Fractions truncate toward zero, non-finite values count as no reviews
    if not math.isfinite(number):
        return 0
    return max(0, int(number))


Text = Annotated[str, BeforeValidator(coerce_text)]
TextList = Annotated[List[str], BeforeValidator(coerce_string_list)]
TagSet = Annotated[List[str], BeforeValidator(_coerce_tags)]
IsoDuration = Annotated[
    Duration,
    BeforeValidator(coerce_duration),
    PlainSerializer(format_duration, return_type=str),
]
Number = Annotated[float, BeforeValidator(_coerce_number)]
Count = Annotated[int, BeforeValidator(_coerce_count)]


class SchemaModel(BaseModel):
    """Base for recipe models: camelCase aliases, coercion on assignment"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
        extra="ignore",
    )

    @classmethod
    def resolve_field(cls, name: str) -> Optional[str]:
        """Map an attribute name or camelCase alias to the attribute name"""
        fields = cls.model_fields
        if name in fields:
            return name
        for attr, info in fields.items():
            if info.alias == name:
                return attr
        return None

    def is_empty(self) -> bool:
        return self == type(self)()


class RecipeImage(SchemaModel):
    """Recipe image reference"""
    url: Text = ""
    alt: Text = ""


class Person(SchemaModel):
    """Recipe author"""
    name: Text = ""
    url: Text = ""


class NutritionInformation(SchemaModel):
    """Nutrition facts per serving, every value free text"""
    calories: Text = ""
    carbohydrate_content: Text = ""
    cholesterol_content: Text = ""
    fat_content: Text = ""
    fiber_content: Text = ""
    protein_content: Text = ""
    saturated_fat_content: Text = ""
    serving_size: Text = ""
    sodium_content: Text = ""
    sugar_content: Text = ""
    trans_fat_content: Text = ""
    unsaturated_fat_content: Text = ""

    def populated(self) -> Dict[str, str]:
        """Populated nutrients keyed by Schema.org property name"""
        return {
            info.alias: getattr(self, attr)
            for attr, info in type(self).model_fields.items()
            if getattr(self, attr)
        }


NUTRIENT_KEYS = [info.alias for info in NutritionInformation.model_fields.values()]


class VideoObject(SchemaModel):
    """Recipe video"""
    name: Text = ""
    description: Text = ""
    thumbnail_url: Text = ""
    content_url: Text = ""
    embed_url: Text = ""
    upload_date: Text = ""
    duration: IsoDuration = ZERO_DURATION


class RecipeDocument(SchemaModel):
    """Complete recipe document"""

    recipe_name: Text = ""
    description: Text = ""
    images: List[RecipeImage] = Field(default_factory=list)
    author: Optional[Person] = None
    prep_time: IsoDuration = ZERO_DURATION
    cook_time: IsoDuration = ZERO_DURATION
    total_time: IsoDuration = ZERO_DURATION
    recipe_yield: Text = ""
    recipe_ingredient: TextList = Field(default_factory=list)
    recipe_instructions: TextList = Field(default_factory=list)
    recipe_category: TagSet = Field(default_factory=list)
    recipe_cuisine: Text = ""
    cooking_method: Text = ""
    keywords: TagSet = Field(default_factory=list)
    suitable_for_diet: TagSet = Field(default_factory=list)
    nutrition: NutritionInformation = Field(default_factory=NutritionInformation)
    video: Optional[VideoObject] = None
    tool: TextList = Field(default_factory=list)
    supply: TextList = Field(default_factory=list)
    estimated_cost: Text = ""
    date_published: Text = ""

    @field_validator("images", mode="before")
    @classmethod
    def coerce_images(cls, value):
        if not isinstance(value, (list, tuple)):
            return []
        images = []
        for item in value:
            if isinstance(item, str):
                images.append({"url": item})
            elif isinstance(item, (dict, RecipeImage)):
                images.append(item)
        return images

    @field_validator("nutrition", mode="before")
    @classmethod
    def coerce_nutrition(cls, value):
        if isinstance(value, (dict, NutritionInformation)):
            return value
        return {}

    @field_validator("author", "video", mode="before")
    @classmethod
    def coerce_optional_object(cls, value):
        if isinstance(value, (dict, BaseModel)):
            return value
        return None

    @field_validator("author", "video")
    @classmethod
    def collapse_empty_object(cls, value):
        # A nested object with nothing in it is the same as no object
        if value is not None and value.is_empty():
            return None
        return value

    @field_serializer("nutrition")
    def serialize_nutrition(self, nutrition: NutritionInformation) -> Dict[str, str]:
        return nutrition.populated()

    def set_field(self, name: str, value: Any) -> None:
        """
        Assign a top-level field by attribute name or payload key

        Args:
            name: Attribute name (recipe_name) or alias (recipeName)
            value: New value, coerced on assignment
        """
        attr = self.resolve_field(name)
        if attr is None:
            logger.warning(f"Ignoring unknown recipe field: {name}")
            return
        setattr(self, attr, value)

    def get_field(self, name: str) -> Any:
        attr = self.resolve_field(name)
        if attr is None:
            raise KeyError(name)
        return getattr(self, attr)

    def update_nutrition(self, name: str, value: Any) -> NutritionInformation:
        """
        Replace one nutrient, producing an updated nutrition structure

        Args:
            name: Nutrient name (calories, fatContent, ...)
            value: New value

        Returns:
            The nutrition structure now held by the document
        """
        attr = NutritionInformation.resolve_field(name)
        if attr is None:
            logger.warning(f"Ignoring unknown nutrient: {name}")
            return self.nutrition
        self.nutrition = self.nutrition.model_copy(update={attr: coerce_text(value)})
        return self.nutrition

    def update_video(self, name: str, value: Any) -> Optional[VideoObject]:
        """Set one video property, creating or clearing the video as needed"""
        attr = VideoObject.resolve_field(name)
        if attr is None:
            logger.warning(f"Ignoring unknown video property: {name}")
            return self.video
        current = self.video.model_dump() if self.video else {}
        current[attr] = value
        self.video = VideoObject.model_validate(current)
        return self.video

    def update_author(self, name: Optional[str] = None, url: Optional[str] = None) -> Optional[Person]:
        """Set author name and/or URL, clearing the author when both are empty"""
        current = self.author.model_dump() if self.author else {}
        if name is not None:
            current["name"] = name
        if url is not None:
            current["url"] = url
        self.author = Person.model_validate(current)
        return self.author


class ExternalContext(SchemaModel):
    """Host-supplied values consumed at render time"""

    author_name: Optional[str] = None
    author_url: Optional[str] = None
    rating_value: Number = 0
    review_count: Count = 0
    fallback_publish_date: Text = ""
    post_url: Text = ""
    featured_images: TextList = Field(default_factory=list)

    def has_valid_rating(self) -> bool:
        """Aggregate rating is only meaningful with reviews and a 1-5 value"""
        return self.review_count > 0 and 1 <= self.rating_value <= 5

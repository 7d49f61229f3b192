"""Tests for the recipe publish handler"""

import re

import pytest

from config.settings import Settings
from recipe_schema.duration import Duration
from recipe_schema.models import ExternalContext, NUTRIENT_KEYS, RecipeDocument
from recipe_schema.publisher import RecipePublishHandler
from recipe_schema.serializer import SerializationError, parse_block


@pytest.fixture
def settings():
    """Settings without a default author"""
    return Settings(default_author_name=None, default_author_url=None)


@pytest.fixture
def handler(settings):
    """Publish handler under test"""
    return RecipePublishHandler(settings)


@pytest.fixture
def parameters():
    """Typical agent tool parameters"""
    return {
        "recipeName": "  <strong>Lemon</strong>   Bars ",
        "description": "  <p>Tangy and sweet.</p>  ",
        "prepTime": "PT20M",
        "cookTime": "PT45M",
        "recipeYield": "16 bars",
        "recipeIngredient": ["1 cup butter", "", "  2 cups <em>flour</em> ", None, 3],
        "recipeInstructions": ["Make crust", "   ", "Add filling"],
        "recipeCategory": ["Dessert", "Dessert", "Bars"],
        "keywords": ["lemon", "citrus"],
        "nutrition": {"calories": " 180 ", "sugarContent": "<b>15g</b>"},
        "datePublished": "2024-05-01",
    }


class TestBuildDocument:
    """Test cases for build_document"""

    def test_text_sanitized(self, handler, parameters):
        """Test markup is stripped and whitespace collapsed"""
        document = handler.build_document(parameters)
        assert document.recipe_name == "Lemon Bars"
        assert document.prep_time == Duration(0, 20)
        assert document.recipe_yield == "16 bars"

    def test_description_keeps_markup(self, handler, parameters):
        """Test the description is only trimmed"""
        document = handler.build_document(parameters)
        assert document.description == "<p>Tangy and sweet.</p>"

    def test_lists_cleaned(self, handler, parameters):
        """Test blank and non-text entries are dropped from lists"""
        document = handler.build_document(parameters)

        assert document.recipe_ingredient == ["1 cup butter", "2 cups flour", "3"]
        assert document.recipe_instructions == ["Make crust", "Add filling"]
        assert document.recipe_category == ["Dessert", "Bars"]

    def test_nutrition_sanitized(self, handler, parameters):
        """Test nutrient values are sanitized and unknown nutrients ignored"""
        parameters["nutrition"]["vitaminC"] = "5mg"
        document = handler.build_document(parameters)
        assert document.nutrition.populated() == {"calories": "180", "sugarContent": "15g"}

    def test_minimal_parameters(self, handler):
        """Test a bare parameter map still builds a document"""
        document = handler.build_document({})

        assert document.recipe_name == ""
        assert document.recipe_ingredient == []
        assert document.author is None
        assert document.video is None

    def test_images_keep_valid_urls(self, handler):
        """Test only http(s) image URLs survive"""
        document = handler.build_document({"images": [
            {"url": "https://example.com/a.jpg", "alt": " A <i>bar</i> "},
            {"url": "javascript:alert(1)"},
            "https://example.com/b.jpg",
        ]})

        assert [(image.url, image.alt) for image in document.images] == [("https://example.com/a.jpg", "A bar")]

    def test_video_cleaned(self, handler):
        """Test video URLs are validated and text sanitized"""
        document = handler.build_document({"video": {
            "name": "<b>Demo</b>",
            "contentUrl": "ftp://example.com/v.mp4",
            "embedUrl": "https://example.com/embed/1",
            "duration": "PT4M",
        }})

        assert document.video.name == "Demo"
        assert document.video.content_url == ""
        assert document.video.embed_url == "https://example.com/embed/1"
        assert document.video.duration == Duration(0, 4)

    def test_empty_video_dropped(self, handler):
        """Test a video with no usable values is omitted"""
        document = handler.build_document({"video": {"contentUrl": "not a url"}})
        assert document.video is None

    def test_unknown_parameters_ignored(self, handler):
        """Test extra parameters do not fail the build"""
        document = handler.build_document({"recipeName": "Toast", "rating": 5})
        assert document.recipe_name == "Toast"


class TestAuthorAndDate:
    """Test cases for author and publish date precedence"""

    def test_parameter_author_wins(self, handler):
        """Test an explicit author is used over the host author"""
        context = ExternalContext(author_name="Host")
        document = handler.build_document(
            {"author": {"name": "Ann", "url": "https://example.com/ann"}}, context
        )
        assert (document.author.name, document.author.url) == ("Ann", "https://example.com/ann")

    def test_context_author(self, handler):
        """Test the host author is the next fallback"""
        context = ExternalContext(author_name="Host", author_url="bad url")
        document = handler.build_document({"author": {"name": "  "}}, context)
        assert (document.author.name, document.author.url) == ("Host", "")

    def test_settings_author(self):
        """Test the configured default author is the last fallback"""
        handler = RecipePublishHandler(Settings(default_author_name="Kitchen Team"))
        document = handler.build_document({})
        assert document.author.name == "Kitchen Team"

    def test_date_from_parameters(self, handler, parameters):
        """Test an explicit publish date is kept"""
        context = ExternalContext(fallback_publish_date="2020-01-01")
        assert handler.build_document(parameters, context).date_published == "2024-05-01"

    def test_date_from_context(self, handler):
        """Test the host publish date is used when none is supplied"""
        context = ExternalContext(fallback_publish_date="2020-01-01")
        assert handler.build_document({}, context).date_published == "2020-01-01"

    def test_date_generated(self, handler):
        """Test the current time is stamped when no date is known"""
        date = handler.build_document({}).date_published
        assert re.match(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\+00:00$", date)


class TestCreateRecipeBlock:
    """Test cases for create_recipe_block"""

    def test_block_round_trip(self, handler, parameters):
        """Test the stored block restores the built document"""
        block = handler.create_recipe_block(parameters)

        assert block.startswith("<!-- wp:recipe-schema/recipe ")
        assert parse_block(block, handler.block_name) == handler.build_document(parameters)

    def test_custom_block_name(self, parameters):
        """Test the block identifier comes from settings"""
        handler = RecipePublishHandler(Settings(block_name="my-site/recipe"))
        block = handler.create_recipe_block(parameters)
        assert isinstance(parse_block(block, "my-site/recipe"), RecipeDocument)

    def test_untitled_recipe_tolerated(self, handler):
        """Test an empty name is not a block-level error"""
        block = handler.create_recipe_block({"recipeIngredient": ["salt"]})
        assert parse_block(block, handler.block_name).recipe_name == ""

    def test_unencodable_text_raises(self, handler, parameters):
        """Test text that cannot be stored as UTF-8 aborts the publish"""
        parameters["recipeName"] = "bad \ud800"

        with pytest.raises(SerializationError, match="^Failed to create recipe block"):
            handler.create_recipe_block(parameters)

    def test_block_errors_wrapped(self, handler, parameters, monkeypatch):
        """Test errors from the block writer carry the publish prefix"""
        def broken_serialize_block(document, block_name):
            raise SerializationError("Failed to encode recipe data as JSON: boom")

        monkeypatch.setattr("recipe_schema.publisher.serialize_block", broken_serialize_block)

        with pytest.raises(SerializationError, match="Failed to create recipe block"):
            handler.create_recipe_block(parameters)


class TestToolParameters:
    """Test cases for the parameter description and validation"""

    def test_recipe_name_required(self, handler):
        """Test the name is the only required parameter"""
        tool_parameters = handler.get_tool_parameters()

        required = [name for name, definition in tool_parameters.items() if definition.get("required")]
        assert required == ["recipeName"]

    def test_nutrition_properties(self, handler):
        """Test every nutrient is described"""
        nutrition = handler.get_tool_parameters()["nutrition"]
        assert list(nutrition["properties"]) == NUTRIENT_KEYS

    def test_valid_parameters(self, handler, parameters):
        """Test a complete recipe passes"""
        assert handler.validate_parameters(parameters) == (True, "Recipe is valid")

    @pytest.mark.parametrize("overrides,reason", [
        ({"recipeName": " <b></b> "}, "Recipe title is required"),
        ({"recipeIngredient": ["", "  "]}, "Recipe is missing ingredients"),
        ({"recipeInstructions": None}, "Recipe is missing instructions"),
    ])
    def test_invalid_parameters(self, handler, parameters, overrides, reason):
        """Test each missing piece is reported"""
        parameters.update(overrides)
        assert handler.validate_parameters(parameters) == (False, reason)

"""Tests for the editor session"""

import pytest

from recipe_schema.duration import Duration
from recipe_schema.editor import EditorSession
from recipe_schema.models import CUISINE_OPTIONS, RecipeDocument
from recipe_schema.serializer import SerializationError
from recipe_schema.widgets import DurationField, ListField, TagField


class TestEditorSession:
    """Test cases for EditorSession"""

    def test_new_session_is_empty(self):
        """Test a session without a payload edits an empty recipe"""
        session = EditorSession()

        assert session.document.is_empty()
        assert isinstance(session.widget("prepTime"), DurationField)
        assert isinstance(session.widget("recipeIngredient"), ListField)
        assert isinstance(session.widget("keywords"), TagField)

    def test_widgets_share_the_document(self):
        """Test every widget writes to the session document"""
        session = EditorSession()
        session.widget("cookTime").set_hours("2")
        session.widget("tool").add()
        session.widget("suitableForDiet").add_tag("Vegan")

        assert session.document.cook_time == Duration(2, 0)
        assert session.document.tool == [""]
        assert session.document.suitable_for_diet == ["Vegan"]

    def test_save_and_reopen(self):
        """Test a saved payload reopens with the same values"""
        session = EditorSession()
        session.set_text("recipeName", "Pancakes")
        session.set_text("recipeCuisine", "American")
        session.widget("totalTime").set_minutes("25")
        session.widget("recipeInstructions").add()
        session.widget("recipeInstructions").update(0, "Whisk")
        session.update_nutrition("calories", "320")

        reopened = EditorSession(session.save())

        assert reopened.document == session.document
        assert reopened.widget("totalTime").minutes == 25
        assert reopened.widget("recipeInstructions").items == ["Whisk"]

    def test_reopen_hydrates_duration_inputs(self):
        """Test duration widgets start from the stored values"""
        session = EditorSession({"recipeName": "Roast", "cookTime": "PT2H10M"})
        field = session.widget("cookTime")

        assert (field.hours, field.minutes) == (2, 10)
        assert session.render()["cookTime"]["value"] == "PT2H10M"

    def test_cuisine_options(self):
        """Test the cuisine selector starts with an empty choice"""
        options = EditorSession().cuisine_options()

        assert options[0] == {"label": "Select Cuisine", "value": ""}
        assert [option["value"] for option in options[1:]] == CUISINE_OPTIONS

    def test_render_covers_all_widgets(self):
        """Test the view model includes every widget"""
        view = EditorSession().render()

        assert view["prepTime"]["kind"] == "duration"
        assert view["recipeIngredient"]["kind"] == "list"
        assert view["recipeCategory"]["kind"] == "tags"
        assert set(view) == {
            "prepTime", "cookTime", "totalTime", "recipeCategory", "recipeIngredient",
            "recipeInstructions", "keywords", "suitableForDiet", "tool", "supply",
        }

    def test_save_unencodable_document_raises(self):
        """Test saving fails when the document cannot be stored"""
        session = EditorSession()
        session.document = RecipeDocument.model_construct(recipe_name="bad \ud800")

        with pytest.raises(SerializationError, match="^Failed to"):
            session.save()

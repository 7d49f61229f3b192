"""Editable field widgets bound to a recipe document"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from recipe_schema.duration import Duration, coerce_duration, format_duration
from recipe_schema.models import RecipeDocument
from utils.helpers import coerce_text, parse_int

logger = logging.getLogger(__name__)

ENTER_KEY = "Enter"
MINUTES_SOFT_MAX = 59


class FieldWidget(ABC):
    """
    Controlled view over one document field

    Widgets never raise on malformed input: bad values are coerced or
    silently rejected so the editor is never blocked.
    """

    kind = "field"

    def __init__(self, document: RecipeDocument, field_name: str, label: str = ""):
        self.document = document
        self.field_name = field_name
        self.label = label or field_name

    @property
    def value(self) -> Any:
        return self.document.get_field(self.field_name)

    def on_change(self, new_value: Any) -> None:
        """Write a new value into the backing document field"""
        self.document.set_field(self.field_name, new_value)

    @abstractmethod
    def render(self) -> Dict[str, Any]:
        """Describe the inputs this widget presents"""


class DurationField(FieldWidget):
    """
    Hours and minutes inputs backed by an ISO 8601 duration

    The numeric inputs are hydrated once from the backing value when the
    widget is created. Later changes to the document are not reflected
    back; the widget state stays the source of truth until it is dropped.
    """

    kind = "duration"

    def __init__(self, document: RecipeDocument, field_name: str, label: str = ""):
        super().__init__(document, field_name, label)
        initial = coerce_duration(self.value)
        self.hours = initial.hours
        self.minutes = initial.minutes

    def set_hours(self, raw: Any) -> str:
        self.hours = parse_int(raw)
        return self._emit()

    def set_minutes(self, raw: Any) -> str:
        # 59 is only a UI hint, larger values pass through
        self.minutes = parse_int(raw)
        return self._emit()

    def _emit(self) -> str:
        iso_value = format_duration(Duration(hours=self.hours, minutes=self.minutes))
        self.on_change(iso_value)
        return iso_value

    def render(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "label": self.label,
            "hours": {"value": self.hours, "min": 0},
            "minutes": {"value": self.minutes, "min": 0, "max": MINUTES_SOFT_MAX},
            "value": format_duration(Duration(hours=self.hours, minutes=self.minutes)),
        }


class ListField(FieldWidget):
    """Ordered list of multi-line entries (ingredients, steps, tools)"""

    kind = "list"

    def __init__(
        self,
        document: RecipeDocument,
        field_name: str,
        label: str = "",
        placeholder: str = "",
        rows: int = 2,
    ):
        super().__init__(document, field_name, label)
        self.placeholder = placeholder
        self.rows = rows

    @property
    def items(self) -> List[str]:
        return list(self.value)

    def add(self) -> List[str]:
        """Append an empty entry; emptiness is allowed while editing"""
        items = self.items + [""]
        self.on_change(items)
        return items

    def remove(self, index: int) -> List[str]:
        items = self.items
        if not 0 <= index < len(items):
            logger.debug(f"Ignoring remove at {index} on {self.field_name} ({len(items)} items)")
            return items
        items = [item for position, item in enumerate(items) if position != index]
        self.on_change(items)
        return items

    def update(self, index: int, value: Any) -> List[str]:
        items = self.items
        if not 0 <= index < len(items):
            logger.debug(f"Ignoring update at {index} on {self.field_name} ({len(items)} items)")
            return items
        items[index] = coerce_text(value)
        self.on_change(items)
        return items

    def render(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "label": self.label,
            "items": [
                {"index": index, "value": item, "rows": self.rows, "placeholder": self.placeholder}
                for index, item in enumerate(self.items)
            ],
            "actions": ["add", "remove"],
        }


class TagField(FieldWidget):
    """Deduplicated tag collector (categories, keywords, diets)"""

    kind = "tags"

    def __init__(self, document: RecipeDocument, field_name: str, label: str = ""):
        super().__init__(document, field_name, label)
        self.input_value = ""

    @property
    def tags(self) -> List[str]:
        return list(self.value)

    def set_input(self, text: Any) -> None:
        self.input_value = coerce_text(text)

    def add_tag(self, raw: Optional[Any] = None) -> bool:
        """
        Add a tag from raw text or the pending input

        Args:
            raw: Tag text; the pending input is used when omitted

        Returns:
            True if the tag was added, False if it was empty or a duplicate
        """
        candidate = coerce_text(self.input_value if raw is None else raw).strip()
        tags = self.tags
        if not candidate or candidate in tags:
            return False

        self.on_change(tags + [candidate])
        self.input_value = ""
        return True

    def remove_tag(self, index: int) -> List[str]:
        tags = self.tags
        if not 0 <= index < len(tags):
            return tags
        tags = [tag for position, tag in enumerate(tags) if position != index]
        self.on_change(tags)
        return tags

    def handle_key(self, key: str) -> bool:
        """Enter submits the pending input, other keys do nothing"""
        if key == ENTER_KEY:
            return self.add_tag()
        return False

    def render(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "label": self.label,
            "chips": [{"index": index, "text": tag, "removable": True} for index, tag in enumerate(self.tags)],
            "input": {"value": self.input_value, "placeholder": "Enter tag and press Enter"},
        }

"""Attribute payload serializer for recipe documents"""

import json
import logging
import re
from typing import Any, Dict, Optional

from pydantic_core import PydanticSerializationError

from recipe_schema.models import RecipeDocument

logger = logging.getLogger(__name__)

# Keep encoded JSON safe to embed inside an HTML comment
COMMENT_ESCAPES = {
    "--": "\\u002d\\u002d",
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
}


class SerializationError(ValueError):
    """Recipe payload could not be encoded"""


def serialize(document: RecipeDocument) -> Dict[str, Any]:
    """
    Convert a recipe document into its flat attribute payload

    Args:
        document: Populated recipe document

    Returns:
        Dict keyed by camelCase field names, every field present

    Raises:
        SerializationError: If the document holds values that cannot be encoded
    """
    try:
        return document.model_dump(by_alias=True, mode="json")
    except (PydanticSerializationError, TypeError, ValueError) as e:
        logger.error(f"Failed to serialize recipe '{document.recipe_name}': {e}")
        raise SerializationError(f"Failed to serialize recipe data: {e}") from e


def deserialize(payload: Any) -> RecipeDocument:
    """
    Rehydrate a recipe document from an attribute payload

    Unknown keys are ignored and missing keys take field defaults.

    Args:
        payload: Mapping produced by serialize (or any partial map)

    Returns:
        RecipeDocument
    """
    if not isinstance(payload, dict):
        logger.warning(f"Recipe payload is not a mapping ({type(payload).__name__}), using empty recipe")
        return RecipeDocument()
    return RecipeDocument.model_validate(payload)


def encode_payload(payload: Dict[str, Any]) -> str:
    """
    Encode a payload as compact JSON suitable for a block comment

    Args:
        payload: Serialized recipe payload

    Returns:
        JSON text with comment-breaking sequences escaped

    Raises:
        SerializationError: If the payload is not JSON/UTF-8 encodable
    """
    try:
        encoded = json.dumps(payload, ensure_ascii=False, allow_nan=False, separators=(",", ":"))
        encoded.encode("utf-8")
    except (TypeError, ValueError) as e:
        # UnicodeEncodeError is a ValueError
        logger.error(f"Failed to encode recipe payload: {e}")
        raise SerializationError(f"Failed to encode recipe data as JSON: {e}") from e

    for sequence, escape in COMMENT_ESCAPES.items():
        encoded = encoded.replace(sequence, escape)
    return encoded


def serialize_block(document: RecipeDocument, block_name: str) -> str:
    """
    Wrap a document's payload in the block marker the host stores

    Args:
        document: Recipe document
        block_name: Block identifier, e.g. recipe-schema/recipe

    Returns:
        Opening and closing block comments carrying the payload
    """
    attributes = encode_payload(serialize(document))
    return f"<!-- wp:{block_name} {attributes} -->\n<!-- /wp:{block_name} -->"


def parse_block(content: str, block_name: str) -> Optional[RecipeDocument]:
    """
    Find a recipe block in stored content and rehydrate its document

    Args:
        content: Host content containing the block marker
        block_name: Block identifier to look for

    Returns:
        RecipeDocument, or None if no block is present
    """
    pattern = re.compile(rf"<!--\s+wp:{re.escape(block_name)}\s+(\{{.*?\}})\s+/?-->", re.S)
    match = pattern.search(content or "")
    if not match:
        logger.debug(f"No {block_name} block found in content")
        return None

    try:
        payload = json.loads(match.group(1))
    except json.JSONDecodeError as e:
        logger.warning(f"Malformed {block_name} block attributes, using empty recipe: {e}")
        return RecipeDocument()
    return deserialize(payload)

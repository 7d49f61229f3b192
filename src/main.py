#!/usr/bin/env python3
"""
Recipe Schema
Builds a recipe block from agent parameters and renders its structured data
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

# Add src and project root to Python path
sys.path.insert(0, str(Path(__file__).parent))
sys.path.insert(0, str(Path(__file__).parent.parent))

from config.settings import Settings
from recipe_schema.models import ExternalContext
from recipe_schema.publisher import RecipePublishHandler
from recipe_schema.renderer import render
from recipe_schema.serializer import SerializationError, parse_block

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler('recipe_schema.log')
        ]
    )


def load_json(path: Path) -> dict:
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def main(argv=None) -> int:
    """Main entry point for building and rendering a recipe block"""
    parser = argparse.ArgumentParser(description="Render Schema.org recipe structured data from agent parameters.")
    parser.add_argument("params", help="JSON file with recipe parameters")
    parser.add_argument("--context", help="JSON file with host context (author, rating, publish date)")
    parser.add_argument("--output", help="Write rendered HTML to this file instead of stdout")
    args = parser.parse_args(argv)

    settings = Settings()
    configure_logging(settings.log_level)

    try:
        parameters = load_json(Path(args.params))
        context = ExternalContext.model_validate(load_json(Path(args.context))) if args.context else ExternalContext()

        handler = RecipePublishHandler(settings)
        is_valid, reason = handler.validate_parameters(parameters)
        if not is_valid:
            logger.warning(f"Recipe parameters incomplete: {reason}")

        block = handler.create_recipe_block(parameters, context)

        # Rehydrate from the stored block the way a host does at render time
        document = parse_block(block, settings.block_name)
        rendered = render(document, context, settings)

    except SerializationError as e:
        logger.error(f"Recipe could not be published: {e}")
        return 1
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        logger.error(f"Could not read input: {e}")
        return 1

    html = rendered.to_html(settings.jsonld_indent)
    if args.output:
        Path(args.output).write_text(html, encoding="utf-8")
        logger.info(f"Wrote structured data to {args.output}")
    else:
        print(html)
    return 0


if __name__ == "__main__":
    sys.exit(main())

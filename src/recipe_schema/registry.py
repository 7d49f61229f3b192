"""Name-based registry through which hosts discover recipe components"""

import logging
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)


class ComponentRegistry:
    """Maps component names to factories; queried by hosts at composition time"""

    def __init__(self):
        self._factories: Dict[str, Callable[..., Any]] = {}

    def register(self, name: str, factory: Callable[..., Any]) -> None:
        if name in self._factories:
            raise ValueError(f"Component already registered: {name}")
        self._factories[name] = factory
        logger.debug(f"Registered component: {name}")

    def get(self, name: str) -> Callable[..., Any]:
        try:
            return self._factories[name]
        except KeyError:
            raise KeyError(f"Unknown component: {name}") from None

    def create(self, name: str, *args, **kwargs) -> Any:
        return self.get(name)(*args, **kwargs)

    def names(self) -> List[str]:
        return list(self._factories)

    def __contains__(self, name: str) -> bool:
        return name in self._factories


def register_recipe_components(registry: ComponentRegistry) -> ComponentRegistry:
    """
    Expose the recipe publish handler and renderer through a registry

    Args:
        registry: Host registry to register into

    Returns:
        The same registry, for chaining
    """
    from recipe_schema.publisher import RecipePublishHandler
    from recipe_schema.renderer import render

    registry.register("recipe_publish", RecipePublishHandler)
    registry.register("recipe_schema_renderer", lambda: render)
    return registry

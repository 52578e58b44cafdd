"""Application lifecycle events."""

from recipes_api.core.events.lifespan import lifespan


__all__ = ["lifespan"]

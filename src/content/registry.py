"""Explicit binding of content models to their resource descriptors."""

from django.core.exceptions import ImproperlyConfigured

from .descriptors import ResourceDescriptor

_registry: dict[type, ResourceDescriptor] = {}


def register(model: type, descriptor: ResourceDescriptor) -> ResourceDescriptor:
    """Bind ``model`` to ``descriptor``; apps call this from ``ready()``."""
    existing = _registry.get(model)
    if existing is not None and existing != descriptor:
        raise ImproperlyConfigured(f"{model.__name__} is already registered as '{existing.name}'.")
    _registry[model] = descriptor
    return descriptor


def get_descriptor(model: type) -> ResourceDescriptor:
    try:
        return _registry[model]
    except KeyError:
        raise ImproperlyConfigured(f"{model.__name__} is not a registered content resource.") from None


def registered() -> list[tuple[type, ResourceDescriptor]]:
    return list(_registry.items())


__all__ = ["register", "get_descriptor", "registered"]

"""System checks for registered content resources."""

from django.core.checks import Error, register
from django.core.exceptions import FieldDoesNotExist

from content.registry import registered


def _resolve_owner_field(model, path: str) -> bool:
    """Return True if every segment of ``path`` resolves on ``model``.

    All segments but the last must be relations.
    """
    opts = model._meta
    segments = path.split(".")
    for index, segment in enumerate(segments):
        try:
            field = opts.get_field(segment)
        except FieldDoesNotExist:
            return False
        if index < len(segments) - 1:
            if not field.is_relation or field.related_model is None:
                return False
            opts = field.related_model._meta
    return True


@register()
def content_resources_declare_owner_fields(app_configs, **kwargs):
    """Ensure registered content resources declare resolvable owner fields."""
    errors: list[Error] = []

    for model, descriptor in registered():
        if not descriptor.owner_fields:
            errors.append(
                Error(
                    f"Content resource '{descriptor.name}' does not declare owner_fields.",
                    obj=model,
                    id="access_control.E001",
                )
            )
            continue
        for path in descriptor.owner_fields:
            if not _resolve_owner_field(model, path):
                errors.append(
                    Error(
                        f"Owner field '{path}' of content resource '{descriptor.name}' "
                        f"does not resolve on {model.__name__}.",
                        obj=model,
                        id="access_control.E002",
                    )
                )

    return errors

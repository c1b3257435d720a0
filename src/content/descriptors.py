"""Static configuration shared by every content resource type."""

from dataclasses import dataclass
from enum import Enum


class PermissionKey(str, Enum):
    """Abstract content permissions, namespaced per resource when stored."""

    VIEW_ALL = "view_all"
    VIEW_OWN = "view_own"
    VIEW_UNPUBLISHED = "view_unpublished"
    ADD = "add"
    EDIT = "edit"
    EDIT_OWN = "edit_own"
    REMOVE = "remove"
    REMOVE_OWN = "remove_own"

    def namespaced(self, resource_name: str) -> str:
        """Return the stored permission key, e.g. ``article.view_own``."""
        return f"{resource_name}.{self.value}"


@dataclass(frozen=True)
class ResourceDescriptor:
    """Name and owner fields of one content resource type.

    ``owner_fields`` are dot paths (``"article.author_id"``) evaluated against
    the entity; a user owns an entity when any of them equals the user's id.
    """

    name: str
    owner_fields: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("ResourceDescriptor.name must be set")
        # Accept any iterable but store an immutable tuple.
        object.__setattr__(self, "owner_fields", tuple(self.owner_fields))

    def permission_key(self, key: PermissionKey) -> str:
        return PermissionKey(key).namespaced(self.name)


__all__ = ["PermissionKey", "ResourceDescriptor"]

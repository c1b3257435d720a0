"""Entity-level permission checks for single-entity operations."""

import logging

from .descriptors import PermissionKey, ResourceDescriptor
from .exceptions import Forbidden

logger = logging.getLogger(__name__)


def resolve_path(entity, path: str):
    """Follow a dot path through attributes; ``None`` short-circuits."""
    value = entity
    for part in path.split("."):
        if value is None:
            return None
        value = getattr(value, part, None)
    return value


def is_owner(entity, owner_fields, user) -> bool:
    """Return True if any owner field of ``entity`` equals the user's id."""
    user_id = getattr(user, "pk", None)
    if user_id is None:
        return False
    return any(resolve_path(entity, field) == user_id for field in owner_fields)


class EntityGuard:
    """Check add/view/edit/remove permissions for one resource type.

    Owners pass with either the ``*_own`` key or the matching "all" key;
    everyone else needs the "all" key. Unpublished entities are only
    readable by owners and holders of ``view_unpublished``.
    """

    def __init__(self, descriptor: ResourceDescriptor, evaluator):
        self.descriptor = descriptor
        self.evaluator = evaluator

    def _granted(self, user, key: PermissionKey) -> bool:
        return self.evaluator.is_granted(user, self.descriptor, key)

    def _deny(self, user, action: str):
        logger.debug(
            "Denied %s on %s for user %s", action, self.descriptor.name, getattr(user, "pk", None)
        )
        raise Forbidden()

    def _require_scoped(self, user, entity, own_key: PermissionKey, all_key: PermissionKey, action: str):
        owner = is_owner(entity, self.descriptor.owner_fields, user)
        if owner and self._granted(user, own_key):
            return owner
        if self._granted(user, all_key):
            return owner
        self._deny(user, action)

    def authorize_add(self, user) -> None:
        if not self._granted(user, PermissionKey.ADD):
            self._deny(user, "add")

    def authorize_view(self, user, entity) -> None:
        owner = self._require_scoped(user, entity, PermissionKey.VIEW_OWN, PermissionKey.VIEW_ALL, "view")
        if getattr(entity, "is_published", True) or owner:
            return
        if not self._granted(user, PermissionKey.VIEW_UNPUBLISHED):
            self._deny(user, "view unpublished")

    def authorize_edit(self, user, entity) -> None:
        self._require_scoped(user, entity, PermissionKey.EDIT_OWN, PermissionKey.EDIT, "edit")

    def authorize_remove(self, user, entity) -> None:
        self._require_scoped(user, entity, PermissionKey.REMOVE_OWN, PermissionKey.REMOVE, "remove")


__all__ = ["resolve_path", "is_owner", "EntityGuard"]

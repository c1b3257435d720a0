"""Evaluation of a user's view scope over one resource type."""

import asyncio
from dataclasses import dataclass

from .descriptors import PermissionKey, ResourceDescriptor


@dataclass(frozen=True)
class AccessScope:
    view_all: bool = False
    view_unpublished: bool = False
    view_own: bool = False


class ScopeEvaluator:
    """Combine the view permissions of a user into an :class:`AccessScope`.

    Each check namespaces the key with the resource name, resolves it through
    the permission resolver and intersects it with the user's roles. A
    missing permission simply yields ``False``.
    """

    def __init__(self, resolver=None):
        if resolver is None:
            from access_control.resolver import PermissionResolver

            resolver = PermissionResolver()
        self.resolver = resolver

    def is_granted(self, user, descriptor: ResourceDescriptor, key: PermissionKey, role_ids=None) -> bool:
        if role_ids is None:
            role_ids = self.resolver.role_ids_for(user)
        permission = self.resolver.resolve(descriptor.permission_key(key))
        return self.resolver.is_granted_for_roles(permission, role_ids)

    def evaluate(self, user, descriptor: ResourceDescriptor) -> AccessScope:
        role_ids = self.resolver.role_ids_for(user)
        return AccessScope(
            view_all=self.is_granted(user, descriptor, PermissionKey.VIEW_ALL, role_ids),
            view_unpublished=self.is_granted(user, descriptor, PermissionKey.VIEW_UNPUBLISHED, role_ids),
            view_own=self.is_granted(user, descriptor, PermissionKey.VIEW_OWN, role_ids),
        )

    async def ais_granted(self, descriptor: ResourceDescriptor, key: PermissionKey, role_ids) -> bool:
        permission = await self.resolver.aresolve(descriptor.permission_key(key))
        return await self.resolver.ais_granted_for_roles(permission, role_ids)

    async def aevaluate(self, user, descriptor: ResourceDescriptor) -> AccessScope:
        """Async variant issuing the three checks concurrently."""
        role_ids = await self.resolver.arole_ids_for(user)
        view_all, view_unpublished, view_own = await asyncio.gather(
            self.ais_granted(descriptor, PermissionKey.VIEW_ALL, role_ids),
            self.ais_granted(descriptor, PermissionKey.VIEW_UNPUBLISHED, role_ids),
            self.ais_granted(descriptor, PermissionKey.VIEW_OWN, role_ids),
        )
        return AccessScope(
            view_all=view_all,
            view_unpublished=view_unpublished,
            view_own=view_own,
        )


__all__ = ["AccessScope", "ScopeEvaluator"]

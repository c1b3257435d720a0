"""Database-backed permission lookups used by the content engine."""

from typing import Iterable

from asgiref.sync import sync_to_async
from django.conf import settings

from .models import Permission, Role


class PermissionResolver:
    """Resolve namespaced permission keys and check them against role sets.

    Anonymous principals carry the role named by
    ``settings.CONTENT_ANONYMOUS_ROLE`` (if it exists); authenticated users
    carry the roles linked through ``User.roles``.
    """

    def resolve(self, key: str) -> Permission | None:
        return Permission.objects.filter(key=key).first()

    def is_granted_for_roles(self, permission: Permission | None, role_ids: Iterable[int]) -> bool:
        role_ids = list(role_ids)
        if permission is None or not role_ids:
            return False
        return permission.roles.filter(pk__in=role_ids).exists()

    def role_ids_for(self, user) -> frozenset[int]:
        if user is None:
            return frozenset()
        if getattr(user, "is_authenticated", False):
            return frozenset(user.roles.values_list("pk", flat=True))
        anonymous_role = getattr(settings, "CONTENT_ANONYMOUS_ROLE", None)
        if not anonymous_role:
            return frozenset()
        return frozenset(Role.objects.filter(name=anonymous_role).values_list("pk", flat=True))

    async def aresolve(self, key: str) -> Permission | None:
        return await Permission.objects.filter(key=key).afirst()

    async def ais_granted_for_roles(self, permission: Permission | None, role_ids: Iterable[int]) -> bool:
        role_ids = list(role_ids)
        if permission is None or not role_ids:
            return False
        return await permission.roles.filter(pk__in=role_ids).aexists()

    async def arole_ids_for(self, user) -> frozenset[int]:
        return await sync_to_async(self.role_ids_for)(user)


__all__ = ["PermissionResolver"]

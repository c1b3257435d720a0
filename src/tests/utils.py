"""Shared helpers for tests (permission seeding, user creation, fake resolver)."""

from __future__ import annotations

from typing import Dict, Iterable, Tuple

from django.contrib.auth import get_user_model

from access_control.models import Permission, Role
from content.descriptors import PermissionKey, ResourceDescriptor
from scripts.management.commands.seed_content import (
    create_seed_permissions,
    create_seed_roles,
)

User = get_user_model()


class FakePermissionResolver:
    """In-memory resolver: ``grants`` maps namespaced keys to role ids."""

    def __init__(self, grants: Dict[str, Iterable[int]] | None = None, role_ids: Iterable[int] = (1,)):
        self.grants = {key: set(roles) for key, roles in (grants or {}).items()}
        self.role_ids = frozenset(role_ids)
        self.resolved: list[str] = []

    def resolve(self, key: str):
        self.resolved.append(key)
        return key if key in self.grants else None

    def is_granted_for_roles(self, permission, role_ids) -> bool:
        return permission is not None and bool(self.grants[permission] & set(role_ids))

    def role_ids_for(self, user) -> frozenset[int]:
        return self.role_ids

    async def aresolve(self, key: str):
        return self.resolve(key)

    async def ais_granted_for_roles(self, permission, role_ids) -> bool:
        return self.is_granted_for_roles(permission, role_ids)

    async def arole_ids_for(self, user) -> frozenset[int]:
        return self.role_ids


def fake_resolver_for(descriptor: ResourceDescriptor, *keys: PermissionKey) -> FakePermissionResolver:
    """Return a fake resolver granting ``keys`` on ``descriptor`` to role 1."""
    return FakePermissionResolver({descriptor.permission_key(key): {1} for key in keys})


def seed_content_basics() -> Tuple[dict, dict]:
    """Create permissions and base roles for every registered resource.

    Delegates to the same helpers used by the ``seed_content`` management
    command to keep permission setup logic in a single place.
    """

    permissions = create_seed_permissions()
    roles = create_seed_roles(permissions)
    return roles, permissions


def create_user(email: str, *roles: Role, **extra):
    """Create a user holding ``roles``."""

    return User.objects.create_user(email=email, password="Pass12345", roles=roles, **extra)


def create_role(name: str, descriptor: ResourceDescriptor, *keys: PermissionKey) -> Role:
    """Create a role granted ``keys`` on ``descriptor``."""

    role = Role.objects.create(name=name)
    for key in keys:
        permission, _ = Permission.objects.get_or_create(key=descriptor.permission_key(key))
        role.permissions.add(permission)
    return role

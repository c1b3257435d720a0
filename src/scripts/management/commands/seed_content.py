"""Seed content permissions and base roles for every registered resource."""

from django.core.management.base import BaseCommand

from access_control.models import Permission, Role
from content.descriptors import PermissionKey
from content.registry import registered

K = PermissionKey

# Permissions granted to each base role on every registered resource.
ROLE_GRANTS: dict[str, tuple[PermissionKey, ...]] = {
    "Admin": tuple(PermissionKey),
    "Editor": (K.VIEW_ALL, K.VIEW_UNPUBLISHED, K.ADD, K.EDIT, K.REMOVE),
    "User": (K.VIEW_ALL, K.VIEW_OWN, K.ADD, K.EDIT_OWN, K.REMOVE_OWN),
    "Guest": (K.VIEW_ALL, K.ADD),
}


def create_seed_permissions() -> dict[str, Permission]:
    """Create a Permission row for every (resource, key) pair; return key->Permission."""
    permissions = {}
    for _, descriptor in registered():
        for key in PermissionKey:
            namespaced = descriptor.permission_key(key)
            permission, _ = Permission.objects.get_or_create(
                key=namespaced,
                defaults={"description": f"{key.value.replace('_', ' ').capitalize()} {descriptor.name}"},
            )
            permissions[namespaced] = permission
    return permissions


def create_seed_roles(permissions: dict[str, Permission]) -> dict[str, Role]:
    """Create base roles if missing and grant them ROLE_GRANTS; return name->Role."""
    roles = {}
    for name, keys in ROLE_GRANTS.items():
        role, _ = Role.objects.get_or_create(name=name)
        granted = [
            permission
            for namespaced, permission in permissions.items()
            if namespaced.rsplit(".", 1)[1] in {key.value for key in keys}
        ]
        role.permissions.add(*granted)
        roles[name] = role
    return roles


class Command(BaseCommand):
    """Management command to seed content permissions and roles."""

    help = (
        "Create permission rows for every registered content resource and the "
        "base Admin/Editor/User/Guest roles. Use --reset to clear them first."
    )

    def add_arguments(self, parser):
        parser.add_argument(
            "--reset",
            action="store_true",
            help="Delete the base roles and content permissions before seeding.",
        )

    def handle(self, *args, **options):
        """Entrypoint for the management command."""
        if options.get("reset"):
            self._reset_seeded_data()

        self.stdout.write("Seeding content permissions...")
        permissions = create_seed_permissions()
        roles = create_seed_roles(permissions)
        self.stdout.write(
            self.style.SUCCESS(f"Seeded {len(permissions)} permissions and {len(roles)} roles.")
        )

    def _reset_seeded_data(self) -> None:
        """Remove the base roles and the permissions of registered resources."""
        self.stdout.write("Resetting previously seeded content data...")
        Role.objects.filter(name__in=list(ROLE_GRANTS)).delete()
        keys = [descriptor.permission_key(key) for _, descriptor in registered() for key in PermissionKey]
        Permission.objects.filter(key__in=keys).delete()
        self.stdout.write(self.style.WARNING("Seeded content data cleared."))

"""Custom user manager for email-identified accounts."""

from django.contrib.auth.base_user import BaseUserManager


class UserManager(BaseUserManager):
    """Manager to create users and attach their roles."""

    use_in_migrations = True

    def _create_user(self, email: str, password: str | None, roles=(), **extra_fields):
        if not email:
            raise ValueError("The Email must be set")
        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        if password is None:
            user.set_unusable_password()
        else:
            user.set_password(password)
        user.save(using=self._db)
        if roles:
            user.roles.add(*roles)
        return user

    def create_user(self, email: str, password: str | None = None, roles=(), **extra_fields):
        """Create a regular user holding the given roles."""
        extra_fields.setdefault("is_superuser", False)
        return self._create_user(email, password, roles, **extra_fields)

    def create_superuser(self, email: str, password: str, roles=(), **extra_fields):
        """Create a superuser ensuring the superuser flag is set."""
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("is_active", True)
        if not extra_fields.get("is_superuser"):
            raise ValueError("Superuser must have is_superuser=True.")
        return self._create_user(email, password, roles, **extra_fields)


__all__ = ["UserManager"]

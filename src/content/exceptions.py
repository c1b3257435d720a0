"""Error taxonomy of content operations.

Every error is a Django REST framework ``APIException`` so an HTTP layer can
render it with the proper status code. Details never carry internal error
information; the underlying causes are logged where they are caught.
"""

from rest_framework import exceptions, status


class Unauthorized(exceptions.NotAuthenticated):
    """The user holds none of the view permissions of a resource."""

    default_detail = "You are not allowed to view this content."
    default_code = "unauthorized"


class Forbidden(exceptions.PermissionDenied):
    """An entity-level permission check failed."""

    default_detail = "You do not have permission to perform this action on this resource."


class NotFound(exceptions.NotFound):
    """The requested entity does not exist."""


class Conflict(exceptions.APIException):
    """The store rejected a write because of a uniqueness constraint."""

    status_code = status.HTTP_409_CONFLICT
    default_detail = "Duplicate entity. Please, check unique fields"
    default_code = "conflict"


class UnprocessableEntity(exceptions.APIException):
    """Validation failed or the store failed for a non-uniqueness reason."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_detail = "Something went wrong. Please try later or contact us"
    default_code = "unprocessable_entity"


__all__ = ["Unauthorized", "Forbidden", "NotFound", "Conflict", "UnprocessableEntity"]

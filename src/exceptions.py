"""Domain errors raised by the service and persistence layers."""


class ServiceError(Exception):
    """Base class for errors raised below the HTTP layer."""


class DuplicateUserError(ServiceError):
    """A user with the same username already exists."""


class UserNotFoundError(ServiceError):
    """No user matches the given username."""


class InvalidCredentialsError(ServiceError):
    """The password does not match the stored hash."""


class MediaError(ServiceError):
    """The media host rejected or failed a request."""


class MediaUploadError(MediaError):
    """An image could not be uploaded to the media host."""


class MediaDeleteError(MediaError):
    """An image could not be removed from the media host."""

"""Error taxonomy shared by the stores, the match engine and the HTTP layer."""


class ProfileServiceError(Exception):
    """Base class for errors raised by this package."""

    status_code = 500


class Unauthorized(ProfileServiceError):
    """Missing, malformed, expired or tampered credential."""

    status_code = 401


class NotFound(ProfileServiceError):
    """Requested record does not exist (e.g. requester has no profile yet)."""

    status_code = 404


class ValidationError(ProfileServiceError):
    """Malformed profile or account submission."""

    status_code = 400


class StorageError(ProfileServiceError):
    """Storage collaborator failed. Message is safe to log, not to return."""

    status_code = 500

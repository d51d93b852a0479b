# ensport_backend/core/errors.py
# Error taxonomy shared by services and routes.
# Services raise these; main.py renders them as {"detail": message}.


class PortalError(Exception):
    """Base class for errors surfaced to API callers."""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(PortalError):
    """Malformed input: negative score, bad winner token, missing field..."""
    status_code = 400


class NotFoundError(PortalError):
    status_code = 404


class ForbiddenError(PortalError):
    """Caller lacks rights over the target (e.g. another sport's match)."""
    status_code = 403


class InvalidStateError(PortalError):
    """Operation attempted on a match that is not in the required status."""
    status_code = 400


class NotificationError(Exception):
    """
    Best-effort email send failed.
    Never surfaced to API callers: caught at the call site and logged.
    `delivered` counts recipients whose batch went out before the failure.
    """

    def __init__(self, message: str, delivered: int = 0):
        super().__init__(message)
        self.delivered = delivered


class ImageHostError(PortalError):
    """The image CDN rejected or failed an upload/delete."""
    status_code = 502

"""
Error kinds surfaced by the business core.

Routers never build error responses themselves: services and the policy
engine raise one of these and the handler registered in ``main`` renders it.
"""


class CourseHubError(Exception):
    """Base class for every failure reported back to the caller."""

    kind = "Error"
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(CourseHubError):
    """An id did not resolve to an entity."""

    kind = "NotFound"
    status_code = 404


class Forbidden(CourseHubError):
    """Authenticated, but ownership or enrollment does not match."""

    kind = "Forbidden"
    status_code = 403


class InvalidInput(CourseHubError):
    """Missing field, out-of-range grade or a duplicate of a unique entity."""

    kind = "InvalidInput"
    status_code = 400

"""
Errors raised by the moderation workflow, engagement and listing layers.

Each error carries the HTTP status the JSON views answer with.
"""


class BlogEngineError(Exception):
    """Base class for business-rule failures."""

    status_code = 400
    default_message = "Request could not be completed"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFound(BlogEngineError):
    """Referenced post, comment or user does not exist."""

    status_code = 404
    default_message = "Not found"


class InvalidState(BlogEngineError):
    """Action is not valid for the entity's current status."""

    status_code = 400
    default_message = "Action not allowed in the current state"


class Unauthorized(BlogEngineError):
    """Acting user is neither the owner nor an admin, or is inactive."""

    status_code = 403
    default_message = "Not authorized to perform this action"


class ValidationFailed(BlogEngineError):
    """A field constraint enforced by the core itself was violated."""

    status_code = 400
    default_message = "Validation failed"

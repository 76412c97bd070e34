# mentorportal/exceptions.py
"""Domain errors raised by the services and rendered as JSON by the errors blueprint."""


class PortalError(Exception):
    code = "PortalError"
    status_code = 400
    default_message = "Request could not be processed."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"error": self.code, "message": self.message}


class MissingField(PortalError):
    code = "MissingField"
    default_message = "A required field is missing."


class InvalidField(PortalError):
    code = "InvalidField"
    default_message = "A field has an invalid value."


class InvalidTime(PortalError):
    code = "InvalidTime"
    default_message = "Cannot request a meeting in the past."


class UnresolvedMentor(PortalError):
    code = "UnresolvedMentor"
    default_message = "Assigned mentor not found for this user."


class InvalidStatus(PortalError):
    code = "InvalidStatus"
    default_message = "Invalid target status."


class MissingConfirmedTime(PortalError):
    code = "MissingConfirmedTime"
    default_message = "Confirmed time is required when confirming a meeting."


class Conflict(PortalError):
    code = "Conflict"
    default_message = "Resource already exists."


class Unauthorized(PortalError):
    code = "Unauthorized"
    status_code = 401
    default_message = "Not authorized."


class Forbidden(PortalError):
    code = "Forbidden"
    status_code = 403
    default_message = "User not authorized to perform this action."


class NotFound(PortalError):
    code = "NotFound"
    status_code = 404
    default_message = "Resource not found."


class DependencyFailure(PortalError):
    code = "DependencyFailure"
    status_code = 500
    default_message = "Server error."

"""
Domain exceptions raised by the service layer.

Routers translate these into HTTP errors; scheduled jobs and reactions catch
them, log and report a failed result.
"""


class IkhayaError(Exception):
     """Base class for workflow errors."""


class ValidationError(IkhayaError, ValueError):
     """Input is missing or invalid; nothing was written."""


class NotFoundError(IkhayaError, LookupError):
     """A referenced lease, invoice, property or user does not exist."""


class AuthorizationError(IkhayaError, PermissionError):
     """The acting user is not allowed to perform the operation."""


class ConflictError(IkhayaError):
     """A conditional write lost to a concurrent or duplicate write."""

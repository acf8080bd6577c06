"""
Workflow Exceptions

Domain error taxonomy raised by the orchestrator and mapped to HTTP responses
by santa_api.errors. Every illegal state transition surfaces as one of these,
never as a silent no-op.
"""

from fastapi import status


class WorkflowError(Exception):
    """Base class for all exchange workflow errors."""

    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = ""):
        super().__init__(message or self.__class__.__name__)
        self.message = message or self.__class__.__name__


class InvalidRequest(WorkflowError):
    """Malformed identifiers or missing fields."""

    http_status = status.HTTP_400_BAD_REQUEST


class InsufficientParticipants(InvalidRequest):
    """A derangement needs at least two distinct participants."""


class Unauthorized(WorkflowError):
    """Missing or invalid credential."""

    http_status = status.HTTP_401_UNAUTHORIZED


class Forbidden(WorkflowError):
    """Wrong role, or caller is not party to the resource."""

    http_status = status.HTTP_403_FORBIDDEN


class NotFound(WorkflowError):
    """Referenced group or record does not exist."""

    http_status = status.HTTP_404_NOT_FOUND


class Conflict(WorkflowError):
    """State-machine violation (already approved, already acknowledged, duplicate...)."""

    http_status = status.HTTP_409_CONFLICT


class NotReady(WorkflowError):
    """Assignment exists but the recipient's wish/address are not both approved."""

    http_status = status.HTTP_409_CONFLICT


class TransitionNotImplemented(WorkflowError):
    """Transition exists in the status model but has no defined behaviour yet."""

    http_status = status.HTTP_501_NOT_IMPLEMENTED


class InternalError(WorkflowError):
    """Store, codec or notification failure."""

    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR


class CodecError(InternalError):
    """Ciphertext could not be decrypted."""


class DuplicateRecordError(Exception):
    """
    Raised by a store when a write violates a unique key.

    Kept outside the WorkflowError hierarchy: the orchestrator decides whether a
    duplicate means Conflict or is individually ignorable.
    """

    def __init__(self, table: str, key: tuple):
        super().__init__(f"Duplicate key in {table}: {key}")
        self.table = table
        self.key = key

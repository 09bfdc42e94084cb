"""Domain errors raised by the catalog, generator, publisher and job engine."""

from __future__ import annotations


class ContentBuilderError(Exception):
    """Base class for all content-builder errors."""


class SourceUnavailable(ContentBuilderError):
    """The product source could not be reached or returned an error."""


class GenerationFailure(ContentBuilderError):
    """Content generation errored, timed out, or produced unusable output.

    ``error_type`` is the value recorded on the job's ``ProcessingError``.
    """

    error_type = "ai-generation"


class ContentValidationFailure(GenerationFailure):
    """Generated content was parsed but rejected by content validation."""

    error_type = "validation"

    def __init__(self, message: str, result: object | None = None):
        super().__init__(message)
        self.result = result


class NetworkFailure(GenerationFailure):
    """Transport-level failure while talking to the model API."""

    error_type = "network"


class DeploymentFailure(ContentBuilderError):
    """The publisher could not deliver content to the storefront."""

    error_type = "deployment"


class InvalidTransition(ContentBuilderError):
    """A job status change not permitted by the state machine."""

    def __init__(self, job_id: str, current: str, requested: str):
        super().__init__(f"Job {job_id}: cannot transition from '{current}' to '{requested}'")
        self.job_id = job_id
        self.current = current
        self.requested = requested


class NotFound(ContentBuilderError):
    """Unknown job, product or content record."""


class InvalidContentFile(ContentBuilderError):
    """A content file submitted for storage lacks its required fields."""

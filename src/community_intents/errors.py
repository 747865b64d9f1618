"""Error taxonomy for the intent pipeline.

Extraction misses are not errors: extractors return ``None`` or ``[]``.
``DetectorUnavailable`` and ``EnrichmentFailed`` are absorbed into fallback
paths by their callers; the rest surface to whoever drives the workflow.
"""


class IntentPipelineError(Exception):
    """Base class for all pipeline errors."""


class DetectorUnavailable(IntentPipelineError):
    """The external intent detector failed, timed out, or returned a malformed result."""


class EnrichmentFailed(IntentPipelineError):
    """The optional AI enrichment pass failed. Prior details stay intact."""


class ValidationFailed(IntentPipelineError):
    """Materialization or edit preconditions are not met.

    Carries the list of human-readable problems so the admin can fix them
    before retrying.
    """

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__("; ".join(errors))


class NotificationPartialFailure(IntentPipelineError):
    """One or more admin notification inserts failed.

    ``delivered`` holds the rows that were written; ``failed_recipients`` the
    admin ids to retry.
    """

    def __init__(self, delivered: list, failed_recipients: list[str]):
        self.delivered = delivered
        self.failed_recipients = failed_recipients
        super().__init__(
            f"{len(failed_recipients)} admin notification(s) failed: "
            f"{', '.join(failed_recipients)}"
        )


class PersistenceFailure(IntentPipelineError):
    """A store read or write failed."""


class DuplicateIntentError(PersistenceFailure):
    """An intent already exists for the message (unique message_id)."""

    def __init__(self, message_id: str):
        self.message_id = message_id
        super().__init__(f"Intent already exists for message {message_id}")


class IntentNotFound(IntentPipelineError):
    """No stored intent matches the given id."""


class NotAuthorized(IntentPipelineError):
    """The acting user lacks admin privileges for the community."""

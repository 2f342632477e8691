"""Exception hierarchy for the SEO content agent.

Provider failures are recovered inside the parallel generator; every other
error here propagates to the caller of a cycle.
"""

from __future__ import annotations


class ContentAgentError(Exception):
    """Base class for all content agent errors."""


class ConfigurationError(ContentAgentError):
    """Required credentials or configuration are missing."""


class ProviderError(ContentAgentError):
    """A single LLM vendor call failed (auth, rate limit, timeout, bad response)."""

    def __init__(self, writer: str, message: str):
        self.writer = writer
        super().__init__(f"[{writer}] {message}")


class AllProvidersFailedError(ContentAgentError):
    """Every dispatched provider call failed in one generation cycle."""

    def __init__(self, errors: dict[str, str]):
        self.errors = errors
        details = "; ".join(f"{name}: {err}" for name, err in errors.items())
        super().__init__(f"All AI writers failed to generate content ({details})")


class NoArticlesError(ContentAgentError):
    """Selection was attempted on an empty set of articles."""


class InvalidStateError(ContentAgentError):
    """An article workflow transition was attempted out of order."""


class ExternalServiceError(ContentAgentError):
    """The CMS, the datastore or another external service call failed."""


class OutlineValidationError(ContentAgentError):
    """An inbound outline payload did not match the expected schema.

    Attributes:
        errors: list of {"field": ..., "message": ...} dicts.
    """

    def __init__(self, errors: list[dict[str, str]]):
        self.errors = errors
        summary = ", ".join(f"{e['field']}: {e['message']}" for e in errors)
        super().__init__(f"Invalid outline payload ({summary})")


class NotFoundError(ContentAgentError):
    """A referenced record does not exist in the datastore."""

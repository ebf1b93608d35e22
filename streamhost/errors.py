"""Error taxonomy shared by the collaborators and job bodies."""

from __future__ import annotations


class StreamHostError(Exception):
    """Base class for every error raised by streamhost."""


class GatewayError(StreamHostError):
    """HTTP or network failure talking to the data gateway."""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status
        self.message = message

    def __str__(self) -> str:
        if self.status is None:
            return self.message
        return f"{self.status}: {self.message}"


class GenerationError(StreamHostError):
    """Text completion failed or returned unusable structured output."""


class SpeechError(StreamHostError):
    """Speech synthesis or audio upload failed."""


class ValidationError(StreamHostError):
    """A generated value is outside the set the presentation layer accepts."""

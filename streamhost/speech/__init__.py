"""Speech synthesis services."""

from streamhost.speech.service import DisabledSpeechService, HttpSpeechService, SpeechService

__all__ = ["SpeechService", "HttpSpeechService", "DisabledSpeechService"]

"""Speech synthesis and audio upload."""

from __future__ import annotations

from abc import ABC, abstractmethod

import httpx
from loguru import logger

from streamhost.errors import SpeechError
from streamhost.utils.helpers import now_ms, truncate


class SpeechService(ABC):
    """Turns text into a publicly reachable audio URL."""

    @abstractmethod
    async def synthesize(self, text: str) -> str:
        """Return the audio URL, or raise SpeechError."""


class DisabledSpeechService(SpeechService):
    """Used when speech is switched off; callers fall back to no audio."""

    async def synthesize(self, text: str) -> str:
        raise SpeechError("Speech synthesis is disabled")


class HttpSpeechService(SpeechService):
    """Synthesize MP3 through an OpenAI-compatible ``/audio/speech`` endpoint
    and upload it to a storage zone that serves files from a public CDN base.

    The storage API answers a successful upload with HTTP 201.
    """

    def __init__(
        self,
        agent_id: str,
        tts_url: str,
        storage_url: str,
        storage_zone: str,
        public_base_url: str,
        api_key: str = "",
        storage_access_key: str = "",
        model: str = "tts-1",
        voice: str = "nova",
        timeout_s: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.agent_id = agent_id
        self.tts_url = tts_url
        self.storage_url = storage_url.rstrip("/")
        self.storage_zone = storage_zone.strip("/")
        self.public_base_url = public_base_url.rstrip("/")
        self.api_key = api_key
        self.storage_access_key = storage_access_key
        self.model = model
        self.voice = voice
        self._client = httpx.AsyncClient(timeout=timeout_s, transport=transport)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def synthesize(self, text: str) -> str:
        if not text.strip():
            raise SpeechError("Nothing to synthesize")
        logger.debug("Speech: synthesizing '{}'", truncate(text, 60))
        audio = await self._generate(text)
        return await self._upload(audio)

    async def _generate(self, text: str) -> bytes:
        headers = {"Authorization": f"Bearer {self.api_key}"} if self.api_key else {}
        try:
            r = await self._client.post(
                self.tts_url,
                headers=headers,
                json={"model": self.model, "voice": self.voice, "input": text, "response_format": "mp3"},
            )
            r.raise_for_status()
        except httpx.HTTPError as e:
            raise SpeechError(f"Speech generation failed: {e}") from e
        if not r.content:
            raise SpeechError("Speech generation returned no audio")
        return r.content

    async def _upload(self, audio: bytes) -> str:
        file_name = f"{self.agent_id}-{now_ms()}.mp3"
        url = f"{self.storage_url}/{self.storage_zone}/{file_name}"
        try:
            r = await self._client.put(
                url,
                content=audio,
                headers={"AccessKey": self.storage_access_key, "Content-Type": "audio/mpeg"},
            )
        except httpx.HTTPError as e:
            raise SpeechError(f"Audio upload failed: {e}") from e
        if r.status_code != 201:
            raise SpeechError(f"Audio upload failed: {r.status_code} {r.text[:200]}")

        public_url = f"{self.public_base_url}/{file_name}"
        logger.info("Speech: uploaded {}", public_url)
        return public_url

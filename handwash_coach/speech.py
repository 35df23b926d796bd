"""
Eleven Labs text-to-speech sink for coaching announcements.
"""
import logging
import os
import threading
from typing import Callable, Optional, Tuple

from dotenv import load_dotenv
from elevenlabs import ElevenLabs
from elevenlabs.play import play

from .config import SpeechConfig
from .types import AnnounceRequest, SpeechDone

logger = logging.getLogger(__name__)

DoneCallback = Callable[[SpeechDone], None]


class ElevenLabsSpeaker:
    """
    Fire-and-forget speech on a worker thread.

    At most one utterance is in flight. A request arriving while speaking
    waits in a single slot and is spoken next; a newer request replaces it,
    and the replaced request is completed without being spoken. on_done is
    called exactly once for every request, even when synthesis or playback
    fails.
    """

    def __init__(self, cfg: SpeechConfig, api_key: Optional[str] = None):
        load_dotenv()
        api_key = api_key or os.getenv("ELEVEN_LABS_API_KEY")
        if not api_key:
            raise RuntimeError("ELEVEN_LABS_API_KEY not found! Add it to your .env file")
        self.cfg = cfg
        self.client = ElevenLabs(api_key=api_key)
        self._lock = threading.Lock()
        self._speaking = False
        self._queued: Optional[Tuple[AnnounceRequest, DoneCallback]] = None

    @property
    def is_speaking(self) -> bool:
        return self._speaking

    def announce(self, request: AnnounceRequest, on_done: DoneCallback) -> None:
        replaced = None
        with self._lock:
            if self._speaking:
                replaced, self._queued = self._queued, (request, on_done)
                start = False
            else:
                self._speaking = True
                start = True

        if replaced is not None:
            old_request, old_done = replaced
            logger.debug(f"Speaker busy, skipping: {old_request.text}")
            old_done(SpeechDone(generation=old_request.generation))
        if start:
            worker = threading.Thread(target=self._run, args=(request, on_done), daemon=True)
            worker.start()

    def _run(self, request: AnnounceRequest, on_done: DoneCallback) -> None:
        current: Optional[Tuple[AnnounceRequest, DoneCallback]] = (request, on_done)
        while current is not None:
            request, on_done = current
            self._speak(request)
            with self._lock:
                current, self._queued = self._queued, None
                if current is None:
                    self._speaking = False
            on_done(SpeechDone(generation=request.generation))

    def _speak(self, request: AnnounceRequest) -> None:
        try:
            audio_generator = self.client.text_to_speech.convert(
                text=request.text,
                voice_id=self.cfg.voice_id,
                model_id=self.cfg.model_id,
                output_format=self.cfg.output_format,
            )
            audio_bytes = b"".join(audio_generator)
            logger.debug(f"Generated {len(audio_bytes)} bytes of audio")
            play(audio_bytes)
        except Exception as e:
            logger.error(f"❌ Speech failed for '{request.text}': {e}")

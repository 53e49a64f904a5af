"""
Speech playback for a generated plan.

The remote text-to-speech endpoint is advisory: it may hand back audio,
but usually the text is read by a local synthesizer. Playback is a
three-state machine (idle, speaking, paused) owned by SpeechPlayback.
"""
import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Protocol

from app.core.logger import logger
from app.models.plan import FitnessPlan
from app.services.speech_text import create_diet_tts_text, create_workout_tts_text

# Synthesizer termination reasons that count as a normal end of speech
NORMAL_TERMINATIONS = frozenset({"interrupted", "canceled"})


class SpeechError(RuntimeError):
    """The synthesizer failed for a reason other than interruption."""


class PlaybackState(str, Enum):
    IDLE = "idle"
    SPEAKING = "speaking"
    PAUSED = "paused"


@dataclass
class SpeechOptions:
    voice: Optional[str] = None
    rate: float = 1.0
    pitch: float = 1.0
    volume: float = 1.0
    language: str = "en-US"
    use_remote: bool = False


class Synthesizer(Protocol):
    """Local speech engine. Callbacks may be invoked from any thread."""

    def speak(
        self,
        text: str,
        options: SpeechOptions,
        on_end: Callable[[], None],
        on_error: Callable[[str], None],
    ) -> None: ...

    def pause(self) -> None: ...

    def resume(self) -> None: ...

    def cancel(self) -> None: ...


class AudioPlayer(Protocol):
    async def play(self, audio_url: str) -> None: ...


RemoteSpeech = Callable[[str, str, str], Optional[str]]


class SpeechPlayback:
    def __init__(
        self,
        synthesizer: Synthesizer,
        remote: Optional[RemoteSpeech] = None,
        audio_player: Optional[AudioPlayer] = None,
    ):
        self.synthesizer = synthesizer
        self.remote = remote
        self.audio_player = audio_player
        self._state = PlaybackState.IDLE
        self._pending: Optional[asyncio.Future] = None

    @property
    def state(self) -> PlaybackState:
        return self._state

    def status(self) -> dict:
        return {
            "isPlaying": self._state is not PlaybackState.IDLE,
            "isPaused": self._state is PlaybackState.PAUSED,
        }

    async def speak(self, text: str, options: Optional[SpeechOptions] = None) -> None:
        """
        Read text aloud and return when speech ends.

        Raises:
            SpeechError: If the synthesizer fails with a reason other than
                "interrupted" or "canceled"
        """
        options = options or SpeechOptions()

        if options.use_remote and await self._play_remote(text, options):
            return

        if self._state is not PlaybackState.IDLE:
            self.stop()

        loop = asyncio.get_running_loop()
        pending = loop.create_future()
        self._pending = pending

        def on_end() -> None:
            loop.call_soon_threadsafe(self._settle, pending, None)

        def on_error(reason: str) -> None:
            loop.call_soon_threadsafe(self._settle, pending, reason)

        self._state = PlaybackState.SPEAKING
        try:
            self.synthesizer.speak(text, options, on_end, on_error)
        except Exception as e:
            self._state = PlaybackState.IDLE
            self._pending = None
            raise SpeechError(f"Failed to start TTS: {e}") from e

        await pending

    async def speak_plan(self, plan: FitnessPlan, section: str = "workout",
                         options: Optional[SpeechOptions] = None) -> None:
        if section == "workout":
            text = create_workout_tts_text(plan.workoutPlan)
        else:
            text = create_diet_tts_text(plan.dietPlan)
        await self.speak(text, options)

    def pause(self) -> None:
        if self._state is PlaybackState.SPEAKING:
            self.synthesizer.pause()
            self._state = PlaybackState.PAUSED

    def resume(self) -> None:
        if self._state is PlaybackState.PAUSED:
            self.synthesizer.resume()
            self._state = PlaybackState.SPEAKING

    def stop(self) -> None:
        self.synthesizer.cancel()
        self._state = PlaybackState.IDLE
        if self._pending is not None and not self._pending.done():
            self._pending.set_result(None)
        self._pending = None

    def _settle(self, pending: asyncio.Future, reason: Optional[str]) -> None:
        if pending.done():
            return
        if pending is self._pending:
            self._state = PlaybackState.IDLE
            self._pending = None

        if reason is None or reason in NORMAL_TERMINATIONS:
            if reason:
                logger.info(f"TTS ended early ({reason})")
            pending.set_result(None)
        else:
            logger.error(f"TTS Error: {reason}")
            pending.set_exception(SpeechError(f"TTS Error: {reason}"))

    async def _play_remote(self, text: str, options: SpeechOptions) -> bool:
        """Try server audio; False means the local synthesizer should speak."""
        if self.remote is None or self.audio_player is None:
            return False

        try:
            audio_url = await asyncio.to_thread(
                self.remote, text, options.voice or "Zephyr", options.language
            )
        except Exception as e:
            logger.warning(f"Remote TTS failed, falling back to local synthesizer: {e}")
            return False

        if not audio_url:
            return False

        if self._state is not PlaybackState.IDLE:
            self.stop()
        self._state = PlaybackState.SPEAKING
        try:
            await self.audio_player.play(audio_url)
        except Exception as e:
            logger.warning(f"Audio playback failed, falling back to local synthesizer: {e}")
            return False
        finally:
            self._state = PlaybackState.IDLE
        return True

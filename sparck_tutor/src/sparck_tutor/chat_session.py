"""
Chat Session Orchestrator

Drives one practice conversation: records the learner's message, lets the
correction engine answer, and logs the reply and any mistakes.

Write ordering: the learner's message is saved before the engine runs, and
the reply is saved together with its mistakes afterwards. A reader between
the two saves sees a message waiting for a reply, never a reply without
its message.
"""

import asyncio
from typing import Optional

from sparck_tutor.clock import SystemClock
from sparck_tutor.config import TutorSettings
from sparck_tutor.correction import CorrectionEngine, TutorReply
from sparck_tutor.logger import get_logger, setup_logging
from sparck_tutor.state import ROLE_ASSISTANT, ROLE_USER, StateDocument
from sparck_tutor.state_store import StateStore
from sparck_tutor.storage import FileStorageSlot
from sparck_tutor.streak import complete_lesson, update_streak

logger = get_logger(__name__)

GREETING = "Salut! 😊 You’re at a café. Start by greeting me and ordering a drink."


class ChatSession:
    """
    Practice chat bound to a state store.

    Every call reloads the document from the store, so the session holds no
    state of its own between calls.
    """

    def __init__(
        self,
        store: StateStore,
        engine: Optional[CorrectionEngine] = None,
        clock=None,
        typing_delay: float = 0.0
    ):
        """
        Initialize ChatSession.

        Args:
            store: State store to read and write
            engine: Correction engine (defaults to the built-in rules)
            clock: Object with today() and now() (defaults to SystemClock)
            typing_delay: Seconds to wait before composing the reply
        """
        self.store = store
        self.engine = engine or CorrectionEngine()
        self.clock = clock or SystemClock()
        self.typing_delay = max(0.0, typing_delay)

    @classmethod
    def from_settings(cls, settings: Optional[TutorSettings] = None, **kwargs) -> "ChatSession":
        """
        Build a session persisting to the file slot named in settings.

        Also sets up logging at the configured level.
        """
        settings = settings or TutorSettings.from_env()
        setup_logging(level=settings.log_level_number)
        store = StateStore(FileStorageSlot(settings.state_dir, settings.storage_key))
        return cls(store, typing_delay=settings.typing_delay, **kwargs)

    def ensure_greeting(self) -> StateDocument:
        """Seed the opening tutor message when the transcript is empty."""
        state = self.store.load()
        if not state.chat_log:
            state.append_chat(ROLE_ASSISTANT, GREETING, self.clock.now())
            self.store.save(state)
        return state

    async def submit_user_message(self, text: str) -> Optional[TutorReply]:
        """
        Submit a learner message and record the tutor's reply.

        Args:
            text: Learner input

        Returns:
            The TutorReply, or None when the input was blank or could not be saved
        """
        cleaned = (text or "").strip()
        if not cleaned:
            return None

        state = self.store.load()
        update_streak(state, self.clock.today())
        state.append_chat(ROLE_USER, cleaned, self.clock.now())
        if not self.store.save(state):
            # No reply may be stored without its message
            logger.error("Learner message could not be saved, skipping reply")
            return None
        logger.debug("Learner message saved", data={"streak": state.streak, "chat_entries": len(state.chat_log)})

        if self.typing_delay:
            await asyncio.sleep(self.typing_delay)

        current = self.store.load()
        reply = self.engine.evaluate(cleaned)

        timestamp = self.clock.now()
        current.append_chat(ROLE_ASSISTANT, reply.message, timestamp)
        for mistake in reply.mistakes:
            current.append_mistake(
                category=mistake.category,
                original=mistake.original,
                corrected=mistake.corrected,
                explanation=mistake.explanation,
                timestamp=timestamp
            )
        self.store.save(current)

        if reply.mistakes:
            logger.success(
                f"Logged {len(reply.mistakes)} correction(s)",
                data={"categories": [m.category for m in reply.mistakes]}
            )
        else:
            logger.debug("No corrections for learner message")

        return reply

    def complete_lesson(self) -> StateDocument:
        """Record a finished lesson (streak + completed sessions)."""
        state = self.store.load()
        complete_lesson(state, self.clock.today())
        self.store.save(state)
        logger.info(f"Lesson completed (sessions={state.sessions_completed}, streak={state.streak})")
        return state

    def clear_chat(self) -> StateDocument:
        """Empty the transcript, keeping progress and mistakes."""
        state = self.store.clear_chat(self.store.load())
        self.store.save(state)
        logger.info("Chat reset")
        return state

    def reset_progress(self) -> StateDocument:
        """Reset progress while keeping profile and accounts."""
        state = self.store.reset_progress(self.store.load())
        self.store.save(state)
        logger.info("Progress reset")
        return state

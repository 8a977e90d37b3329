"""
State Store

Owns the persisted StateDocument. Load always yields a complete document
(defaults fill whatever is missing or unreadable); save writes the whole
document through the storage slot in one replace.
"""

import json
import logging
from typing import Optional

from sparck_tutor.state import StateDocument, document_from_dict
from sparck_tutor.storage import StorageSlot, MemoryStorageSlot

logger = logging.getLogger(__name__)


class StateStore:
    """
    Handle on the single persisted state document.

    Each operation should load a fresh copy, mutate it, save it and drop it.
    The store keeps no document in memory between calls.
    """

    def __init__(self, slot: Optional[StorageSlot] = None):
        """
        Initialize StateStore.

        Args:
            slot: Storage slot to persist into (defaults to an in-memory slot)
        """
        self.slot = slot if slot is not None else MemoryStorageSlot()

    def load(self) -> StateDocument:
        """
        Load the document.

        Returns defaults when nothing is stored or the stored text cannot be
        parsed into a document. Never raises for bad data.
        """
        raw = self.slot.read()
        if not raw:
            return StateDocument()

        try:
            data = json.loads(raw)
            return document_from_dict(data)
        except (ValueError, TypeError, KeyError, AttributeError, OverflowError, RecursionError) as e:
            logger.warning(f"⚠️ [StateStore] Stored state in slot '{self.slot.name}' is malformed, using defaults: {e}")
            return StateDocument()

    def save(self, state: StateDocument) -> bool:
        """
        Persist the full document.

        Args:
            state: Document to save

        Returns:
            True if saved, False if the slot could not be written
        """
        payload = json.dumps(state.to_dict(), ensure_ascii=False)
        try:
            self.slot.write(payload)
        except OSError as e:
            logger.error(f"❌ [StateStore] Error saving state to slot '{self.slot.name}': {e}", exc_info=True)
            return False
        return True

    def reset_progress(self, state: StateDocument) -> StateDocument:
        """
        Clear progress while keeping profile and account data.

        Zeroes streak and completed sessions, forgets the last active day,
        and empties both logs.
        """
        state.streak = 0
        state.last_active_day = None
        state.sessions_completed = 0
        state.chat_log = []
        state.mistake_log = []
        return state

    def clear_chat(self, state: StateDocument) -> StateDocument:
        """Empty the chat transcript only."""
        state.chat_log = []
        return state

    def export(self, state: Optional[StateDocument] = None) -> str:
        """
        Serialize a document as pretty-printed JSON for download.

        Args:
            state: Document to export (loads the stored one when omitted)
        """
        if state is None:
            state = self.load()
        return json.dumps(state.to_dict(), indent=2, ensure_ascii=False)

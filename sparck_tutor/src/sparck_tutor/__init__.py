"""Sparck tutor: learner state and rule-based French corrections"""
from .chat_session import ChatSession
from .correction import CorrectionEngine, CorrectionRule, PatternRule, TutorReply
from .state import StateDocument
from .state_store import StateStore

__all__ = [
    "ChatSession",
    "CorrectionEngine",
    "CorrectionRule",
    "PatternRule",
    "TutorReply",
    "StateDocument",
    "StateStore",
]

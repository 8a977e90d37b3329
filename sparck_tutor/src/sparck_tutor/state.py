"""
State Document Data Model

Defines the persisted learner state: profile, streak bookkeeping, the chat
transcript and the mistake log, plus the account subtree owned by the
login pages.
"""

import uuid
from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any


ROLE_USER = "user"
ROLE_ASSISTANT = "assistant"
CHAT_ROLES = (ROLE_USER, ROLE_ASSISTANT)


def new_entry_id() -> str:
    """Generate a log entry id, unique for the lifetime of a document."""
    return uuid.uuid4().hex


@dataclass
class LearnerProfile:
    """Learner profile shown on the dashboard."""
    name: str = "Learner"
    level: str = "A2"  # CEFR level label
    goal: str = "Conversation"
    daily_minutes: int = 10

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "level": self.level,
            "goal": self.goal,
            "dailyMinutes": self.daily_minutes,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LearnerProfile":
        defaults = cls()
        minutes = data.get("dailyMinutes", defaults.daily_minutes)
        return cls(
            name=str(data.get("name", defaults.name)),
            level=str(data.get("level", defaults.level)),
            goal=str(data.get("goal", defaults.goal)),
            daily_minutes=max(0, int(minutes)),
        )


@dataclass(frozen=True)
class ChatEntry:
    """One message in the practice transcript."""
    id: str
    role: str  # "user" or "assistant"
    content: str
    timestamp: str  # ISO-8601

    def to_dict(self) -> Dict[str, str]:
        return {
            "id": self.id,
            "role": self.role,
            "content": self.content,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ChatEntry":
        role = data["role"]
        if role not in CHAT_ROLES:
            raise ValueError(f"Unknown chat role: {role!r}")
        return cls(
            id=str(data["id"]),
            role=role,
            content=str(data.get("content", "")),
            # Older documents stored the timestamp under "ts"
            timestamp=str(data.get("timestamp", data.get("ts", ""))),
        )


@dataclass(frozen=True)
class MistakeEntry:
    """One logged correction."""
    id: str
    category: str
    original: str
    corrected: str
    explanation: str
    timestamp: str  # ISO-8601

    def to_dict(self) -> Dict[str, str]:
        return {
            "id": self.id,
            "category": self.category,
            "original": self.original,
            "corrected": self.corrected,
            "explanation": self.explanation,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MistakeEntry":
        return cls(
            id=str(data["id"]),
            category=str(data.get("category", "")),
            original=str(data.get("original", "")),
            corrected=str(data.get("corrected", "")),
            explanation=str(data.get("explanation", "")),
            timestamp=str(data.get("timestamp", data.get("ts", ""))),
        )


def _default_auth() -> Dict[str, Any]:
    return {"isLoggedIn": False, "currentEmail": None}


@dataclass
class StateDocument:
    """
    The single persisted state document.

    `auth` and `users` belong to the login pages and are carried verbatim.
    `extras` keeps top-level keys this version does not know about so that
    a save never drops data written by a newer schema.
    """
    profile: LearnerProfile = field(default_factory=LearnerProfile)
    streak: int = 0
    last_active_day: Optional[str] = None  # YYYY-MM-DD
    sessions_completed: int = 0
    chat_log: List[ChatEntry] = field(default_factory=list)
    mistake_log: List[MistakeEntry] = field(default_factory=list)
    auth: Dict[str, Any] = field(default_factory=_default_auth)
    users: List[Dict[str, Any]] = field(default_factory=list)
    extras: Dict[str, Any] = field(default_factory=dict)

    def append_chat(self, role: str, content: str, timestamp: str) -> ChatEntry:
        """Append a chat entry and return it."""
        if role not in CHAT_ROLES:
            raise ValueError(f"Unknown chat role: {role!r}")
        entry = ChatEntry(id=new_entry_id(), role=role, content=content, timestamp=timestamp)
        self.chat_log.append(entry)
        return entry

    def append_mistake(
        self,
        category: str,
        original: str,
        corrected: str,
        explanation: str,
        timestamp: str
    ) -> MistakeEntry:
        """Append a mistake entry and return it."""
        entry = MistakeEntry(
            id=new_entry_id(),
            category=category,
            original=original,
            corrected=corrected,
            explanation=explanation,
            timestamp=timestamp
        )
        self.mistake_log.append(entry)
        return entry

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.extras)
        data.update({
            "auth": dict(self.auth),
            "users": [dict(u) for u in self.users],
            "profile": self.profile.to_dict(),
            "streak": self.streak,
            "lastActiveDay": self.last_active_day,
            "sessionsCompleted": self.sessions_completed,
            "chatLog": [entry.to_dict() for entry in self.chat_log],
            "mistakeLog": [entry.to_dict() for entry in self.mistake_log],
        })
        return data


# Key names used by the first release of the app
LEGACY_KEYS = {
    "user": "profile",
    "chat": "chatLog",
    "mistakes": "mistakeLog",
}

KNOWN_KEYS = {
    "auth", "users", "profile", "streak", "lastActiveDay",
    "sessionsCompleted", "chatLog", "mistakeLog",
}


def default_document_dict() -> Dict[str, Any]:
    """Serialized form of a fresh document."""
    return StateDocument().to_dict()


def document_from_dict(data: Dict[str, Any]) -> StateDocument:
    """
    Build a StateDocument from a serialized dict.

    The dict is shallow-merged onto the defaults: persisted values win for
    every top-level key present, everything missing comes from defaults.

    Raises:
        TypeError, ValueError, KeyError: if a recognized key holds a value
        of the wrong shape.
    """
    if not isinstance(data, dict):
        raise TypeError(f"State document must be an object, got {type(data).__name__}")

    normalized: Dict[str, Any] = {}
    for key, value in data.items():
        target = LEGACY_KEYS.get(key, key)
        # Current key names take precedence over legacy ones
        if target != key and target in data:
            continue
        normalized[target] = value

    merged = {**default_document_dict(), **normalized}

    profile = merged["profile"]
    if not isinstance(profile, dict):
        raise TypeError("profile must be an object")
    auth = merged["auth"]
    if not isinstance(auth, dict):
        raise TypeError("auth must be an object")

    last_active_day = merged["lastActiveDay"]
    if last_active_day is not None and not isinstance(last_active_day, str):
        raise TypeError("lastActiveDay must be a string or null")

    return StateDocument(
        profile=LearnerProfile.from_dict(profile),
        streak=max(0, int(merged["streak"] or 0)),
        last_active_day=last_active_day or None,
        sessions_completed=max(0, int(merged["sessionsCompleted"] or 0)),
        chat_log=[ChatEntry.from_dict(e) for e in merged["chatLog"]],
        mistake_log=[MistakeEntry.from_dict(e) for e in merged["mistakeLog"]],
        auth={**_default_auth(), **auth},
        users=[dict(u) for u in merged["users"]],
        extras={k: v for k, v in normalized.items() if k not in KNOWN_KEYS},
    )

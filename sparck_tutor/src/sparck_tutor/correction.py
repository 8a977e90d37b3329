"""
Correction Engine

Rule-based tutor: each rule looks for one known mistake signature in the
learner's text and, when it fires, proposes a targeted rewrite. The engine
runs every rule, surfaces the first two corrections, and always closes with
a follow-up prompt.
"""

import random
import re
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence


SEGMENT_CORRECTION = "correction"
SEGMENT_ALSO = "also"
SEGMENT_ENCOURAGEMENT = "encouragement"
SEGMENT_FOLLOW_UP = "follow_up"

MAX_SURFACED_MISTAKES = 2

ENCOURAGEMENT = "Nice! ✅ Now say it again with one extra detail (size, sugar, or “to go”)."

FOLLOW_UP_PROMPTS = (
    "Sur place ou à emporter ?",
    "Tu veux un café ou un thé ?",
    "Avec du sucre ?",
    "Quelle taille (petit, moyen, grand) ?",
)


@dataclass(frozen=True)
class MistakeRecord:
    """A detected mistake, before it is stamped and logged."""
    category: str
    original: str
    corrected: str
    explanation: str


@dataclass(frozen=True)
class ResponseSegment:
    """One block of the tutor reply."""
    kind: str  # correction, also, encouragement, follow_up
    text: str  # corrected sentence, encouragement or prompt
    explanation: Optional[str] = None


@dataclass
class TutorReply:
    """Result of evaluating one learner utterance."""
    segments: List[ResponseSegment] = field(default_factory=list)
    mistakes: List[MistakeRecord] = field(default_factory=list)
    message: str = ""

    @property
    def follow_up(self) -> Optional[str]:
        for segment in self.segments:
            if segment.kind == SEGMENT_FOLLOW_UP:
                return segment.text
        return None


def keep_case(replacement: str) -> Callable[["re.Match"], str]:
    """Build a re.sub callback that keeps the leading capital of the match."""
    def _sub(match: "re.Match") -> str:
        found = match.group(0)
        if found[:1].isupper():
            return replacement[:1].upper() + replacement[1:]
        return replacement
    return _sub


class CorrectionRule:
    """Base class for correction rules."""

    category: str = ""

    def match(self, text: str) -> Optional[MistakeRecord]:
        """Return a MistakeRecord if the rule fires on `text`, else None."""
        raise NotImplementedError


class PatternRule(CorrectionRule):
    """
    Regex rule: fires when `trigger` matches and `unless` (if set) does not,
    then rewrites every occurrence of `target` with `replacement`.
    """

    def __init__(
        self,
        category: str,
        trigger: str,
        replacement: str,
        explanation: str,
        target: Optional[str] = None,
        unless: Optional[str] = None
    ):
        self.category = category
        self.trigger: re.Pattern = re.compile(trigger, re.IGNORECASE)
        self.target: re.Pattern = re.compile(target or trigger, re.IGNORECASE)
        self.unless: Optional[re.Pattern] = re.compile(unless, re.IGNORECASE) if unless else None
        self.replacement = replacement
        self.explanation = explanation

    def match(self, text: str) -> Optional[MistakeRecord]:
        if not self.trigger.search(text):
            return None
        if self.unless is not None and self.unless.search(text):
            return None
        return MistakeRecord(
            category=self.category,
            original=text,
            corrected=self.target.sub(keep_case(self.replacement), text),
            explanation=self.explanation,
        )

    def __repr__(self) -> str:
        return f"PatternRule({self.category!r}, {self.trigger.pattern!r})"


def default_rules() -> List[CorrectionRule]:
    """Built-in café-ordering rules, in priority order."""
    return [
        PatternRule(
            category="Spelling",
            trigger=r"cafe\b",
            unless=r"café",
            replacement="café",
            explanation="In French, 'café' uses an accent: café.",
        ),
        PatternRule(
            category="Politeness",
            trigger=r"^\s*(bonjour[, ]*)?je veux\b",
            target=r"je veux",
            replacement="je voudrais",
            explanation="Use 'Je voudrais' to sound more polite than 'Je veux'.",
        ),
        PatternRule(
            category="Spelling",
            trigger=r"s\s*il\s*vous\s*plait",
            unless=r"s['’]il",
            replacement="s’il vous plaît",
            explanation="Write: s’il vous plaît (apostrophe + accent).",
        ),
    ]


def render_plain_text(segments: Sequence[ResponseSegment]) -> str:
    """Render reply segments as the plain text stored in the chat log."""
    blocks = []
    for segment in segments:
        if segment.kind == SEGMENT_CORRECTION:
            blocks.append(f"Correction: {segment.text} ✅\n{segment.explanation}")
        elif segment.kind == SEGMENT_ALSO:
            blocks.append(f"Also: {segment.text} ✅\n{segment.explanation}")
        else:
            blocks.append(segment.text)
    return "\n\n".join(blocks).strip()


class CorrectionEngine:
    """
    Runs the rule pipeline and composes the tutor reply.

    Rules are independent; all matches are kept in rule order (not position
    in the text). Only the first two are echoed back, but every match is
    returned for logging.
    """

    def __init__(
        self,
        rules: Optional[Sequence[CorrectionRule]] = None,
        follow_ups: Sequence[str] = FOLLOW_UP_PROMPTS,
        rng: Optional[random.Random] = None
    ):
        """
        Initialize CorrectionEngine.

        Args:
            rules: Ordered rules (defaults to the built-in set)
            follow_ups: Candidate follow-up prompts, one is picked per reply
            rng: Random source for the follow-up pick
        """
        self.rules: List[CorrectionRule] = list(rules) if rules is not None else default_rules()
        if not follow_ups:
            raise ValueError("At least one follow-up prompt is required")
        self.follow_ups = tuple(follow_ups)
        self.rng = rng or random.Random()

    def find_mistakes(self, text: str) -> List[MistakeRecord]:
        """Run every rule against the trimmed text."""
        cleaned = text.strip()
        mistakes = []
        for rule in self.rules:
            record = rule.match(cleaned)
            if record is not None:
                mistakes.append(record)
        return mistakes

    def evaluate(self, text: str) -> TutorReply:
        """
        Evaluate a learner utterance.

        Args:
            text: Raw learner text

        Returns:
            TutorReply with all matched mistakes, display segments and the
            composed plain-text message
        """
        mistakes = self.find_mistakes(text)

        segments: List[ResponseSegment] = []
        if mistakes:
            for index, mistake in enumerate(mistakes[:MAX_SURFACED_MISTAKES]):
                segments.append(ResponseSegment(
                    kind=SEGMENT_CORRECTION if index == 0 else SEGMENT_ALSO,
                    text=mistake.corrected,
                    explanation=mistake.explanation,
                ))
        else:
            segments.append(ResponseSegment(kind=SEGMENT_ENCOURAGEMENT, text=ENCOURAGEMENT))

        segments.append(ResponseSegment(kind=SEGMENT_FOLLOW_UP, text=self.rng.choice(self.follow_ups)))

        return TutorReply(
            segments=segments,
            mistakes=mistakes,
            message=render_plain_text(segments),
        )

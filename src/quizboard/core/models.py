"""Data entities for questions, contestants and turns."""

from __future__ import annotations

import re
from dataclasses import FrozenInstanceError, dataclass, field
from types import MappingProxyType
from typing import List, Mapping, Tuple

OPTION_KEYS: Tuple[str, ...] = ("A", "B", "C", "D")
NOT_FOUND_ANSWER = "Question not found"

_WHITESPACE = re.compile(r"\s+")
_FIXED_FIELDS = frozenset({"category", "value", "prompt", "options", "correct_option"})


@dataclass(eq=False)
class QuestionRecord:
    """A single trivia item on the board.

    Every field except ``answered`` is fixed after construction; ``answered``
    flips once, through :meth:`mark_answered`.
    """

    category: str
    value: int
    prompt: str
    options: Mapping[str, str]
    correct_option: str
    answered: bool = False

    def __post_init__(self) -> None:
        if self.value <= 0:
            raise ValueError(f"Question value must be positive, got {self.value}")
        self.options = MappingProxyType(dict(self.options))
        if self.correct_option not in self.options:
            raise ValueError(
                f"Correct option {self.correct_option!r} is not one of {sorted(self.options)}"
            )
        object.__setattr__(self, "_sealed", True)

    def __setattr__(self, name: str, value: object) -> None:
        if name in _FIXED_FIELDS and getattr(self, "_sealed", False):
            raise FrozenInstanceError(f"cannot assign to field {name!r}")
        object.__setattr__(self, name, value)

    def mark_answered(self) -> None:
        self.answered = True

    def formatted(self) -> str:
        """Return a plain-text rendering used by front ends."""

        lines = [
            f"Category: {self.category} | Value: {self.value} points",
            f"Question: {self.prompt}",
            "Options:",
        ]
        for key, text in self.options.items():
            lines.append(f"  {key}. {text}")
        return "\n".join(lines)


@dataclass(frozen=True, slots=True)
class TurnRecord:
    """Immutable snapshot of one resolved turn."""

    category: str
    question_value: int
    question_text: str
    given_answer: str
    is_correct: bool
    points_earned: int
    running_total: int

    @property
    def result_label(self) -> str:
        return "CORRECT" if self.is_correct else "INCORRECT"


@dataclass(frozen=True, slots=True)
class TurnOutcome:
    """What :meth:`GameSession.submit_turn` reports back to the caller."""

    is_correct: bool
    correct_answer: str
    points_earned: int
    new_score: int

    @property
    def question_found(self) -> bool:
        return self.correct_answer != NOT_FOUND_ANSWER

    @classmethod
    def not_found(cls, current_score: int) -> "TurnOutcome":
        return cls(is_correct=False, correct_answer=NOT_FOUND_ANSWER, points_earned=0, new_score=current_score)


def player_id_for(name: str) -> str:
    """Return the log identifier for a contestant name ("Mary Ann" -> "MARY_ANN")."""

    return _WHITESPACE.sub("_", name.strip()).upper()


@dataclass(eq=False)
class Contestant:
    """A registered player; score is always the sum of the turn history."""

    name: str
    contestant_id: str = ""
    _score: int = field(default=0, init=False, repr=False)
    _history: List[TurnRecord] = field(default_factory=list, init=False, repr=False)

    @property
    def score(self) -> int:
        return self._score

    @property
    def player_id(self) -> str:
        return player_id_for(self.name)

    @property
    def turn_history(self) -> Tuple[TurnRecord, ...]:
        return tuple(self._history)

    def record_turn(
        self,
        *,
        category: str,
        question_value: int,
        question_text: str,
        given_answer: str,
        is_correct: bool,
        points_earned: int,
    ) -> TurnRecord:
        """Apply ``points_earned`` and append the matching turn record."""

        self._score += points_earned
        turn = TurnRecord(
            category=category,
            question_value=question_value,
            question_text=question_text,
            given_answer=given_answer,
            is_correct=is_correct,
            points_earned=points_earned,
            running_total=self._score,
        )
        self._history.append(turn)
        return turn


__all__ = [
    "OPTION_KEYS",
    "NOT_FOUND_ANSWER",
    "QuestionRecord",
    "TurnRecord",
    "TurnOutcome",
    "Contestant",
    "player_id_for",
]

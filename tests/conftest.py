"""Shared fixtures for quizboard tests."""

from pathlib import Path
from typing import Dict, Optional

import pytest

from quizboard.core.event_log import InteractionLog
from quizboard.core.models import QuestionRecord
from quizboard.core.session import GameSession

FIXED_TIMESTAMP = "2026-03-01T12:00:00"
OPTIONS: Dict[str, str] = {"A": "x", "B": "y", "C": "z", "D": "w"}


def make_record(category: str, value: int, prompt: str = "Q", correct: str = "A", options: Optional[Dict[str, str]] = None) -> QuestionRecord:
    return QuestionRecord(
        category=category,
        value=value,
        prompt=prompt,
        options=options or OPTIONS,
        correct_option=correct,
    )


@pytest.fixture
def log():
    """Interaction log with a frozen clock."""
    return InteractionLog(clock=lambda: FIXED_TIMESTAMP)


@pytest.fixture
def two_question_bank():
    """The two Variables questions used by the turn scenarios."""
    return [
        make_record("Variables", 100, "Q1", "B"),
        make_record("Variables", 200, "Q2", "A"),
    ]


@pytest.fixture
def session_factory(log):
    """Build a session with the given records and contestants, already started."""

    def build(records, names=("Alice", "Bob"), *, start: bool = True) -> GameSession:
        session = GameSession(log=log, session_id="GAME_TEST", loader=lambda source, fmt: list(records))
        session.ingest_questions("memory", "csv")
        for name in names:
            session.add_contestant(name)
        if start:
            session.start()
        return session

    return build


@pytest.fixture
def csv_bank(tmp_path: Path) -> Path:
    path = tmp_path / "bank.csv"
    path.write_text(
        "Category,Value,Question,OptionA,OptionB,OptionC,OptionD,CorrectAnswer\n"
        "Variables,100,Q1,x,y,z,w,b\n"
        "Variables,200,Q2,x,y,z,w,A\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def json_bank(tmp_path: Path) -> Path:
    path = tmp_path / "bank.json"
    path.write_text(
        """
        [
          {"category": "Variables", "value": 100, "question": "Q1",
           "options": {"A": "x", "B": "y", "C": "z", "D": "w"}, "correctAnswer": "b"},
          {"Category": "Variables", "Value": 200, "QuestionText": "Q2",
           "Options": {"A": "x", "B": "y", "C": "z", "D": "w"}, "CorrectAnswer": "A"}
        ]
        """,
        encoding="utf-8",
    )
    return path


@pytest.fixture
def xml_bank(tmp_path: Path) -> Path:
    path = tmp_path / "bank.xml"
    path.write_text(
        """<?xml version="1.0"?>
        <questions>
          <question>
            <category>Variables</category>
            <value>100</value>
            <questionText>Q1</questionText>
            <options><A>x</A><B>y</B><C>z</C><D>w</D></options>
            <correctAnswer>b</correctAnswer>
          </question>
          <question>
            <category>Variables</category>
            <value>200</value>
            <questionText>Q2</questionText>
            <options><A>x</A><B>y</B><C>z</C><D>w</D></options>
            <correctAnswer>A</correctAnswer>
          </question>
        </questions>
        """,
        encoding="utf-8",
    )
    return path

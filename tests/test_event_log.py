"""Tests for the interaction log and its CSV export."""

import csv
import threading

import pytest

from conftest import FIXED_TIMESTAMP
from quizboard.core.errors import ReportWriteError
from quizboard.core.event_log import CSV_HEADER, SYSTEM_ACTOR, Activity, InteractionLog

HEADER_LINE = "Case_ID,Player_ID,Activity,Timestamp,Category,Question_Value,Answer_Given,Result,Score_After_Play"


class TestRecording:
    def test_system_event_uses_category_slot_for_detail(self, log):
        log.set_session_id("GAME_1")
        event = log.record_system_event(Activity.START_GAME, "Game Started")
        assert event.actor_id == SYSTEM_ACTOR
        assert event.category == "Game Started"
        assert event.session_id == "GAME_1"
        assert event.timestamp == FIXED_TIMESTAMP
        assert event.question_value is None and event.score_after is None

    def test_session_id_change_keeps_prior_events(self, log):
        log.set_session_id("GAME_1")
        log.record_system_event(Activity.START_GAME, "first")
        log.set_session_id("GAME_2")
        log.record_system_event(Activity.START_GAME, "second")
        assert [e.session_id for e in log.events] == ["GAME_1", "GAME_2"]

    def test_custom_activity_names_are_accepted(self, log):
        log.record_detailed_event("ALICE", "Use Lifeline")
        assert log.events[0].activity == "Use Lifeline"

    def test_reset_clears_events(self, log):
        log.record_system_event(Activity.START_GAME, "x")
        log.reset()
        assert len(log) == 0
        assert log.events == ()

    def test_default_timestamp_format(self):
        event = InteractionLog().record_system_event(Activity.START_GAME, "x")
        date_part, time_part = event.timestamp.split("T")
        assert len(date_part) == 10 and len(time_part) == 8

    def test_concurrent_appends_are_all_kept(self, log):
        def worker():
            for _ in range(200):
                log.record_detailed_event("P", Activity.SELECT_CATEGORY)

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        assert len(log) == 800


class TestExport:
    def test_empty_log_exports_header_only(self, log, tmp_path):
        path = log.export(tmp_path / "nested" / "dir" / "events.csv")
        assert path.read_text(encoding="utf-8") == HEADER_LINE + "\n"
        assert ",".join(CSV_HEADER) == HEADER_LINE

    def test_rows_follow_insertion_order_with_blank_optionals(self, log):
        log.set_session_id("GAME_1")
        log.record_system_event(Activity.START_GAME, "Game Started")
        log.record_detailed_event(
            "ALICE", Activity.ANSWER_QUESTION, category="Variables", value=100, answer="B", result="Correct", score_after=100
        )

        lines = log.render_csv().splitlines()

        assert lines[0] == HEADER_LINE
        assert lines[1] == f"GAME_1,SYSTEM,Start Game,{FIXED_TIMESTAMP},Game Started,,,,"
        assert lines[2] == f"GAME_1,ALICE,Answer Question,{FIXED_TIMESTAMP},Variables,100,B,Correct,100"
        assert len(lines) == 3

    def test_negative_and_zero_scores_are_rendered(self, log):
        log.record_detailed_event("BOB", Activity.ENTER_PLAYER_NAME, category="Bob", score_after=0)
        log.record_detailed_event("BOB", Activity.ANSWER_QUESTION, score_after=-300)
        rows = list(csv.reader(log.render_csv().splitlines()))
        assert rows[1][8] == "0"
        assert rows[2][8] == "-300"

    def test_fields_with_commas_are_quoted(self, log, tmp_path):
        log.record_system_event(Activity.LOAD_FILE, "Attempting to load: a,b.csv")
        path = log.export(tmp_path / "events.csv")
        with path.open(newline="", encoding="utf-8") as handle:
            rows = list(csv.reader(handle))
        assert rows[1][4] == "Attempting to load: a,b.csv"
        assert len(rows[1]) == len(CSV_HEADER)

    def test_failed_write_keeps_events(self, log, tmp_path):
        log.record_system_event(Activity.START_GAME, "x")
        blocker = tmp_path / "file"
        blocker.write_text("not a directory", encoding="utf-8")

        with pytest.raises(ReportWriteError):
            log.export(blocker / "events.csv")

        assert len(log) == 1
        assert log.export(tmp_path / "events.csv").exists()

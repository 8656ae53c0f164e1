"""
Unit tests for ProgramSession.

The session owns config, result log and the last rendered schedule; every
mutation re-runs the replay and flags slots whose weight moved.
"""

import pytest

from application.exceptions import (
    ConfigValidationError,
    InvalidLogTargetError,
    InvalidOutcomeError,
)
from models import ResultValue
from services.program_session import ProgramSession
from tests.definitions import GZCLP_CONFIG


@pytest.fixture
def session(gzclp):
    session = ProgramSession(gzclp)
    session.generate_program(GZCLP_CONFIG)
    return session


def _changed(rows):
    return {(row.index, slot.slot_id) for row in rows for slot in row.slots if slot.is_changed}


def _squat_weights(rows):
    return [row.slot("squat-t1").weight for row in rows if row.slot("squat-t1")]


@pytest.mark.unit
class TestGenerate:
    """Tests for generate_program."""

    def test_rows_empty_before_generation(self, gzclp):
        assert ProgramSession(gzclp).rows == []

    def test_generate_renders_schedule(self, session):
        rows = session.rows

        assert len(rows) == 8
        assert rows[0].slot("squat-t1").weight == 60
        assert session.config["squat"] == 60.0

    def test_invalid_config_raises_with_field_errors(self, gzclp):
        session = ProgramSession(gzclp)

        with pytest.raises(ConfigValidationError) as exc_info:
            session.generate_program({**GZCLP_CONFIG, "squat": "heavy"})

        assert exc_info.value.field_errors == {"squat": "Must be a number"}
        assert session.config is None

    def test_generate_discards_previous_results(self, session):
        session.log_outcome(0, "squat-t1", ResultValue.SUCCESS)

        session.generate_program(GZCLP_CONFIG)

        assert len(session.result_log) == 0


@pytest.mark.unit
class TestUpdateConfig:
    """Tests for update_config."""

    def test_recomputes_weights_and_keeps_results(self, session):
        session.log_outcome(0, "squat-t1", ResultValue.SUCCESS)

        rows = session.update_config({**GZCLP_CONFIG, "squat": "80"})

        assert [rows[i].slot("squat-t1").weight for i in (0, 2)] == [80, 85]
        assert rows[0].slot("squat-t1").result is ResultValue.SUCCESS
        assert (0, "squat-t1") in _changed(rows)
        assert (1, "squat-t2") in _changed(rows)
        assert (0, "bench-t2") not in _changed(rows)

    def test_rejected_config_changes_nothing(self, session):
        before = session.rows

        with pytest.raises(ConfigValidationError):
            session.update_config({**GZCLP_CONFIG, "unit": "stone"})

        assert session.rows == before
        assert session.config["unit"] == "kg"


@pytest.mark.unit
class TestLogOutcome:
    """Tests for log_outcome."""

    def test_success_flags_later_occurrences(self, session):
        rows = session.log_outcome(0, "squat-t1", ResultValue.SUCCESS, amrap_reps=7)

        assert rows[0].slot("squat-t1").amrap_reps == 7
        assert _changed(rows) == {(2, "squat-t1"), (4, "squat-t1"), (6, "squat-t1")}

    def test_flags_reflect_only_latest_mutation(self, session):
        session.log_outcome(0, "squat-t1", ResultValue.SUCCESS)

        rows = session.log_outcome(1, "plank", ResultValue.SUCCESS)

        assert _changed(rows) == set()

    @pytest.mark.parametrize("index,slot_id", [(0, "plank"), (8, "squat-t1"), (0, "deadlift")])
    def test_invalid_target_raises_without_mutation(self, session, index, slot_id):
        with pytest.raises(InvalidLogTargetError):
            session.log_outcome(index, slot_id, ResultValue.SUCCESS)

        assert len(session.result_log) == 0
        assert session.result_log.undo_history == []

    @pytest.mark.parametrize("field,value", [("rpe", 11), ("amrap_reps", 100)])
    def test_out_of_range_outcome_raises_without_mutation(self, session, field, value):
        with pytest.raises(InvalidOutcomeError, match=field) as exc_info:
            session.log_outcome(0, "squat-t1", ResultValue.SUCCESS, **{field: value})

        assert exc_info.value.slot_id == "squat-t1"
        assert len(session.result_log) == 0
        assert session.result_log.undo_history == []

    def test_clearing_result_logs_not_attempted(self, session):
        session.log_outcome(0, "squat-t1", ResultValue.SUCCESS)

        rows = session.log_outcome(0, "squat-t1", None)

        assert rows[2].slot("squat-t1").weight == 60
        assert rows[0].slot("squat-t1").result is None


@pytest.mark.unit
class TestUndoAndReset:
    """Tests for undo_last, undo_specific and reset_all."""

    def test_undo_last_reverts_rows(self, session):
        original = session.rows
        session.log_outcome(0, "squat-t1", ResultValue.SUCCESS)

        entry = session.undo_last()

        assert entry.key == (0, "squat-t1")
        assert _squat_weights(session.rows) == _squat_weights(original)
        assert (2, "squat-t1") in _changed(session.rows)

    def test_undo_last_with_empty_log(self, session):
        assert session.undo_last() is None

    def test_undo_specific_keeps_other_results(self, session):
        session.log_outcome(0, "squat-t1", ResultValue.SUCCESS)
        session.log_outcome(1, "bench-t1", ResultValue.SUCCESS)

        session.undo_specific(0, "squat-t1")

        assert session.result_log.get(0, "squat-t1") is None
        assert session.result_log.get(1, "bench-t1") is not None
        assert session.rows[3].slot("bench-t1").weight == 42.5

    def test_reset_all_keeps_config(self, session):
        session.log_outcome(0, "squat-t1", ResultValue.SUCCESS)

        rows = session.reset_all()

        assert len(session.result_log) == 0
        assert rows[2].slot("squat-t1").weight == 60
        assert session.config["squat"] == 60.0

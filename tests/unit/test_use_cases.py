"""
Unit tests for the program use cases, run against the in-memory fakes.
"""

import pytest

from application.use_cases import (
    CreateDefinitionUseCase,
    DeleteProgramUseCase,
    ErrorCode,
    GenerateProgramUseCase,
    GetDefinitionUseCase,
    GetScheduleUseCase,
    ListDefinitionsUseCase,
    ListProgramsUseCase,
    RecordOutcomeUseCase,
    ResetProgramUseCase,
    UndoOutcomeUseCase,
    UpdateConfigUseCase,
)
from models import ResultValue
from tests.conftest import OTHER_USER_ID, TEST_USER_ID
from tests.definitions import GZCLP_CONFIG, gzclp_definition, ladder_definition, with_slot


@pytest.fixture
def repos(fake_definition_repo, fake_instance_repo):
    return fake_definition_repo, fake_instance_repo


@pytest.fixture
def instance_id(repos):
    result = GenerateProgramUseCase(*repos).execute(TEST_USER_ID, "gzclp", GZCLP_CONFIG)
    assert result.success
    return result.instance["id"]


def _weights(rows, slot_id):
    return [row.slot(slot_id).weight for row in rows if row.slot(slot_id)]


@pytest.mark.unit
class TestGenerateProgram:
    """Tests for GenerateProgramUseCase."""

    def test_creates_instance_pinned_to_latest_version(self, repos):
        definition_repo, instance_repo = repos
        definition_repo.seed([gzclp_definition(version=2)])

        result = GenerateProgramUseCase(*repos).execute(TEST_USER_ID, "gzclp", GZCLP_CONFIG)

        assert result.success
        stored = instance_repo.get_all()[0]
        assert stored["definition_version"] == 2
        assert stored["user_id"] == TEST_USER_ID
        assert stored["config"]["squat"] == 60.0
        assert stored["results"] == []
        assert stored["undo_history"] == []
        assert len(result.rows) == 8

    def test_explicit_version(self, repos):
        definition_repo, instance_repo = repos
        definition_repo.seed([gzclp_definition(version=2)])

        result = GenerateProgramUseCase(*repos).execute(
            TEST_USER_ID, "gzclp", GZCLP_CONFIG, version=1
        )

        assert result.instance["definition_version"] == 1

    def test_unknown_definition(self, repos):
        result = GenerateProgramUseCase(*repos).execute(TEST_USER_ID, "nope", {})

        assert not result.success
        assert result.error_code == ErrorCode.DEFINITION_NOT_FOUND

    def test_invalid_config_creates_nothing(self, repos):
        _, instance_repo = repos

        result = GenerateProgramUseCase(*repos).execute(
            TEST_USER_ID, "gzclp", {**GZCLP_CONFIG, "bench": "-5"}
        )

        assert result.error_code == ErrorCode.INVALID_CONFIG
        assert "bench" in result.field_errors
        assert instance_repo.count() == 0

    def test_malformed_stored_definition(self, repos):
        definition_repo, _ = repos
        definition_repo.seed([{"id": "broken", "version": 1, "days": []}])

        result = GenerateProgramUseCase(*repos).execute(TEST_USER_ID, "broken", {})

        assert result.error_code == ErrorCode.INVALID_DEFINITION

    def test_reports_unresolved_references(self, repos):
        definition_repo, _ = repos
        orphan = {
            "id": "orphan",
            "exercise_id": "squat",
            "tier": "t3",
            "stages": [{"sets": 3, "reps": 10}],
            "start_weight_key": "deadlift",
            "on_success": {"type": "add_weight"},
            "on_mid_stage_fail": {"type": "advance_stage"},
            "on_final_stage_fail": {"type": "no_change"},
        }
        definition_repo.seed([with_slot(gzclp_definition(version=3), 0, orphan)])

        result = GenerateProgramUseCase(*repos).execute(TEST_USER_ID, "gzclp", GZCLP_CONFIG)

        assert result.success
        assert set(result.reference_errors) == {"orphan"}
        assert result.rows[0].slot("orphan").unresolved


@pytest.mark.unit
class TestGetSchedule:
    """Tests for GetScheduleUseCase."""

    def test_returns_schedule_without_writing(self, repos, instance_id):
        _, instance_repo = repos

        result = GetScheduleUseCase(*repos).execute(instance_id, TEST_USER_ID)

        assert result.success
        assert _weights(result.rows, "squat-t1") == [60, 60, 60, 60]
        assert instance_repo.update_calls == 0

    def test_other_user_cannot_read(self, repos, instance_id):
        result = GetScheduleUseCase(*repos).execute(instance_id, OTHER_USER_ID)

        assert result.error_code == ErrorCode.INSTANCE_NOT_FOUND

    def test_pinned_version_survives_new_revision(self, repos, instance_id):
        definition_repo, _ = repos
        revised = gzclp_definition(version=2)
        revised["weight_increments"]["squat"] = 10
        definition_repo.seed([revised])
        RecordOutcomeUseCase(*repos).execute(
            instance_id, TEST_USER_ID, 0, "squat-t1", result=ResultValue.SUCCESS
        )

        result = GetScheduleUseCase(*repos).execute(instance_id, TEST_USER_ID)

        assert result.instance["definition_version"] == 1
        assert _weights(result.rows, "squat-t1")[1] == 65


@pytest.mark.unit
class TestRecordOutcome:
    """Tests for RecordOutcomeUseCase."""

    def test_persists_result_and_undo_entry(self, repos, instance_id):
        _, instance_repo = repos

        result = RecordOutcomeUseCase(*repos).execute(
            instance_id, TEST_USER_ID, 0, "squat-t1", result=ResultValue.SUCCESS, amrap_reps=8
        )

        assert result.success
        assert _weights(result.rows, "squat-t1") == [60, 65, 65, 65]
        assert result.rows[2].slot("squat-t1").is_changed
        stored = instance_repo.get_by_id(instance_id, TEST_USER_ID)
        assert stored["results"] == [
            {
                "workout_index": 0,
                "slot_id": "squat-t1",
                "result": "success",
                "amrap_reps": 8,
                "rpe": None,
                "note": None,
            }
        ]
        assert stored["undo_history"][0]["previous_outcome"] is None

    def test_invalid_target_writes_nothing(self, repos, instance_id):
        _, instance_repo = repos

        result = RecordOutcomeUseCase(*repos).execute(
            instance_id, TEST_USER_ID, 1, "squat-t1", result=ResultValue.SUCCESS
        )

        assert result.error_code == ErrorCode.INVALID_TARGET
        assert instance_repo.update_calls == 0

    def test_out_of_range_rpe_is_invalid_outcome(self, repos, instance_id):
        _, instance_repo = repos

        result = RecordOutcomeUseCase(*repos).execute(
            instance_id, TEST_USER_ID, 0, "squat-t1", result=ResultValue.SUCCESS, rpe=11
        )

        assert result.error_code == ErrorCode.INVALID_OUTCOME
        assert "rpe" in result.error
        assert instance_repo.update_calls == 0

    def test_unknown_instance(self, repos):
        result = RecordOutcomeUseCase(*repos).execute(
            "missing", TEST_USER_ID, 0, "squat-t1", result=ResultValue.SUCCESS
        )

        assert result.error_code == ErrorCode.INSTANCE_NOT_FOUND


@pytest.mark.unit
class TestUpdateConfig:
    """Tests for UpdateConfigUseCase."""

    def test_keeps_results(self, repos, instance_id):
        RecordOutcomeUseCase(*repos).execute(
            instance_id, TEST_USER_ID, 0, "squat-t1", result=ResultValue.SUCCESS
        )

        result = UpdateConfigUseCase(*repos).execute(
            instance_id, TEST_USER_ID, {**GZCLP_CONFIG, "squat": 100}
        )

        assert result.success
        assert _weights(result.rows, "squat-t1") == [100, 105, 105, 105]
        assert len(result.instance["results"]) == 1
        assert result.instance["config"]["squat"] == 100.0

    def test_rejected_config_is_not_saved(self, repos, instance_id):
        _, instance_repo = repos

        result = UpdateConfigUseCase(*repos).execute(
            instance_id, TEST_USER_ID, {"squat": "abc"}
        )

        assert result.error_code == ErrorCode.INVALID_CONFIG
        assert set(result.field_errors) >= {"squat", "bench", "lat_pulldown", "unit"}
        assert instance_repo.get_by_id(instance_id, TEST_USER_ID)["config"]["squat"] == 60.0


@pytest.mark.unit
class TestUndoAndReset:
    """Tests for UndoOutcomeUseCase and ResetProgramUseCase."""

    def test_undo_last(self, repos, instance_id):
        RecordOutcomeUseCase(*repos).execute(
            instance_id, TEST_USER_ID, 0, "squat-t1", result=ResultValue.SUCCESS
        )

        result = UndoOutcomeUseCase(*repos).execute(instance_id, TEST_USER_ID)

        assert result.undone.workout_index == 0
        assert result.undone.slot_id == "squat-t1"
        assert result.instance["results"] == []
        assert result.instance["undo_history"] == []
        assert result.rows[2].slot("squat-t1").is_changed

    def test_undo_with_empty_history(self, repos, instance_id):
        result = UndoOutcomeUseCase(*repos).execute(instance_id, TEST_USER_ID)

        assert result.success
        assert result.undone is None

    def test_undo_specific(self, repos, instance_id):
        record = RecordOutcomeUseCase(*repos)
        record.execute(instance_id, TEST_USER_ID, 0, "squat-t1", result=ResultValue.SUCCESS)
        record.execute(instance_id, TEST_USER_ID, 0, "bench-t2", result=ResultValue.FAIL)

        result = UndoOutcomeUseCase(*repos).execute(
            instance_id, TEST_USER_ID, workout_index=0, slot_id="squat-t1"
        )

        assert [r["slot_id"] for r in result.instance["results"]] == ["bench-t2"]
        assert len(result.instance["undo_history"]) == 1

    def test_reset(self, repos, instance_id):
        RecordOutcomeUseCase(*repos).execute(
            instance_id, TEST_USER_ID, 0, "squat-t1", result=ResultValue.SUCCESS
        )

        result = ResetProgramUseCase(*repos).execute(instance_id, TEST_USER_ID)

        assert result.instance["results"] == []
        assert result.instance["undo_history"] == []
        assert result.instance["config"]["squat"] == 60.0
        assert _weights(result.rows, "squat-t1") == [60, 60, 60, 60]

    def test_undo_bound_applies_when_loading(self, repos, instance_id):
        definition_repo, instance_repo = repos
        record = RecordOutcomeUseCase(definition_repo, instance_repo, max_undo=2)
        for index in (0, 2, 4):
            record.execute(instance_id, TEST_USER_ID, index, "squat-t1", result=ResultValue.SUCCESS)

        stored = instance_repo.get_by_id(instance_id, TEST_USER_ID)

        assert [e["workout_index"] for e in stored["undo_history"]] == [2, 4]


@pytest.mark.unit
class TestGetDefinition:
    """Tests for GetDefinitionUseCase."""

    def test_returns_definition(self, fake_definition_repo):
        result = GetDefinitionUseCase(fake_definition_repo).execute("gzclp")

        assert result.success
        assert result.definition.id == "gzclp"
        assert result.reference_errors == {}

    def test_not_found(self, fake_definition_repo):
        result = GetDefinitionUseCase(fake_definition_repo).execute("gzclp", version=9)

        assert result.error_code == ErrorCode.DEFINITION_NOT_FOUND


@pytest.mark.unit
class TestListAndDeletePrograms:
    """Tests for ListProgramsUseCase and DeleteProgramUseCase."""

    def test_lists_only_own_instances(self, repos, instance_id):
        _, instance_repo = repos
        GenerateProgramUseCase(*repos).execute(OTHER_USER_ID, "gzclp", GZCLP_CONFIG)

        result = ListProgramsUseCase(instance_repo).execute(TEST_USER_ID)

        assert result.success
        assert [i["id"] for i in result.instances] == [instance_id]

    def test_repository_failure_is_internal(self):
        class BrokenRepo:
            def list_by_user(self, user_id, limit=20, offset=0):
                raise ConnectionError("database unreachable")

        result = ListProgramsUseCase(BrokenRepo()).execute(TEST_USER_ID)

        assert result.error_code == ErrorCode.INTERNAL

    def test_delete(self, repos, instance_id):
        _, instance_repo = repos

        result = DeleteProgramUseCase(instance_repo).execute(instance_id, TEST_USER_ID)

        assert result.success
        assert instance_repo.count() == 0

    def test_delete_requires_owner(self, repos, instance_id):
        _, instance_repo = repos

        result = DeleteProgramUseCase(instance_repo).execute(instance_id, OTHER_USER_ID)

        assert result.error_code == ErrorCode.INSTANCE_NOT_FOUND
        assert instance_repo.count() == 1


@pytest.mark.unit
class TestDefinitionAuthoring:
    """Tests for CreateDefinitionUseCase and ListDefinitionsUseCase."""

    def test_create_assigns_next_version(self, fake_definition_repo):
        result = CreateDefinitionUseCase(fake_definition_repo).execute(gzclp_definition(version=5))

        assert result.success
        assert result.definition.version == 2
        stored = fake_definition_repo.get_by_id("gzclp")
        assert stored["version"] == 2
        assert stored["definition"]["version"] == 2
        assert fake_definition_repo.get_by_id("gzclp", version=1) is not None

    def test_stored_document_loads_back(self, fake_definition_repo):
        CreateDefinitionUseCase(fake_definition_repo).execute(gzclp_definition())

        result = GetDefinitionUseCase(fake_definition_repo).execute("gzclp", version=2)

        assert result.success
        assert result.definition.slots_by_id()["squat-t2"].start_weight_key == "squat-t1"

    def test_invalid_document_stores_nothing(self, fake_definition_repo):
        document = ladder_definition()
        document["exercises"] = {}

        result = CreateDefinitionUseCase(fake_definition_repo).execute(document)

        assert result.error_code == ErrorCode.INVALID_DEFINITION
        assert "unknown exercise" in result.error
        assert fake_definition_repo.get_by_id("ladder-test")["version"] == 1

    def test_list_returns_latest_revisions(self, fake_definition_repo):
        fake_definition_repo.seed([gzclp_definition(version=3)])

        result = ListDefinitionsUseCase(fake_definition_repo).execute()

        versions = {d.id: d.version for d in result.definitions}
        assert versions == {"gzclp": 3, "ladder-test": 1, "percent-test": 1, "tm-test": 1}

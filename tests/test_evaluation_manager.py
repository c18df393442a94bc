from datetime import date, datetime

import pytest

from conftest import FakeClock, make_matching, make_single_choice
from evaluation_app.core.attempt import Attempt
from evaluation_app.core.errors import AssignmentStartedError, AttemptStateError, EvaluationLockedError
from evaluation_app.core.ids import IdAllocator
from evaluation_app.core.evaluation_manager import EvaluationManager
from evaluation_app.core.models import CourseGroup, StudentRef
from evaluation_app.core.services.attempt_store import AttemptStore

NOW = datetime(2025, 1, 10, 8, 0)
OBJECTIVES = ["Recognize prime numbers"]


@pytest.fixture
def manager():
    return EvaluationManager(clock=FakeClock(NOW), id_allocator=IdAllocator())


def _create(manager, owner="prof-1", duration=30):
    return manager.create_evaluation(owner, "Quiz one", "Answer every question.", OBJECTIVES, duration)


def test_ids_are_allocated_per_manager():
    first = EvaluationManager(clock=FakeClock(NOW))
    second = EvaluationManager(clock=FakeClock(NOW))

    assert [_create(first).id, _create(first).id] == [1, 2]
    assert _create(second).id == 1


def test_list_evaluations_by_owner(manager):
    mine = _create(manager, owner="prof-1")
    _create(manager, owner="prof-2")

    assert manager.list_evaluations("prof-1") == [mine]
    assert len(manager.list_evaluations()) == 2


def test_question_editing_updates_total(manager):
    evaluation = _create(manager)
    assert manager.add_question(evaluation.id, make_single_choice(1, points=2))
    assert manager.add_question(evaluation.id, make_matching(2, points=5))
    manager.move_question(evaluation.id, 0, 1)
    manager.remove_question(evaluation.id, 1)

    assert [q.id for q in evaluation.questions] == [2]
    assert evaluation.total_score == 5


def test_editing_is_blocked_while_assigned_group_is_valid(manager):
    evaluation = _create(manager)
    group = CourseGroup(7, "Algebra", date(2025, 1, 1), date(2025, 6, 30))
    manager.assign_to_group(evaluation.id, group, datetime(2025, 1, 20, 9, 0))

    with pytest.raises(EvaluationLockedError):
        manager.add_question(evaluation.id, make_single_choice(1))
    with pytest.raises(EvaluationLockedError):
        manager.delete_evaluation(evaluation.id)
    assert evaluation.questions == ()


def test_update_evaluation_is_all_or_nothing(manager):
    evaluation = _create(manager)
    with pytest.raises(ValueError):
        manager.update_evaluation(evaluation.id, duration_minutes=60, name="abc")
    assert evaluation.duration_minutes == 30

    manager.update_evaluation(evaluation.id, name="Quiz two", randomize_questions=True)
    assert evaluation.name == "Quiz two"
    assert evaluation.randomize_questions


def test_assign_and_unassign(manager):
    evaluation = _create(manager)
    future = CourseGroup(1)
    started = CourseGroup(2)
    manager.assign_to_group(evaluation.id, future, datetime(2025, 1, 11, 9, 0))
    manager.assign_to_group(evaluation.id, started, datetime(2025, 1, 10, 7, 50))

    with pytest.raises(ValueError):
        manager.assign_to_group(evaluation.id, future, datetime(2025, 1, 12, 9, 0))
    assert [a.group.group_id for a in manager.get_active_assignments(2)] == [2]

    manager.unassign_from_group(evaluation.id, 1)
    with pytest.raises(AssignmentStartedError):
        manager.unassign_from_group(evaluation.id, 2)
    with pytest.raises(KeyError):
        manager.unassign_from_group(evaluation.id, 1)


def test_delete_and_unknown_ids(manager):
    evaluation = _create(manager)
    manager.delete_evaluation(evaluation.id)
    with pytest.raises(KeyError):
        manager.get_evaluation(evaluation.id)


def test_attempt_is_stored_once_per_student_evaluation_group(manager):
    evaluation = _create(manager)
    manager.add_question(evaluation.id, make_single_choice(1, points=4))
    group = CourseGroup(5)
    manager.assign_to_group(evaluation.id, group, NOW)
    student = StudentRef("s-9", "Luis")

    session = manager.begin_attempt(evaluation.id, student, group)
    session.select(0, 2)
    assert session.submit() == 100.0

    with pytest.raises(AttemptStateError):
        manager.begin_attempt(evaluation.id, student, group)

    stored = manager.get_attempt("s-9", evaluation.id, 5)
    assert stored is session.attempt
    assert stored.percentage == 100.0
    assert manager.list_attempts_by_evaluation(evaluation.id) == [stored]
    assert manager.list_attempts_by_student("s-9") == [stored]
    assert manager.list_attempts_by_group(5) == [stored]


def test_attempt_requires_group_assignment(manager):
    evaluation = _create(manager)
    manager.add_question(evaluation.id, make_single_choice(1))
    manager.assign_to_group(evaluation.id, CourseGroup(5), NOW)

    with pytest.raises(KeyError):
        manager.begin_attempt(evaluation.id, StudentRef("s-2"), CourseGroup(99))
    assert manager.list_attempts_by_student("s-2") == []


def test_same_student_may_take_evaluation_in_another_assigned_group(manager):
    evaluation = _create(manager)
    manager.add_question(evaluation.id, make_single_choice(1))
    for group_id in (5, 6):
        manager.assign_to_group(evaluation.id, CourseGroup(group_id), NOW)
    student = StudentRef("s-3")

    for group_id in (5, 6):
        session = manager.begin_attempt(evaluation.id, student, CourseGroup(group_id))
        session.select(0, 2)
        session.submit()

    assert len(manager.list_attempts_by_student("s-3")) == 2


def test_average_percentage(manager):
    evaluation = _create(manager)
    manager.add_question(evaluation.id, make_single_choice(1, points=4))
    group = CourseGroup(5)
    manager.assign_to_group(evaluation.id, group, NOW)
    assert manager.get_average_percentage(evaluation.id) == 0.0

    for student_id, choice in (("s-1", 2), ("s-2", 1)):
        session = manager.begin_attempt(evaluation.id, StudentRef(student_id), group)
        session.select(0, choice)
        session.submit()

    assert manager.get_average_percentage(evaluation.id) == 50.0


def test_failed_timeout_leaves_attempt_running_and_not_timed_out():
    clock = FakeClock(NOW)
    manager = EvaluationManager(clock=clock)
    evaluation = _create(manager, duration=1)
    manager.add_question(evaluation.id, make_single_choice(1))
    group = CourseGroup(5)
    manager.assign_to_group(evaluation.id, group, NOW)

    session = manager.begin_attempt(evaluation.id, StudentRef("s-4"), group)
    assert manager.add_question(evaluation.id, make_single_choice(2))

    clock.advance(minutes=2)
    with pytest.raises(AttemptStateError):
        session.tick()

    assert not session.timed_out
    assert session.is_running()
    assert manager.get_attempt("s-4", evaluation.id, 5) is None


def test_store_rejects_attempts_that_are_not_graded(manager):
    evaluation = _create(manager)
    attempt = Attempt(StudentRef("s-1"), evaluation, CourseGroup(1), NOW)

    with pytest.raises(AttemptStateError):
        AttemptStore().save(attempt)

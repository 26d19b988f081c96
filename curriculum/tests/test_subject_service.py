"""Subject authoring, review cascade and deletion."""
from __future__ import annotations

import pytest

from core.common.app_context import AppContext
from core.exceptions.errors import NotFoundError, PolicyViolationError, ValidationError
from workflow.enum.content_status import ContentStatus
from workflow.services.policy.workflow_policy import ReviewDecision


def test_seeded_subjects_are_listed(app, faculty) -> None:
    names = [s.name for s in app.subjects.list_subjects()]
    assert names[0] == "Theories of Personality"
    assert len(names) == 4
    assert [s.id for s in app.subjects.list_subjects("abnormal")] == ["s-2"]


def test_new_subject_saved_as_draft(app, faculty) -> None:
    draft = app.subjects.new_subject("Developmental Psychology", "Lifespan development")
    app.subjects.add_topic(draft)
    saved = app.subjects.save_subject(draft)

    assert saved.id.startswith("s-")
    assert saved.status is ContentStatus.DRAFT
    assert saved.author_name == "PROFESSOR"
    assert draft.id is None
    assert app.subjects.get_subject(saved.id).topic_count() == 1
    assert app.activity.fetch_logs()[0].action == "Created Subject Shell: Developmental Psychology"


def test_saving_existing_subject_resubmits(app, faculty) -> None:
    subject = app.subjects.get_subject("s-1")
    root = app.subjects.add_topic(subject)
    child = app.subjects.add_topic(subject, root.id)
    assert child.title == "New Sub-Topic"
    saved = app.subjects.save_subject(subject)
    assert saved.status is ContentStatus.PENDING
    assert saved.topics.parent_id(child.id) == root.id


def test_blank_name_is_rejected(app, faculty) -> None:
    with pytest.raises(ValidationError):
        app.subjects.save_subject(app.subjects.new_subject("  "))


def test_approval_cascades_and_purges(app, faculty, admin) -> None:
    AppContext.set_current_user(faculty)
    subject = app.subjects.get_subject("s-2")
    keep = app.subjects.add_topic(subject)
    drop = app.subjects.add_topic(subject)
    subject.topics.mark_for_removal(drop.id)
    app.subjects.save_subject(subject)

    AppContext.set_current_user(admin)
    approved = app.subjects.review_subject("s-2", ReviewDecision.APPROVE)
    assert approved.status is ContentStatus.APPROVED
    assert approved.is_fully_approved
    assert keep.id in approved.topics and drop.id not in approved.topics

    with pytest.raises(PolicyViolationError):
        app.subjects.review_subject("s-2", ReviewDecision.REVISION, "late")


def test_revision_request_leaves_topics(app, faculty, admin) -> None:
    AppContext.set_current_user(faculty)
    subject = app.subjects.get_subject("s-3")
    topic = app.subjects.add_topic(subject)
    app.subjects.save_subject(subject)

    AppContext.set_current_user(admin)
    updated = app.subjects.review_subject("s-3", ReviewDecision.REVISION, "Needs outline")
    assert updated.status is ContentStatus.REVISION_REQUESTED
    assert updated.topics.get(topic.id).status is ContentStatus.DRAFT
    assert [n.note for n in updated.revision_notes] == ["Needs outline"]


def test_review_requires_admin(app, faculty) -> None:
    with pytest.raises(PolicyViolationError):
        app.subjects.review_subject("s-1", ReviewDecision.APPROVE)


def test_delete_requires_curriculum_permission(app, faculty, admin) -> None:
    AppContext.set_current_user(faculty)
    with pytest.raises(PolicyViolationError):
        app.subjects.delete_subject("s-4")

    AppContext.set_current_user(admin)
    app.subjects.delete_subject("s-4")
    with pytest.raises(NotFoundError):
        app.subjects.get_subject("s-4")
    assert app.subjects.total_topic_units() == 0


def test_student_cannot_save_subjects(app, student) -> None:
    with pytest.raises(PolicyViolationError):
        app.subjects.save_subject(app.subjects.new_subject("Social Psychology"))
    with pytest.raises(PolicyViolationError):
        app.subjects.save_subject(app.subjects.get_subject("s-1"))
    assert len(app.subjects.list_subjects()) == 4


def test_resaving_approved_subject_unchanged_demotes_to_pending(app, faculty, admin) -> None:
    AppContext.set_current_user(faculty)
    subject = app.subjects.get_subject("s-1")
    app.subjects.add_topic(subject)
    app.subjects.save_subject(subject)

    AppContext.set_current_user(admin)
    approved = app.subjects.review_subject("s-1", ReviewDecision.APPROVE)
    assert approved.is_fully_approved

    AppContext.set_current_user(faculty)
    resaved = app.subjects.save_subject(app.subjects.get_subject("s-1"))
    assert resaved.status is ContentStatus.PENDING
    assert not resaved.is_fully_approved
    assert app.subjects.get_subject("s-1").status is ContentStatus.PENDING

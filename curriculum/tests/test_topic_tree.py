"""Topic tree arena: conversion, traversal and removal staging."""
from __future__ import annotations

import pytest

from core.exceptions.errors import NotFoundError
from curriculum.models.topic import Topic
from curriculum.models.topic_tree import TopicTree
from workflow.enum.content_status import ContentStatus

NESTED = [
    {"id": "t-1", "title": "Freud", "status": "APPROVED", "subTopics": [
        {"id": "t-1a", "title": "Id, Ego, Superego", "status": "DRAFT", "subTopics": []},
        {"id": "t-1b", "title": "Defense Mechanisms", "status": "REMOVAL_PENDING", "subTopics": [
            {"id": "t-1b1", "title": "Repression", "subTopics": []},
        ]},
    ]},
    {"id": "t-2", "title": "Jung", "proposedTitle": "Carl Jung", "subTopics": []},
]


@pytest.fixture
def tree() -> TopicTree:
    return TopicTree.from_nested(NESTED)


def test_walk_is_preorder_with_depth(tree) -> None:
    assert [(t.id, d) for t, d in tree.walk()] == [
        ("t-1", 0), ("t-1a", 1), ("t-1b", 1), ("t-1b1", 2), ("t-2", 0),
    ]
    assert len(tree) == 5
    assert tree.depth("t-1b1") == 2


def test_nested_round_trip_keeps_unknown_keys(tree) -> None:
    nested = tree.to_nested()
    assert nested[1]["proposedTitle"] == "Carl Jung"
    assert nested[0]["subTopics"][1]["subTopics"][0]["id"] == "t-1b1"
    assert nested[1]["subTopics"] == []


def test_copy_is_independent(tree) -> None:
    clone = tree.copy()
    clone.set_status("t-2", ContentStatus.APPROVED)
    assert tree.get("t-2").status is None


def test_add_under_parent_and_reject_duplicates(tree) -> None:
    tree.add(Topic(id="t-2a", title="Archetypes"), "t-2")
    assert [t.id for t in tree.children("t-2")] == ["t-2a"]
    with pytest.raises(ValueError):
        tree.add(Topic(id="t-2a", title="Again"))
    with pytest.raises(NotFoundError):
        tree.add(Topic(id="t-9", title="Orphan"), "missing")


def test_move_is_clamped(tree) -> None:
    assert tree.move("t-1", 5) == 1
    assert [t.id for t in tree.roots()] == ["t-2", "t-1"]
    assert tree.move("t-1", -9) == 0


def test_remove_drops_whole_subtree(tree) -> None:
    assert tree.remove("t-1b") == ["t-1b", "t-1b1"]
    assert "t-1b1" not in tree
    assert [t.id for t in tree.children("t-1")] == ["t-1a"]


def test_approve_all_purges_staged_topics(tree) -> None:
    dropped = tree.approve_all()
    assert dropped == ["t-1b", "t-1b1"]
    assert tree.all_approved()
    assert [t.id for t in tree] == ["t-1", "t-1a", "t-2"]


def test_mark_and_restore(tree) -> None:
    tree.mark_for_removal("t-2")
    assert tree.get("t-2").is_removal_pending
    tree.restore("t-2")
    assert tree.get("t-2").status is ContentStatus.DRAFT


def test_update_cannot_change_id(tree) -> None:
    with pytest.raises(ValueError):
        tree.update("t-1", id="t-99")
    assert tree.update("t-1", title="Sigmund Freud").title == "Sigmund Freud"


def test_empty_tree_counts_as_approved() -> None:
    assert TopicTree().all_approved()

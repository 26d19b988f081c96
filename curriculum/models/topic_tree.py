"""
curriculum/models/topic_tree.py
===============================

Flattened arena for the recursive topic hierarchy of a subject.

Nodes are indexed by id; structure is kept as parent and ordered child-id
references (``None`` is the root level). Stored JSON stays nested
(``subTopics``), conversion happens in ``from_nested`` / ``to_nested``.
"""
from __future__ import annotations

import dataclasses
from typing import Any, Dict, Iterator, List, Optional, Tuple

from core.exceptions.errors import NotFoundError
from curriculum.models.topic import Topic
from workflow.enum.content_status import ContentStatus


class TopicTree:
    """Ordered forest of topics with parent-aware, id-indexed operations."""

    def __init__(self) -> None:
        self._nodes: Dict[str, Topic] = {}
        self._parent: Dict[str, Optional[str]] = {}
        self._children: Dict[Optional[str], List[str]] = {None: []}

    # ------------------------------------------------------------------ #
    #  Conversion                                                        #
    # ------------------------------------------------------------------ #
    @classmethod
    def from_nested(cls, topics: Optional[List[Dict[str, Any]]]) -> "TopicTree":
        tree = cls()
        stack: List[Tuple[Optional[str], Dict[str, Any]]] = [
            (None, t) for t in reversed(topics or [])
        ]
        while stack:
            parent_id, data = stack.pop()
            node = tree.add(Topic.from_dict(data), parent_id)
            for child in reversed(data.get("subTopics") or []):
                stack.append((node.id, child))
        return tree

    def to_nested(self) -> List[Dict[str, Any]]:
        def _build(node_id: str) -> Dict[str, Any]:
            data = self._nodes[node_id].to_dict()
            data["subTopics"] = [_build(c) for c in self._children[node_id]]
            return data

        return [_build(r) for r in self._children[None]]

    def copy(self) -> "TopicTree":
        return TopicTree.from_nested(self.to_nested())

    # ------------------------------------------------------------------ #
    #  Queries                                                           #
    # ------------------------------------------------------------------ #
    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, topic_id: object) -> bool:
        return topic_id in self._nodes

    def __iter__(self) -> Iterator[Topic]:
        for topic, _depth in self.walk():
            yield topic

    def find(self, topic_id: str) -> Optional[Topic]:
        return self._nodes.get(topic_id)

    def get(self, topic_id: str) -> Topic:
        try:
            return self._nodes[topic_id]
        except KeyError:
            raise NotFoundError("Topic", topic_id) from None

    def parent_id(self, topic_id: str) -> Optional[str]:
        self.get(topic_id)
        return self._parent[topic_id]

    def children(self, parent_id: Optional[str] = None) -> List[Topic]:
        if parent_id is not None:
            self.get(parent_id)
        return [self._nodes[c] for c in self._children[parent_id]]

    def roots(self) -> List[Topic]:
        return self.children(None)

    def depth(self, topic_id: str) -> int:
        depth = 0
        parent = self.parent_id(topic_id)
        while parent is not None:
            depth += 1
            parent = self._parent[parent]
        return depth

    def walk(self) -> Iterator[Tuple[Topic, int]]:
        """Pre-order traversal yielding ``(topic, depth)``."""
        stack: List[Tuple[str, int]] = [(r, 0) for r in reversed(self._children[None])]
        while stack:
            node_id, depth = stack.pop()
            yield self._nodes[node_id], depth
            stack.extend((c, depth + 1) for c in reversed(self._children[node_id]))

    def subtree_ids(self, topic_id: str) -> List[str]:
        self.get(topic_id)
        ids: List[str] = []
        stack = [topic_id]
        while stack:
            current = stack.pop()
            ids.append(current)
            stack.extend(reversed(self._children[current]))
        return ids

    def all_approved(self) -> bool:
        """True when every node is APPROVED; an empty tree counts as approved."""
        return all(t.status is ContentStatus.APPROVED for t in self._nodes.values())

    # ------------------------------------------------------------------ #
    #  Mutations                                                         #
    # ------------------------------------------------------------------ #
    def add(self, topic: Topic, parent_id: Optional[str] = None,
            position: Optional[int] = None) -> Topic:
        if topic.id in self._nodes:
            raise ValueError(f"Duplicate topic id '{topic.id}'")
        if parent_id is not None:
            self.get(parent_id)
        self._nodes[topic.id] = topic
        self._parent[topic.id] = parent_id
        self._children[topic.id] = []
        siblings = self._children[parent_id]
        if position is None:
            siblings.append(topic.id)
        else:
            siblings.insert(position, topic.id)
        return topic

    def update(self, topic_id: str, **changes: Any) -> Topic:
        if "id" in changes:
            raise ValueError("Topic id cannot be changed")
        updated = dataclasses.replace(self.get(topic_id), **changes)
        self._nodes[topic_id] = updated
        return updated

    def set_status(self, topic_id: str, status: Optional[ContentStatus]) -> Topic:
        return self.update(topic_id, status=status)

    def mark_for_removal(self, topic_id: str) -> Topic:
        """Stage a topic for deletion; it is dropped on the next subject approval."""
        return self.set_status(topic_id, ContentStatus.REMOVAL_PENDING)

    def restore(self, topic_id: str) -> Topic:
        return self.set_status(topic_id, ContentStatus.DRAFT)

    def move(self, topic_id: str, offset: int) -> int:
        """Shift a topic among its siblings; returns the new index (clamped)."""
        siblings = self._children[self.parent_id(topic_id)]
        index = siblings.index(topic_id)
        target = min(max(0, index + offset), len(siblings) - 1)
        siblings.insert(target, siblings.pop(index))
        return target

    def remove(self, topic_id: str) -> List[str]:
        """Physically delete a topic and its descendants; returns removed ids."""
        removed = self.subtree_ids(topic_id)
        self._children[self._parent[topic_id]].remove(topic_id)
        for node_id in removed:
            del self._nodes[node_id]
            del self._parent[node_id]
            del self._children[node_id]
        return removed

    def purge_removal_pending(self) -> List[str]:
        removed: List[str] = []
        for node_id in [t.id for t in self if t.is_removal_pending]:
            if node_id in self._nodes:
                removed.extend(self.remove(node_id))
        return removed

    def approve_all(self) -> List[str]:
        """Drop REMOVAL_PENDING subtrees, approve everything left; returns dropped ids."""
        removed = self.purge_removal_pending()
        for node_id in list(self._nodes):
            self.set_status(node_id, ContentStatus.APPROVED)
        return removed

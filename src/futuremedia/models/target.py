"""Polymorphic content references shared by reactions and notifications.

A row points at one content entity out of several kinds. The store keeps one
nullable foreign-key column per kind so cascade rules apply; application code
works with the `TargetRef` tagged value instead of the raw columns.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, declared_attr, mapped_column


class TargetKind(enum.StrEnum):
    """Kinds of content entity a reference can point at."""

    POST = "post"
    COMMENT = "comment"
    STORY = "story"
    REEL = "reel"
    MESSAGE = "message"


# kind -> (column attribute, referenced table)
TARGET_COLUMNS: dict[TargetKind, tuple[str, str]] = {
    TargetKind.POST: ("post_id", "post"),
    TargetKind.COMMENT: ("comment_id", "comment"),
    TargetKind.STORY: ("story_id", "story"),
    TargetKind.REEL: ("reel_id", "reel"),
    TargetKind.MESSAGE: ("message_id", "message"),
}


@dataclass(frozen=True)
class TargetRef:
    """Reference to a single content entity."""

    kind: TargetKind
    id: str


def populated_targets_sql() -> str:
    """Return a SQL expression counting non-null target columns."""
    return " + ".join(
        f"(CASE WHEN {column} IS NOT NULL THEN 1 ELSE 0 END)"
        for column, _ in TARGET_COLUMNS.values()
    )


def _target_column(table: str) -> Mapped[str | None]:
    return mapped_column(
        String(32),
        ForeignKey(f"{table}.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )


class TargetMixin:
    """Adds the per-kind reference columns and a `target` accessor."""

    @declared_attr
    def post_id(cls) -> Mapped[str | None]:
        return _target_column("post")

    @declared_attr
    def comment_id(cls) -> Mapped[str | None]:
        return _target_column("comment")

    @declared_attr
    def story_id(cls) -> Mapped[str | None]:
        return _target_column("story")

    @declared_attr
    def reel_id(cls) -> Mapped[str | None]:
        return _target_column("reel")

    @declared_attr
    def message_id(cls) -> Mapped[str | None]:
        return _target_column("message")

    @property
    def target(self) -> TargetRef | None:
        """Return the populated reference, if any."""
        for kind, (column, _) in TARGET_COLUMNS.items():
            value = getattr(self, column)
            if value is not None:
                return TargetRef(kind=kind, id=value)
        return None

    @target.setter
    def target(self, ref: TargetRef | None) -> None:
        for kind, (column, _) in TARGET_COLUMNS.items():
            setattr(self, column, ref.id if ref is not None and ref.kind == kind else None)

"""Migration Outcome — pure accounting for local-to-authoritative draft migration.

Invariants:
    - Counters only ever grow by confirmed writes
    - errors keeps insertion order (one message per failed item or batch)
    - should_clear_local() is True iff no errors AND at least one item migrated;
      an empty migration never clears local state
    - success == (no errors), independent of how many items moved
"""

from dataclasses import dataclass, field

from pydantic import ValidationError

from studyfront.core.errors import StudyFrontError


MIGRATION_CATEGORIES: tuple[str, ...] = (
    "memberships", "posts", "answers", "listings", "quizzes",
)


@dataclass
class MigrationCounts:
    posts: int = 0
    answers: int = 0
    listings: int = 0
    quizzes: int = 0
    memberships: int = 0

    @property
    def total(self) -> int:
        return (
            self.posts + self.answers + self.listings
            + self.quizzes + self.memberships
        )

    def to_dict(self) -> dict[str, int]:
        return {
            "posts": self.posts,
            "answers": self.answers,
            "listings": self.listings,
            "quizzes": self.quizzes,
            "memberships": self.memberships,
        }


@dataclass
class MigrationResult:
    migrated: MigrationCounts = field(default_factory=MigrationCounts)
    errors: list[str] = field(default_factory=list)
    local_cleared: bool = False

    @property
    def success(self) -> bool:
        return not self.errors

    def should_clear_local(self) -> bool:
        return not self.errors and self.migrated.total > 0

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "migrated": self.migrated.to_dict(),
            "errors": list(self.errors),
            "localCleared": self.local_cleared,
        }


def failure_reason(exc: Exception) -> str:
    """Human-readable reason for a failed migration item."""
    if isinstance(exc, ValidationError):
        first = exc.errors()[0]
        return str(first["msg"]).removeprefix("Value error, ")
    if isinstance(exc, StudyFrontError):
        return exc.message
    return str(exc) or type(exc).__name__


def describe_unreadable(category: str) -> str:
    """Message for a stored collection that could not be read at all."""
    return f"Failed to migrate {category}: stored data is unreadable"


def describe_item_failure(
    category: str, exc: Exception, title: str | None = None,
) -> str:
    """Message for one failed item, naming it by title when available."""
    if title:
        return f'Failed to migrate {category} "{title}": {failure_reason(exc)}'
    return f"Failed to migrate {category}: {failure_reason(exc)}"

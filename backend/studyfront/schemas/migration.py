"""Migration Schemas — response contract for draft migration."""

from studyfront.schemas.quiz import CamelModel


class MigratedCounts(CamelModel):
    posts: int = 0
    answers: int = 0
    listings: int = 0
    quizzes: int = 0
    memberships: int = 0


class MigrationResponse(CamelModel):
    success: bool
    migrated: MigratedCounts
    errors: list[str]
    local_cleared: bool

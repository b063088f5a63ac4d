"""Migration Routes — replay a client's local drafts under its new identity.

Invariants:
    - The request body is the client's whole local snapshot, read once
    - localCleared in the response tells the client to clear its local store;
      it is True iff no errors occurred and at least one item migrated
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from studyfront.api.deps import get_moderation_gate, require_user
from studyfront.core.domain_types import UserId
from studyfront.infrastructure.database import get_db
from studyfront.infrastructure.local_medium import InMemoryMedium
from studyfront.schemas.drafts import LocalSnapshot
from studyfront.schemas.migration import MigrationResponse
from studyfront.services.draft_store import LocalDraftStore
from studyfront.services.migration_engine import MigrationEngine, SqlDraftWriter
from studyfront.services.moderation_gate import ModerationGate

router = APIRouter(prefix="/api/v1/migrations", tags=["migrations"])


@router.post("", response_model=MigrationResponse)
async def migrate_local_drafts(
    snapshot: LocalSnapshot,
    user_id: UserId = Depends(require_user("migrate local data")),
    db: AsyncSession = Depends(get_db),
    gate: ModerationGate = Depends(get_moderation_gate),
):
    store = LocalDraftStore(InMemoryMedium())
    store.restore(snapshot)
    engine = MigrationEngine(store, SqlDraftWriter(db, gate))
    result = await engine.migrate(user_id)
    return MigrationResponse.model_validate(result.to_dict())

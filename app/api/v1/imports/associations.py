from typing import Any, Dict, Sequence
from uuid import UUID

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession


async def replace_associations(
    db: AsyncSession,
    link_model: Any,
    parent_column: str,
    parent_id: UUID,
    links: Sequence[Dict[str, Any]],
) -> None:
    """Make ``links`` the complete set of ``link_model`` rows for ``parent_id``.

    Existing links are deleted, then the new ones inserted. Runs inside the
    caller's transaction, so readers never observe the empty intermediate state.
    Caller must commit.
    """
    await db.execute(
        delete(link_model).where(getattr(link_model, parent_column) == parent_id)
    )
    db.add_all([link_model(**{parent_column: parent_id, **link}) for link in links])
    await db.flush()

# clinic_portal/common/database/kv_store.py
"""
Schemaless key-value store on top of the ``kv_store`` table.

Keys are opaque strings. The ``entity:scope:ownerId:entityId`` convention is
a caller concern; this adapter only knows about exact keys and prefixes.
"""

from typing import Any, Dict, Iterable, List, Optional, Tuple

from fastapi import Depends
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from clinic_portal.common.database.database import get_db_session
from clinic_portal.models.models import KVEntry


class KVStore:
    """Key-value operations bound to one database session."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _commit(self) -> None:
        try:
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

    async def set(self, key: str, value: Any) -> None:
        """Insert or replace a single key."""
        await self.session.merge(KVEntry(key=key, value=value))
        await self._commit()

    async def mset(self, items: Dict[str, Any]) -> None:
        """Write every pair in one transaction; nothing is stored if any write fails."""
        try:
            for key, value in items.items():
                await self.session.merge(KVEntry(key=key, value=value))
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

    async def get(self, key: str) -> Optional[Any]:
        result = await self.session.execute(
            select(KVEntry.value).where(KVEntry.key == key)
        )
        return result.scalar_one_or_none()

    async def mget(self, keys: Iterable[str]) -> List[Optional[Any]]:
        """Values in the order of ``keys``; missing keys yield None."""
        keys = list(keys)
        if not keys:
            return []
        result = await self.session.execute(
            select(KVEntry.key, KVEntry.value).where(KVEntry.key.in_(keys))
        )
        found = {key: value for key, value in result}
        return [found.get(key) for key in keys]

    async def get_items_by_prefix(self, prefix: str) -> List[Tuple[str, Any]]:
        result = await self.session.execute(
            select(KVEntry.key, KVEntry.value).where(
                KVEntry.key.startswith(prefix, autoescape=True)
            )
        )
        # LIKE is case-insensitive on some backends
        return [(key, value) for key, value in result if key.startswith(prefix)]

    async def get_by_prefix(self, prefix: str) -> List[Any]:
        """All values whose key starts with ``prefix``, in no particular order."""
        return [value for _, value in await self.get_items_by_prefix(prefix)]

    async def delete(self, key: str) -> None:
        await self.session.execute(delete(KVEntry).where(KVEntry.key == key))
        await self._commit()

    async def mdelete(self, keys: Iterable[str]) -> None:
        keys = list(keys)
        if not keys:
            return
        await self.session.execute(delete(KVEntry).where(KVEntry.key.in_(keys)))
        await self._commit()


def get_kv_store(db: AsyncSession = Depends(get_db_session)) -> KVStore:
    """FastAPI dependency yielding a store bound to the request session."""
    return KVStore(db)

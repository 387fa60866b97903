# clinic_portal/common/database/indexed_collection.py
"""
One canonical record per entity plus per-owner secondary indexes.

Layout for an entity type ``appointment``::

    appointment:record:{id}               -> the record
    appointment:patient:{patientId}:{id}  -> id
    appointment:doctor:{doctorId}:{id}    -> id

The record and its index entries are written in one ``mset`` transaction.
Updates only touch the canonical record, so every owner view reads the same
document.
"""

from typing import Any, Dict, List, Optional

from clinic_portal.common.database.kv_store import KVStore
from clinic_portal.common.utils.global_functions import utc_now_iso


class IndexedCollection:
    def __init__(self, store: KVStore, entity: str):
        self.store = store
        self.entity = entity

    def record_key(self, entity_id: str) -> str:
        return f"{self.entity}:record:{entity_id}"

    def index_prefix(self, scope: str, owner_id: str) -> str:
        return f"{self.entity}:{scope}:{owner_id}:"

    def index_key(self, scope: str, owner_id: str, entity_id: str) -> str:
        return f"{self.index_prefix(scope, owner_id)}{entity_id}"

    def entries(self, record: Dict[str, Any], owners: Dict[str, Optional[str]]) -> Dict[str, Any]:
        """Keys and values that store ``record`` and index it under every non-empty owner."""
        entity_id = record["id"]
        items: Dict[str, Any] = {self.record_key(entity_id): record}
        for scope, owner_id in owners.items():
            if owner_id:
                items[self.index_key(scope, owner_id, entity_id)] = entity_id
        return items

    async def create(
        self,
        record: Dict[str, Any],
        owners: Dict[str, Optional[str]],
        extra: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Store and index ``record`` in one transaction.

        ``extra`` holds additional keys written in the same transaction.
        """
        items = self.entries(record, owners)
        if extra:
            items.update(extra)
        await self.store.mset(items)
        return record

    async def get(self, entity_id: str) -> Optional[Dict[str, Any]]:
        return await self.store.get(self.record_key(entity_id))

    async def get_for(self, scope: str, owner_id: str, entity_id: str) -> Optional[Dict[str, Any]]:
        """Record ``entity_id`` only if it is indexed under this owner."""
        if await self.store.get(self.index_key(scope, owner_id, entity_id)) is None:
            return None
        return await self.get(entity_id)

    async def list_for(self, scope: str, owner_id: str) -> List[Dict[str, Any]]:
        ids = await self.store.get_by_prefix(self.index_prefix(scope, owner_id))
        records = await self.store.mget(self.record_key(entity_id) for entity_id in ids)
        return [record for record in records if record is not None]

    async def save(self, record: Dict[str, Any]) -> Dict[str, Any]:
        await self.store.set(self.record_key(record["id"]), record)
        return record

    async def update(self, entity_id: str, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Shallow-merge ``changes`` into the record; None if it does not exist."""
        record = await self.get(entity_id)
        if record is None:
            return None
        updated = {**record, **changes, "updatedAt": utc_now_iso()}
        return await self.save(updated)

    async def delete(self, entity_id: str, owners: Dict[str, Optional[str]]) -> None:
        keys = [self.record_key(entity_id)]
        keys.extend(
            self.index_key(scope, owner_id, entity_id)
            for scope, owner_id in owners.items()
            if owner_id
        )
        await self.store.mdelete(keys)

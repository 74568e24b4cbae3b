# freshcart/domain/repositories/interaction_repo.py
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, List, Mapping, Optional

from pydantic import ValidationError

from freshcart.domain.models.interaction import ActionKind, InteractionRecord
from freshcart.domain.repositories.kv_store import KeyValueStore, get_json, set_json
from freshcart.domain.services.constants import INTERACTION_KEYS

logger = logging.getLogger(__name__)


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class InteractionRepo:
    """
    Append-only interaction lists, one per action kind, stored as JSON arrays.

    Each list is trimmed to its retention cap on write (oldest first); a cap of
    None keeps the list unbounded. Writes are whole-list read-modify-write.
    """

    def __init__(
        self,
        store: KeyValueStore,
        retention: Optional[Mapping[ActionKind, Optional[int]]] = None,
        now: Callable[[], str] = _utc_now,
    ):
        self.store = store
        self.retention = dict(retention or {ActionKind.VIEW: 50})
        self._now = now

    async def list(self, action: ActionKind) -> List[InteractionRecord]:
        raw = await get_json(self.store, INTERACTION_KEYS[action], [])
        if not isinstance(raw, list):
            logger.warning("Interaction list %s is not an array, ignoring it", INTERACTION_KEYS[action])
            return []
        records: List[InteractionRecord] = []
        for item in raw:
            if not isinstance(item, dict):
                continue
            try:
                records.append(InteractionRecord.model_validate({**item, "action": action}))
            except ValidationError as e:
                logger.warning("Skipping malformed %s record: %s", action.value, e.errors()[:1])
        return records

    async def record(self, action: ActionKind, product_id: int, name: str, category: Optional[str]) -> InteractionRecord:
        rec = InteractionRecord(
            id=product_id,
            name=name,
            category=category,
            timestamp=self._now(),
            action=action,
        )
        key = INTERACTION_KEYS[action]
        raw = await get_json(self.store, key, [])
        items = raw if isinstance(raw, list) else []
        items.append(rec.model_dump(mode="json"))

        cap = self.retention.get(action)
        if cap is not None and len(items) > cap:
            items = items[-cap:] if cap > 0 else []
        await set_json(self.store, key, items)
        logger.debug("Recorded %s product_id=%s (%s kept)", action.value, product_id, len(items))
        return rec

    async def clear(self, action: ActionKind) -> None:
        await self.store.delete(INTERACTION_KEYS[action])
        logger.info("Cleared %s interactions", action.value)

    async def has_any(self) -> bool:
        for action in ActionKind:
            if await self.list(action):
                return True
        return False

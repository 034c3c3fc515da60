# 📄 File: app/modules/shared_garden/infrastructure/memory/garden_store_memory.py
# 🧭 Purpose (Layman Explanation):
# A pretend garden database that lives only in memory, handy for local experiments and
# for tests that should not need a real database.
# 🧪 Purpose (Technical Summary):
# In-process GardenStore. Documents and wallets are kept serialized (as the SQL store
# keeps them) and every update runs under one asyncio lock, which linearizes writers
# trivially. Publishes through the same ChangeFeed abstraction after each commit.
# 🔗 Dependencies:
# asyncio, domain models, change feed
# 🔄 Connected Modules / Calls From:
# Engine unit tests, presentation wiring when no database is configured

import asyncio
import logging
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from app.shared.core.exceptions import ChangeFeedError
from app.modules.shared_garden.domain.models.garden import GardenState, Wallet
from app.modules.shared_garden.domain.models.rules import GardenRules, utc_now
from app.modules.shared_garden.domain.repositories.garden_store import (
    GardenStore,
    GardenTransaction,
    Mutator,
    OnChange,
    Subscription,
    T,
    default_wallet,
    snapshot,
)
from app.modules.shared_garden.domain.services.pairing import CoupleKey
from app.modules.shared_garden.infrastructure.external.change_feed import ChangeFeed, LocalChangeFeed

logger = logging.getLogger(__name__)


class InMemoryGardenStore(GardenStore):
    """Memory-based garden store for development and testing."""

    def __init__(
        self,
        change_feed: Optional[ChangeFeed] = None,
        rules: Optional[GardenRules] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._change_feed = change_feed or LocalChangeFeed()
        self._rules = rules or GardenRules()
        self._clock = clock
        self._documents: Dict[str, Dict[str, Any]] = {}
        self._versions: Dict[str, int] = {}
        self._wallets: Dict[str, Dict[str, Any]] = {}
        self._lock = asyncio.Lock()

    async def get(self, couple: CoupleKey) -> GardenState:
        return await self.update(couple, lambda tx: snapshot(tx.state))

    async def get_wallet(self, user_id: str) -> Wallet:
        stored = self._wallets.get(user_id)
        if stored is None:
            return default_wallet(user_id, self._rules.starting_gold, self._rules.max_water)
        return Wallet.model_validate(stored)

    def version_of(self, couple_key: str) -> int:
        return self._versions.get(couple_key, 0)

    async def subscribe(self, couple_key: str, on_change: OnChange) -> Subscription:
        return await self._change_feed.subscribe(couple_key, on_change)

    async def update(self, couple: CoupleKey, mutator: Mutator) -> T:
        async with self._lock:
            now = self._clock()
            stored = self._documents.get(couple.value)
            if stored is None:
                state = GardenState.create(
                    couple.value, couple.user1_id, couple.user2_id, now, self._rules.day_key(now),
                )
            else:
                state = GardenState.model_validate(stored)

            wallets = {}
            for user_id in (couple.user1_id, couple.user2_id):
                wallets[user_id] = await self.get_wallet(user_id)

            tx = GardenTransaction(
                state=state,
                wallets=wallets,
                is_new=stored is None,
            )
            result = mutator(tx)

            if not tx.is_new and not tx.has_changes():
                return result

            tx.state.updated_at = now
            self._documents[couple.value] = tx.state.model_dump(mode="json")
            self._versions[couple.value] = self._versions.get(couple.value, 0) + 1
            for wallet in tx.changed_wallets():
                self._wallets[wallet.user_id] = wallet.model_dump(mode="json")
            committed = snapshot(tx.state)

        try:
            await self._change_feed.publish(committed)
        except ChangeFeedError as e:
            logger.error(f"Committed garden change not broadcast: {e.message}", extra={"couple_key": couple.value})
        return result

    async def close(self) -> None:
        await self._change_feed.close()

# 📄 File: app/modules/shared_garden/infrastructure/database/garden_store_impl.py
# 🧭 Purpose (Layman Explanation):
# Stores shared gardens in the database and makes sure that when both partners change
# the garden at the same moment, both changes land and neither erases the other.
#
# 🧪 Purpose (Technical Summary):
# SQLAlchemy implementation of GardenStore. Each update attempt reads the document and
# both wallets, runs the mutator, then commits with compare-and-set on the document
# version (UPDATE ... WHERE version = :read_version). Losing the race rolls the attempt
# back and re-runs the mutator on fresh state, with exponential backoff, up to a bounded
# number of attempts. Wallet rows carry their own version and are compare-and-set the same
# way, so a wallet spent through another garden in the meantime also forces a retry.
#
# 🔗 Dependencies:
# - SQLAlchemy async session and Core update
# - Garden ORM models, change feed, domain models
#
# 🔄 Connected Modules / Calls From:
# - Shared garden engine and dev tools (through GardenStore)
# - Presentation dependency wiring

import asyncio
import logging
import random
from datetime import datetime
from typing import Callable, Dict, Optional, Sequence, Tuple

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.shared.core.exceptions import ChangeFeedError, DatabaseError, TransactionConflictError
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
from app.modules.shared_garden.infrastructure.database.models import GardenDocumentModel, WalletModel
from app.modules.shared_garden.infrastructure.external.change_feed import ChangeFeed

logger = logging.getLogger(__name__)


class _WriteConflict(Exception):
    """A concurrent writer committed between our read and our write."""


class GardenStoreImpl(GardenStore):
    """
    SQLAlchemy implementation of GardenStore.

    Works on PostgreSQL (asyncpg) under READ COMMITTED and on SQLite
    (aiosqlite); both re-evaluate the version predicate against the latest
    committed row, which is what makes the compare-and-set sound.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker,
        change_feed: ChangeFeed,
        rules: Optional[GardenRules] = None,
        clock: Callable[[], datetime] = utc_now,
        max_retries: int = 5,
        retry_delay: float = 0.02,
    ):
        self._session_factory = session_factory
        self._change_feed = change_feed
        self._rules = rules or GardenRules()
        self._clock = clock
        self._max_retries = max_retries
        self._retry_delay = retry_delay

    # =========================================================================
    # READS
    # =========================================================================

    async def get(self, couple: CoupleKey) -> GardenState:
        # A no-op mutator still persists a missing document
        return await self.update(couple, lambda tx: snapshot(tx.state))

    async def get_wallet(self, user_id: str) -> Wallet:
        try:
            async with self._session_factory() as session:
                row = await session.get(WalletModel, user_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to read wallet {user_id}: {e}")
            raise DatabaseError(f"Failed to read wallet: {e}", operation="get_wallet", table="garden_wallets")

        if row is None:
            return default_wallet(user_id, self._rules.starting_gold, self._rules.max_water)
        return self._wallet_to_domain(row)

    async def subscribe(self, couple_key: str, on_change: OnChange) -> Subscription:
        return await self._change_feed.subscribe(couple_key, on_change)

    # =========================================================================
    # TRANSACTIONAL UPDATE
    # =========================================================================

    async def update(self, couple: CoupleKey, mutator: Mutator) -> T:
        for attempt in range(1, self._max_retries + 1):
            try:
                result, committed = await self._attempt(couple, mutator)
            except _WriteConflict:
                logger.warning(
                    f"Garden write conflict (attempt {attempt}/{self._max_retries})",
                    extra={"couple_key": couple.value},
                )
                if attempt < self._max_retries:
                    await asyncio.sleep(self._retry_delay * (2 ** (attempt - 1)) * random.uniform(0.5, 1.5))
                continue

            if committed is not None:
                await self._publish(committed)
            return result

        logger.error("Garden update gave up after retries", extra={"couple_key": couple.value})
        raise TransactionConflictError(couple_key=couple.value, attempts=self._max_retries)

    async def _attempt(self, couple: CoupleKey, mutator: Mutator) -> Tuple[T, Optional[GardenState]]:
        now = self._clock()
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    row = await session.get(GardenDocumentModel, couple.value)
                    if row is None:
                        state = GardenState.create(
                            couple.value, couple.user1_id, couple.user2_id, now, self._rules.day_key(now),
                        )
                        read_version = 0
                    else:
                        state = GardenState.model_validate(row.document)
                        read_version = row.version

                    wallets, versions = await self._load_wallets(session, (couple.user1_id, couple.user2_id))
                    tx = GardenTransaction(
                        state=state, wallets=wallets, is_new=row is None, wallet_versions=versions,
                    )

                    result = mutator(tx)

                    if not tx.is_new and not tx.has_changes():
                        return result, None

                    tx.state.updated_at = now
                    await self._write_document(session, tx.state, read_version, now)
                    for wallet in tx.changed_wallets():
                        await self._write_wallet(session, wallet, tx.wallet_versions.get(wallet.user_id, 0), now)
        except IntegrityError as e:
            # Lost a race to insert the same document or wallet row
            raise _WriteConflict() from e
        except SQLAlchemyError as e:
            logger.error(f"Garden store failure: {e}", extra={"couple_key": couple.value})
            raise DatabaseError(f"Garden store unavailable: {e}", operation="update", table="garden_documents")

        return result, snapshot(tx.state)

    async def _write_document(self, session: AsyncSession, state: GardenState, read_version: int, now: datetime) -> None:
        document = state.model_dump(mode="json")
        if read_version == 0:
            session.add(GardenDocumentModel(
                couple_key=state.couple_key,
                user1_id=state.user1_id,
                user2_id=state.user2_id,
                document=document,
                version=1,
                created_at=now,
                updated_at=now,
            ))
            await session.flush()
            return

        outcome = await session.execute(
            update(GardenDocumentModel)
            .where(
                GardenDocumentModel.couple_key == state.couple_key,
                GardenDocumentModel.version == read_version,
            )
            .values(document=document, version=read_version + 1, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        if outcome.rowcount != 1:
            raise _WriteConflict()

    async def _load_wallets(
        self, session: AsyncSession, user_ids: Sequence[str],
    ) -> Tuple[Dict[str, Wallet], Dict[str, int]]:
        rows = (await session.execute(
            select(WalletModel).where(WalletModel.user_id.in_(list(user_ids)))
        )).scalars().all()
        found = {row.user_id: self._wallet_to_domain(row) for row in rows}
        versions = {row.user_id: row.version for row in rows}

        wallets = {
            user_id: found.get(user_id) or default_wallet(user_id, self._rules.starting_gold, self._rules.max_water)
            for user_id in user_ids
        }
        return wallets, versions

    async def _write_wallet(self, session: AsyncSession, wallet: Wallet, read_version: int, now: datetime) -> None:
        values = {
            "gold": wallet.gold,
            "water": wallet.water,
            "max_water": wallet.max_water,
            "last_water_earned_day_key": wallet.last_water_earned_day_key,
            "updated_at": now,
        }
        if read_version == 0:
            session.add(WalletModel(user_id=wallet.user_id, version=1, **values))
            await session.flush()
            return

        # Same compare-and-set as the document: a wallet spent from another garden forces a retry
        outcome = await session.execute(
            update(WalletModel)
            .where(
                WalletModel.user_id == wallet.user_id,
                WalletModel.version == read_version,
            )
            .values(version=read_version + 1, **values)
            .execution_options(synchronize_session=False)
        )
        if outcome.rowcount != 1:
            raise _WriteConflict()

    async def _publish(self, state: GardenState) -> None:
        # The commit already happened; a feed outage must not make callers retry it
        try:
            await self._change_feed.publish(state)
        except ChangeFeedError as e:
            logger.error(f"Committed garden change not broadcast: {e.message}", extra={"couple_key": state.couple_key})

    @staticmethod
    def _wallet_to_domain(row: WalletModel) -> Wallet:
        return Wallet(
            user_id=row.user_id,
            gold=row.gold,
            water=row.water,
            max_water=row.max_water,
            last_water_earned_day_key=row.last_water_earned_day_key,
        )

    async def close(self) -> None:
        await self._change_feed.close()

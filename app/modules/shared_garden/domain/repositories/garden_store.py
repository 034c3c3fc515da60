# 📄 File: app/modules/shared_garden/domain/repositories/garden_store.py
# 🧭 Purpose (Layman Explanation):
# Defines the promise any storage for shared gardens must keep: read a garden, tell us
# whenever it changes, and apply changes one at a time even if both partners act at once.
# 🧪 Purpose (Technical Summary):
# Repository interface for the garden document store following the Repository pattern.
# update() runs a synchronous mutator against the freshest committed state inside an
# atomic transaction, retrying on concurrent writers, and returns the mutator's result.
# 🔗 Dependencies:
# Domain models (GardenState, Wallet), pairing (CoupleKey), abc, typing
# 🔄 Connected Modules / Calls From:
# Shared garden engine, dev tools, infrastructure implementations (SQL, in-memory)

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, TypeVar, Union

from ..models.garden import GardenState, Wallet
from ..services.pairing import CoupleKey

T = TypeVar("T")

OnChange = Callable[[GardenState], Union[None, Awaitable[None]]]


@dataclass
class GardenTransaction:
    """
    Working copy handed to a mutator.

    Mutators change `state` and `wallets` in place. The store diffs them against
    the snapshot taken here and writes only when something actually changed.
    """

    state: GardenState
    wallets: Dict[str, Wallet]
    is_new: bool = False
    # Stored version of each wallet row that already exists; absent means not yet persisted
    wallet_versions: Dict[str, int] = field(default_factory=dict)
    _state_snapshot: Dict[str, Any] = field(init=False, repr=False)
    _wallet_snapshots: Dict[str, Dict[str, Any]] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._state_snapshot = self.state.model_dump(mode="json")
        self._wallet_snapshots = {
            user_id: wallet.model_dump(mode="json") for user_id, wallet in self.wallets.items()
        }

    def wallet(self, user_id: str) -> Wallet:
        return self.wallets[user_id]

    def state_changed(self) -> bool:
        return self.state.model_dump(mode="json") != self._state_snapshot

    def changed_wallets(self) -> List[Wallet]:
        return [
            wallet for user_id, wallet in self.wallets.items()
            if wallet.model_dump(mode="json") != self._wallet_snapshots.get(user_id)
        ]

    def has_changes(self) -> bool:
        return self.state_changed() or bool(self.changed_wallets())


Mutator = Callable[[GardenTransaction], T]


class Subscription(ABC):
    """Handle returned by subscribe(); call unsubscribe() to stop delivery."""

    @abstractmethod
    async def unsubscribe(self) -> None:
        pass


class GardenStore(ABC):
    """
    Repository interface for shared garden documents and partner wallets.

    Implementation Notes:
    - Documents are created lazily with defaults on first access
    - Every write goes through update(); blind overwrites are not offered
    - Delivery to subscribers is at-least-once; duplicates are possible
    """

    @abstractmethod
    async def get(self, couple: CoupleKey) -> GardenState:
        """
        Point read of the committed garden.

        Args:
            couple: Resolved couple key

        Returns:
            GardenState, default-initialized and persisted if absent

        Raises:
            DatabaseError: If the store is unreachable
        """
        pass

    @abstractmethod
    async def get_wallet(self, user_id: str) -> Wallet:
        """Committed wallet of a user, or a fresh default wallet."""
        pass

    @abstractmethod
    async def subscribe(self, couple_key: str, on_change: OnChange) -> Subscription:
        """
        Receive every committed state of a garden.

        Args:
            couple_key: Garden to watch
            on_change: Sync or async callback, must not block

        Returns:
            Subscription handle
        """
        pass

    @abstractmethod
    async def update(self, couple: CoupleKey, mutator: Mutator) -> T:
        """
        Apply a mutator atomically against the latest state.

        Args:
            couple: Resolved couple key
            mutator: Synchronous function of a GardenTransaction; may be re-run

        Returns:
            The mutator's return value from the attempt that committed

        Raises:
            TransactionConflictError: If concurrent writers win every retry
            DatabaseError: If the store is unreachable
        """
        pass

    async def close(self) -> None:
        """Release resources held by the store."""
        return None


def default_wallet(user_id: str, starting_gold: int, max_water: int) -> Wallet:
    return Wallet(user_id=user_id, gold=starting_gold, water=0, max_water=max_water)


def snapshot(state: Optional[GardenState]) -> Optional[GardenState]:
    """Detached copy safe to hand to callers and subscribers."""
    return state.model_copy(deep=True) if state is not None else None

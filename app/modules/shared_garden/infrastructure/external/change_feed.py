# 📄 File: app/modules/shared_garden/infrastructure/external/change_feed.py
# 🧭 Purpose (Layman Explanation):
# The garden's loudspeaker: every time a garden changes, everybody currently looking at
# it (both partners' phones) hears about it right away.
# 🧪 Purpose (Technical Summary):
# Push delivery of committed garden states. RedisChangeFeed fans out through Redis
# pub/sub so any service instance can reach any subscriber; LocalChangeFeed keeps
# everything in-process for single-node development and tests. Delivery is
# at-least-once and a failing subscriber never affects the others.
# 🔗 Dependencies:
# redis.asyncio, asyncio, GardenState, Subscription
# 🔄 Connected Modules / Calls From:
# Garden store implementations (publish after commit), engine subscribe(),
# garden WebSocket endpoint

import asyncio
import inspect
import logging
from abc import ABC, abstractmethod
from collections import defaultdict
from contextlib import suppress
from typing import Dict, List, Optional, Set

from redis.asyncio import Redis
from redis.asyncio.client import PubSub
from redis.exceptions import RedisError

from app.shared.core.exceptions import ChangeFeedError
from app.modules.shared_garden.domain.models.garden import GardenState
from app.modules.shared_garden.domain.repositories.garden_store import OnChange, Subscription, snapshot

logger = logging.getLogger(__name__)

CHANNEL_PREFIX = "garden:"


def channel_for(couple_key: str) -> str:
    return f"{CHANNEL_PREFIX}{couple_key}"


async def deliver(on_change: OnChange, state: GardenState) -> None:
    """Invoke a sync or async subscriber callback."""
    result = on_change(state)
    if inspect.isawaitable(result):
        await result


class ChangeFeed(ABC):
    """Fan-out of committed garden states to subscribers."""

    @abstractmethod
    async def publish(self, state: GardenState) -> None:
        pass

    @abstractmethod
    async def subscribe(self, couple_key: str, on_change: OnChange) -> Subscription:
        pass

    async def close(self) -> None:
        return None


# =============================================================================
# IN-PROCESS FEED
# =============================================================================

class _LocalSubscription(Subscription):
    def __init__(self, feed: "LocalChangeFeed", couple_key: str, on_change: OnChange):
        self._feed = feed
        self._couple_key = couple_key
        self._on_change = on_change
        self._active = True

    async def unsubscribe(self) -> None:
        if self._active:
            self._feed._remove(self._couple_key, self._on_change)
            self._active = False


class LocalChangeFeed(ChangeFeed):
    """Single-process feed. Subscribers are called inline after each commit."""

    def __init__(self):
        self._subscribers: Dict[str, List[OnChange]] = defaultdict(list)

    async def publish(self, state: GardenState) -> None:
        for on_change in list(self._subscribers.get(state.couple_key, [])):
            try:
                await deliver(on_change, snapshot(state))
            except Exception:
                logger.exception(
                    "Garden subscriber failed",
                    extra={"couple_key": state.couple_key},
                )

    async def subscribe(self, couple_key: str, on_change: OnChange) -> Subscription:
        self._subscribers[couple_key].append(on_change)
        return _LocalSubscription(self, couple_key, on_change)

    def subscriber_count(self, couple_key: str) -> int:
        return len(self._subscribers.get(couple_key, []))

    def _remove(self, couple_key: str, on_change: OnChange) -> None:
        callbacks = self._subscribers.get(couple_key, [])
        if on_change in callbacks:
            callbacks.remove(on_change)
        if not callbacks:
            self._subscribers.pop(couple_key, None)


# =============================================================================
# REDIS PUB/SUB FEED
# =============================================================================

class _RedisSubscription(Subscription):
    def __init__(self, feed: "RedisChangeFeed", pubsub: PubSub, channel: str, on_change: OnChange):
        self._feed = feed
        self._pubsub = pubsub
        self._channel = channel
        self._on_change = on_change
        self._task: Optional[asyncio.Task] = None

    def start(self) -> None:
        self._task = asyncio.create_task(self._listen())

    async def _listen(self) -> None:
        async for message in self._pubsub.listen():
            if message.get("type") != "message":
                continue
            try:
                state = GardenState.model_validate_json(message["data"])
                await deliver(self._on_change, state)
            except Exception:
                logger.exception("Garden subscriber failed", extra={"channel": self._channel})

    async def unsubscribe(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        self._feed._forget(self)
        try:
            await self._pubsub.unsubscribe(self._channel)
        finally:
            await self._pubsub.aclose()


class RedisChangeFeed(ChangeFeed):
    """
    Cross-instance feed over Redis pub/sub.

    Each subscription owns a PubSub connection on channel garden:{couple_key}
    and a reader task; messages carry the full committed document as JSON.
    """

    def __init__(self, client: Redis):
        self._client = client
        self._subscriptions: Set[_RedisSubscription] = set()

    async def publish(self, state: GardenState) -> None:
        channel = channel_for(state.couple_key)
        try:
            await self._client.publish(channel, state.model_dump_json())
        except RedisError as e:
            raise ChangeFeedError(f"Failed to publish garden change: {e}", channel=channel) from e

    async def subscribe(self, couple_key: str, on_change: OnChange) -> Subscription:
        channel = channel_for(couple_key)
        pubsub = self._client.pubsub()
        try:
            await pubsub.subscribe(channel)
        except RedisError as e:
            await pubsub.aclose()
            raise ChangeFeedError(f"Failed to subscribe to garden changes: {e}", channel=channel) from e

        subscription = _RedisSubscription(self, pubsub, channel, on_change)
        subscription.start()
        self._subscriptions.add(subscription)
        return subscription

    def _forget(self, subscription: _RedisSubscription) -> None:
        self._subscriptions.discard(subscription)

    async def close(self) -> None:
        for subscription in list(self._subscriptions):
            await subscription.unsubscribe()


def create_change_feed(backend: str, redis_client: Optional[Redis] = None) -> ChangeFeed:
    """Build the feed selected by GARDEN_CHANGE_FEED ("local" or "redis")."""
    if backend == "redis":
        if redis_client is None:
            raise ValueError("The redis change feed needs a Redis client")
        logger.info("Using Redis pub/sub change feed")
        return RedisChangeFeed(redis_client)
    logger.info("Using in-process change feed")
    return LocalChangeFeed()

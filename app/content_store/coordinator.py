"""Fetch coordination between the session cache and the content repository."""

import asyncio

from app.content_store.cache import ContentCache
from app.content_store.exceptions import MalformedEntry, RepositoryError, WriteRejected
from app.content_store.metrics import (
    CONTENT_CACHE_HITS,
    CONTENT_COMMITS,
    CONTENT_FETCHES,
)
from app.content_store.models import ContentValue, Text, content_type_of
from app.content_store.repository import ContentRepository
from app.core.logging import get_logger

logger = get_logger(__name__)


class ContentFetchCoordinator:
    """Resolves content keys through the cache, fetching each key at most once.

    Reads never raise: repository failures are logged and the caller's
    default is used. Writes are applied to the cache optimistically and
    rolled back when the repository refuses them.
    """

    def __init__(
        self, repository: ContentRepository, cache: ContentCache | None = None
    ) -> None:
        """Initialize coordinator.

        Args:
            repository: Store the content is read from and written to
            cache: Cache to fill; a fresh one is created when omitted
        """
        self.repository = repository
        self.cache = cache if cache is not None else ContentCache()
        self._tasks: dict[str, asyncio.Task[None]] = {}

    def request(self, key: str, default: str) -> ContentValue:
        """Return the cached value for ``key`` or ``Text(default)``.

        Starts a background fetch on a cache miss unless one is already in
        flight. Must be called from a running event loop.
        """
        cached = self.cache.get(key)
        if cached is not None:
            CONTENT_CACHE_HITS.inc()
            return cached

        if key not in self.cache.pending:
            self._start_fetch(key, default)
        return Text(default)

    async def fetch(self, key: str, default: str) -> ContentValue:
        """Awaitable form of :meth:`request`.

        Joins a fetch already in flight for ``key`` instead of issuing a
        second one, and returns ``Text(default)`` when the fetch failed.
        """
        cached = self.cache.get(key)
        if cached is not None:
            CONTENT_CACHE_HITS.inc()
            return cached

        task = self._tasks.get(key)
        if task is None:
            task = self._start_fetch(key, default)
        # Shielded: a cancelled caller must not cancel a fetch others wait on
        await asyncio.shield(task)

        cached = self.cache.get(key)
        return cached if cached is not None else Text(default)

    def refresh(self, key: str, default: str) -> asyncio.Task[None]:
        """Refetch ``key`` even though it is cached.

        The cached value stays visible until the new one arrives.
        """
        task = self._tasks.get(key)
        if task is not None and not task.done():
            return task
        return self._start_fetch(key, default)

    async def commit(
        self,
        key: str,
        new_value: ContentValue,
        *,
        visible: bool | None = None,
        page: str | None = None,
    ) -> None:
        """Write ``new_value`` for ``key``, updating the cache first.

        Raises:
            WriteRejected: If the repository write failed; the cache is
                restored to its previous state before raising
        """
        previous = self.cache.get(key)
        was_placeholder = self.cache.is_placeholder(key)
        self.cache.set(key, new_value)

        try:
            await self.repository.set(
                key,
                new_value,
                type=content_type_of(new_value),
                visible=visible,
                page=page,
            )
        except RepositoryError as exc:
            if previous is None:
                self.cache.discard(key)
            else:
                self.cache.set(key, previous, placeholder=was_placeholder)
            CONTENT_COMMITS.labels(outcome="rolled_back").inc()
            logger.error("content_commit_failed", key=key, error=str(exc))
            raise WriteRejected(key, str(exc)) from exc

        CONTENT_COMMITS.labels(outcome="saved").inc()
        logger.info("content_committed", key=key, kind=new_value.kind)

    async def close(self) -> None:
        """Cancel fetches still in flight."""
        tasks = [task for task in self._tasks.values() if not task.done()]
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()
        self.cache.pending.clear()

    def _start_fetch(self, key: str, default: str) -> asyncio.Task[None]:
        self.cache.pending.add(key)
        task = asyncio.get_running_loop().create_task(
            self._fetch(key, default), name=f"content-fetch:{key}"
        )
        self._tasks[key] = task

        def _forget(done: asyncio.Task[None]) -> None:
            if self._tasks.get(key) is done:
                del self._tasks[key]

        task.add_done_callback(_forget)
        return task

    async def _fetch(self, key: str, default: str) -> None:
        try:
            entry = await self.repository.get(key)
        except RepositoryError as exc:
            CONTENT_FETCHES.labels(outcome="error").inc()
            logger.error("content_fetch_failed", key=key, error=str(exc))
            return
        except MalformedEntry as exc:
            CONTENT_FETCHES.labels(outcome="malformed").inc()
            logger.warning("content_entry_malformed", key=key, error=str(exc))
            return
        finally:
            self.cache.pending.discard(key)

        if entry is None:
            CONTENT_FETCHES.labels(outcome="missing").inc()
            self.cache.set(key, Text(default), placeholder=True)
        else:
            CONTENT_FETCHES.labels(outcome="found").inc()
            self.cache.set(key, entry.value)

"""
Refresh scheduling for snapshot consumers.

The controller holds the ``lastUpdated`` of the snapshot it last accepted.
Once that snapshot is older than the update interval it starts polling: an
immediate read, then one read per poll interval, until the endpoint serves
a strictly newer snapshot.

    IDLE ──load──▶ FRESH ──now ≥ next──▶ DUE ──▶ POLLING ──newer──▶ FRESH
"""

import asyncio
import logging
import time
from enum import Enum
from typing import Awaitable, Callable, Optional, Set

from penny_trends.config import PollingConfig
from penny_trends.exceptions import PennyTrendsError
from penny_trends.models import Snapshot

logger = logging.getLogger(__name__)

FetchSnapshot = Callable[[], Awaitable[Snapshot]]
UpdateCallback = Callable[[Snapshot, bool], None]


class PollState(str, Enum):
    IDLE = "idle"
    FRESH = "fresh"
    DUE = "due"
    POLLING = "polling"


class PollingController:
    """
    Single-threaded polling state machine driven by asyncio timers.

    Only one repeating poll timer exists at a time. Stopping it never cancels
    a read already in flight; such a read is simply discarded unless its
    snapshot is strictly newer than the held one.
    """

    def __init__(
        self,
        fetch_snapshot: FetchSnapshot,
        config: Optional[PollingConfig] = None,
        on_update: Optional[UpdateCallback] = None,
        clock: Callable[[], float] = time.time,
    ):
        """
        Args:
            fetch_snapshot: Coroutine function returning the current snapshot
            config: Interval settings
            on_update: Called with ``(snapshot, is_new)`` whenever a snapshot is accepted
            clock: Time source in seconds
        """
        self.fetch_snapshot = fetch_snapshot
        self.config = config or PollingConfig()
        self.on_update = on_update
        self.clock = clock

        self.state = PollState.IDLE
        self.snapshot: Optional[Snapshot] = None
        self.last_updated = 0
        self._polling = False
        self._poll_timer: Optional[asyncio.TimerHandle] = None
        self._check_timer: Optional[asyncio.TimerHandle] = None
        self._tasks: Set[asyncio.Task] = set()
        self._initial_load: Optional[asyncio.Task] = None
        self._closed: Optional[asyncio.Event] = None

    @property
    def next_update(self) -> int:
        """Epoch milliseconds at which the next snapshot is expected, 0 before the first load."""
        if not self.last_updated:
            return 0
        return self.last_updated + self.config.update_interval_sec * 1000

    @property
    def is_polling(self) -> bool:
        return self._polling

    def _now_ms(self) -> int:
        return int(self.clock() * 1000)

    def _spawn(self, coro) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def _accept(self, snapshot: Snapshot, is_new: bool) -> None:
        self.snapshot = snapshot
        self.last_updated = snapshot.last_updated
        if not self._polling:
            self.state = PollState.FRESH
        if self.on_update:
            self.on_update(snapshot, is_new)

    async def load(self) -> bool:
        """
        Read the endpoint once and apply the acceptance rule.

        The first snapshot is always accepted but does not count as new.
        Afterwards only a strictly newer ``lastUpdated`` is accepted.

        Returns:
            True if a strictly newer snapshot replaced the held one
        """
        try:
            snapshot = await self.fetch_snapshot()
        except PennyTrendsError as e:
            logger.warning(f"Snapshot read failed: {e}")
            return False

        if not self.last_updated:
            logger.info(f"Initial snapshot loaded ({len(snapshot.stocks)} stocks)")
            self._accept(snapshot, is_new=False)
            return False

        if snapshot.last_updated > self.last_updated:
            logger.info(f"New snapshot detected ({len(snapshot.stocks)} stocks)")
            self._accept(snapshot, is_new=True)
            return True

        logger.debug("Snapshot unchanged")
        return False

    def check_due(self) -> bool:
        """
        Countdown tick. Starts polling when the held snapshot is due for replacement.

        Returns:
            True if this tick started a polling cycle
        """
        if self._polling:
            return False

        if not self.last_updated:
            # Nothing held yet: keep trying to get a first snapshot, one read at a time
            if self._initial_load is None or self._initial_load.done():
                self._initial_load = self._spawn(self.load())
            return False

        if self._now_ms() >= self.next_update:
            self.state = PollState.DUE
            self._spawn(self.start_polling())
            return True
        return False

    async def start_polling(self) -> None:
        """Begin a polling cycle: one immediate read, then one per poll interval."""
        if self._polling:
            logger.debug("Already polling, skipping")
            return

        self._cancel_poll_timer()
        self._polling = True
        self.state = PollState.POLLING
        logger.info(f"Starting polling (every {self.config.poll_interval_sec}s)")

        if await self.load():
            self.stop_polling()
            return

        # Stopped while the first read was in flight
        if not self._polling:
            return

        self._schedule_poll()

    def stop_polling(self) -> None:
        """Cancel the poll timer and leave the polling state."""
        if self._polling:
            logger.info("Stopping polling")
        self._cancel_poll_timer()
        self._polling = False
        self.state = PollState.FRESH if self.last_updated else PollState.IDLE

    def _cancel_poll_timer(self) -> None:
        if self._poll_timer is not None:
            self._poll_timer.cancel()
            self._poll_timer = None

    def _schedule_poll(self) -> None:
        loop = asyncio.get_running_loop()
        self._poll_timer = loop.call_later(self.config.poll_interval_sec, self._on_poll_timer)

    def _on_poll_timer(self) -> None:
        self._schedule_poll()
        self._spawn(self._poll_once())

    async def _poll_once(self) -> None:
        if await self.load():
            self.stop_polling()

    def _schedule_check(self) -> None:
        loop = asyncio.get_running_loop()
        self._check_timer = loop.call_later(self.config.check_interval_sec, self._on_check_timer)

    def _on_check_timer(self) -> None:
        self._schedule_check()
        self.check_due()

    async def start(self) -> None:
        """Perform the initial load and start the countdown check."""
        self._closed = asyncio.Event()
        await self.load()
        self._schedule_check()

    async def run_forever(self) -> None:
        """Run until ``close`` is called."""
        await self.start()
        await self._closed.wait()

    async def close(self) -> None:
        """Stop every timer and wait for reads still in flight."""
        if self._check_timer is not None:
            self._check_timer.cancel()
            self._check_timer = None
        self.stop_polling()

        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        if self._closed is not None:
            self._closed.set()

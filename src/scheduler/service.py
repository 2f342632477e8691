"""Weekly publication scheduler.

Runs a PublicationCycle on fixed weekdays at a fixed local time (default:
Monday and Thursday at 9:00 Europe/Warsaw). The scheduler is a plain service
object owning one asyncio task; create as many as needed (tests do).

Usage:
    scheduler = PublicationScheduler()
    scheduler.start(settings.scheduler)
    ...
    await scheduler.stop()
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Awaitable, Callable, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from src.common.config import SchedulerSettings, settings
from src.common.exceptions import ConfigurationError
from src.common.logging import setup_logging

from .cycle import CycleResult, PublicationCycle

logger = setup_logging(module_name="scheduler.service")

Clock = Callable[[], datetime]
Sleeper = Callable[[float], Awaitable[None]]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def next_run_time(config: SchedulerSettings, now: datetime) -> datetime:
    """First scheduled slot strictly after ``now`` (timezone-aware).

    Raises:
        ConfigurationError: On an unknown timezone or no valid weekday
    """
    try:
        tz = ZoneInfo(config.timezone)
    except ZoneInfoNotFoundError as exc:
        raise ConfigurationError(f"Unknown scheduler timezone: {config.timezone}") from exc

    local_now = now.astimezone(tz)
    for offset in range(8):
        day = (local_now + timedelta(days=offset)).date()
        if day.weekday() not in config.days_of_week:
            continue
        candidate = datetime(
            day.year, day.month, day.day, config.hour, config.minute, tzinfo=tz
        )
        if candidate > local_now:
            return candidate

    raise ConfigurationError(
        f"Scheduler days_of_week must contain weekdays 0-6, got {config.days_of_week}"
    )


class PublicationScheduler:
    """Owns the scheduling loop; start() once, stop() to shut down."""

    def __init__(
        self,
        cycle_factory: Optional[Callable[[], PublicationCycle]] = None,
        clock: Clock = _utcnow,
        sleep: Sleeper = asyncio.sleep,
    ) -> None:
        self._cycle_factory = cycle_factory or PublicationCycle
        self._clock = clock
        self._sleep = sleep
        self.config: Optional[SchedulerSettings] = None
        self.next_run: Optional[datetime] = None
        self._task: Optional[asyncio.Task] = None
        self._current: Optional[asyncio.Future] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self, config: Optional[SchedulerSettings] = None) -> None:
        """Start the loop on the running event loop.

        Raises:
            RuntimeError: If this scheduler is already running
            ConfigurationError: If the schedule is invalid
        """
        if self.running:
            raise RuntimeError("Scheduler is already running")

        self.config = config or settings.scheduler
        self.next_run = next_run_time(self.config, self._clock())
        self._task = asyncio.get_running_loop().create_task(
            self._loop(), name="publication-scheduler"
        )
        logger.info("Scheduler started, next publication: %s", self.next_run.isoformat())

    async def stop(self) -> None:
        """Cancel the loop. A cycle already running is allowed to finish."""
        if self._task is None:
            return

        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        self.next_run = None

        if self._current is not None and not self._current.done():
            logger.info("Waiting for the running publication cycle to finish")
            try:
                await self._current
            except Exception as exc:
                logger.error("Scheduled publication failed: %s", exc)
        self._current = None
        logger.info("Scheduler stopped")

    async def trigger_now(self) -> CycleResult:
        """Run one cycle immediately, outside the schedule. Errors propagate."""
        logger.info("Manual publication triggered")
        return await self._cycle_factory().run()

    async def _loop(self) -> None:
        if self.config is None:
            raise RuntimeError("Scheduler loop started without a configuration")
        while True:
            self.next_run = next_run_time(self.config, self._clock())
            delay = max(0.0, (self.next_run - self._clock()).total_seconds())
            logger.info("Next publication: %s (in %.0fs)", self.next_run.isoformat(), delay)
            await self._sleep(delay)
            await self._run_scheduled_cycle()

    async def _run_scheduled_cycle(self) -> None:
        logger.info("Running scheduled publication...")
        # Shielded so stop() never cancels in-flight writer calls
        try:
            self._current = asyncio.ensure_future(self._cycle_factory().run())
            result = await asyncio.shield(self._current)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.error("Scheduled publication failed: %s", exc)
            return
        logger.info(
            "Scheduled publication done: post %s by %s (%d/100)",
            result.post_id,
            result.writer.value,
            result.total_score,
        )

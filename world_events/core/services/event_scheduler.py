"""
Event Scheduler for the world events engine.

Drives the calendar detector and the encounter trigger on a fixed interval,
plus periodic cleanup of old announcement records.

Every job runs inside its own failure boundary with a timeout, so a slow or
broken collaborator never stalls the other job or the next tick.
"""

import asyncio
import inspect
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, List, Optional

from ..interfaces import AnnouncementStore, ConfigurationError
from ..models import DetectionResult, TriggerResult
from .calendar_detector import CalendarEventDetector
from .encounter_trigger import EncounterTrigger
from world_events.utils import ensure_aware, get_logger, utc_now

logger = get_logger("scheduler")

DEFAULT_INTERVAL_SECONDS = 60
DEFAULT_JOB_TIMEOUT_SECONDS = 45
DEFAULT_CLEANUP_INTERVAL_SECONDS = 24 * 60 * 60
DEFAULT_RETENTION_DAYS = 7


@dataclass
class TickReport:
    """What happened during one scheduler tick."""
    now: datetime
    detection: Optional[DetectionResult] = None
    encounter: Optional[TriggerResult] = None
    cleaned: Optional[int] = None
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors


class EventScheduler:
    """
    Periodic driver for the world event jobs.

    Usage:
        scheduler = EventScheduler(detector, trigger, store)
        scheduler.start()
        ...
        await scheduler.shutdown()
    """

    def __init__(
        self,
        detector: Optional[CalendarEventDetector],
        trigger: Optional[EncounterTrigger],
        store: Optional[AnnouncementStore] = None,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
        job_timeout_seconds: float = DEFAULT_JOB_TIMEOUT_SECONDS,
        cleanup_interval_seconds: float = DEFAULT_CLEANUP_INTERVAL_SECONDS,
        retention_days: int = DEFAULT_RETENTION_DAYS,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Initialize the scheduler.

        Args:
            detector: Calendar job (None disables it)
            trigger: Encounter job (None disables it)
            store: Announcement store to clean up (None disables cleanup)
            interval_seconds: Time between ticks
            job_timeout_seconds: Upper bound for each job within a tick
            cleanup_interval_seconds: Minimum time between two cleanups
            retention_days: Age after which announcement records are deleted
            clock: Returns the current aware datetime
        """
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        if job_timeout_seconds <= 0:
            raise ValueError("job_timeout_seconds must be positive")

        self.detector = detector
        self.trigger = trigger
        self.store = store
        self.interval_seconds = interval_seconds
        self.job_timeout_seconds = job_timeout_seconds
        self.cleanup_interval_seconds = cleanup_interval_seconds
        self.retention_days = retention_days
        self.clock = clock

        self._task: Optional[asyncio.Task] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._stop_event: Optional[asyncio.Event] = None
        self._stopping = False
        self._last_cleanup: Optional[float] = None
        self._close_callbacks: List[Callable[[], Any]] = []
        self.tick_count = 0

    # ==================== Lifecycle ====================

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> asyncio.Task:
        """
        Launch the tick loop on the running event loop.

        Returns:
            The background task (the existing one if already running)
        """
        if self.is_running:
            return self._task

        self._loop = asyncio.get_running_loop()
        self._stop_event = asyncio.Event()
        self._stopping = False
        self._task = self._loop.create_task(self._run_loop())
        logger.info(f"World event scheduler started (every {self.interval_seconds}s)")
        return self._task

    def stop(self):
        """
        Request the loop to stop after the current tick.

        Safe to call from any thread.
        """
        loop = self._loop
        if loop is None or loop.is_closed():
            self._stopping = True
            return

        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None

        if running is loop:
            self._request_stop()
        else:
            loop.call_soon_threadsafe(self._request_stop)

    def _request_stop(self):
        self._stopping = True
        if self._stop_event is not None:
            self._stop_event.set()

    def add_close_callback(self, callback: Callable[[], Any]):
        """Register a callable (sync or async) to run on shutdown."""
        self._close_callbacks.append(callback)

    async def shutdown(self):
        """
        Stop the loop, let the in-flight tick finish, then run close callbacks.
        """
        self.stop()
        if self._task is not None:
            # Not cancelled: the loop exits on its own once the tick completes
            await asyncio.shield(self._task)
            self._task = None

        for callback in self._close_callbacks:
            try:
                result = callback()
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("Error in scheduler close callback")
        self._close_callbacks.clear()
        logger.info("World event scheduler stopped")

    async def _run_loop(self):
        while not self._stopping:
            try:
                await self.tick()
            except Exception:
                # tick() has its own boundaries; this only guards the clock
                logger.exception("Unexpected error in world event tick")

            if self._stopping:
                break
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self.interval_seconds)
            except asyncio.TimeoutError:
                pass

    # ==================== Tick ====================

    async def tick(self, now: Optional[datetime] = None) -> TickReport:
        """
        Run one tick: both jobs concurrently, then cleanup if it is due.

        Args:
            now: Override the clock (must be timezone-aware)

        Returns:
            TickReport with each job's result and any errors
        """
        if now is None:
            now = self.clock()
        ensure_aware(now)

        report = TickReport(now=now)
        self.tick_count += 1

        jobs = []
        if self.detector is not None:
            jobs.append(self._run_job("calendar", lambda: self.detector.run(now), report))
        if self.trigger is not None:
            jobs.append(self._run_job("encounter", lambda: self.trigger.evaluate(now.timestamp()), report))

        results = await asyncio.gather(*jobs)
        index = 0
        if self.detector is not None:
            report.detection = results[index]
            index += 1
        if self.trigger is not None:
            report.encounter = results[index]

        if self._cleanup_due(now):
            self._last_cleanup = now.timestamp()
            report.cleaned = await self._run_job(
                "cleanup",
                lambda: self.store.cleanup(self.retention_days, current_time=int(now.timestamp())),
                report,
            )

        return report

    def _cleanup_due(self, now: datetime) -> bool:
        if self.store is None:
            return False
        if self._last_cleanup is None:
            return True
        return now.timestamp() - self._last_cleanup >= self.cleanup_interval_seconds

    async def _run_job(
        self,
        name: str,
        job: Callable[[], Awaitable[Any]],
        report: TickReport
    ) -> Any:
        """Run one job under a timeout, logging and recording any failure."""
        try:
            return await asyncio.wait_for(job(), timeout=self.job_timeout_seconds)
        except asyncio.TimeoutError:
            logger.error(f"World event job '{name}' timed out after {self.job_timeout_seconds}s")
            report.errors[name] = "timeout"
        except ConfigurationError as e:
            logger.error(f"World event job '{name}' skipped: configuration error: {e}")
            report.errors[name] = str(e)
        except Exception as e:
            logger.exception(f"World event job '{name}' failed")
            report.errors[name] = str(e) or type(e).__name__
        return None

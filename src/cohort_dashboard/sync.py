"""Fetch and save orchestration between the store and the data service.

Every public coroutine returns a ``SyncResult`` instead of raising, so the
CLI and the MCP tools can show the outcome without their own error plumbing.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .client import DashboardAPIError, DashboardClient
from .parsers import MalformedPayloadError, to_wire
from .store import ViewStateStore

logger = logging.getLogger(__name__)

SYNC_ERRORS = (DashboardAPIError, MalformedPayloadError)


class SyncState(Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    READY = "ready"
    FETCH_FAILED = "fetch-failed"
    SAVING = "saving"
    SAVE_FAILED = "save-failed"


@dataclass
class SyncResult:
    """Outcome of one sync action."""

    ok: bool
    message: Optional[str] = None
    week: Optional[int] = None
    stale: bool = False


class SyncController:
    """Moves rosters between the data service and a ``ViewStateStore``."""

    def __init__(self, store: ViewStateStore, client: DashboardClient):
        self.store = store
        self.client = client
        self.state = SyncState.IDLE
        self._generation = 0

    def _is_current(self, generation: int, week: int) -> bool:
        return generation == self._generation and self.store.week == week

    async def fetch_week(self, week: int) -> SyncResult:
        """Switch to ``week`` and load its roster.

        A response is only committed if no newer fetch was started while it
        was in flight. On failure the roster is emptied.
        """
        self.store.set_week(week)
        self._generation += 1
        generation = self._generation
        self.state = SyncState.FETCHING

        try:
            roster = await self.client.get_weekly_data(week)
        except SYNC_ERRORS as e:
            if not self._is_current(generation, week):
                logger.warning("Ignoring failed fetch for week %d, superseded", week)
                return SyncResult(ok=False, week=week, stale=True)
            logger.error("Error fetching data for week %d: %s", week, e)
            self.store.clear_roster()
            self.store.last_error = str(e)
            self.state = SyncState.FETCH_FAILED
            return SyncResult(ok=False, message=str(e), week=week)

        if not self._is_current(generation, week):
            logger.warning("Discarding stale roster for week %d", week)
            return SyncResult(ok=False, week=week, stale=True)

        self.store.replace_roster(roster)
        self.store.last_error = None
        self.state = SyncState.READY
        logger.info("Fetched %d records for week %d", len(roster), week)
        return SyncResult(ok=True, week=week)

    async def fetch_participant_count(self) -> SyncResult:
        """Load the total participant count. Failures only get logged."""
        try:
            self.store.total_participants = await self.client.get_student_count()
        except SYNC_ERRORS as e:
            logger.warning("Error fetching total count: %s", e)
            return SyncResult(ok=False, message=str(e))
        return SyncResult(ok=True)

    async def fetch_weekly_attendance(self) -> SyncResult:
        """Load per-week attendance counts. Failures only get logged."""
        try:
            self.store.weekly_attendance = await self.client.get_weekly_attendance()
        except SYNC_ERRORS as e:
            logger.warning("Error fetching weekly attendance: %s", e)
            return SyncResult(ok=False, message=str(e))
        return SyncResult(ok=True)

    async def load(self, week: int = 0) -> SyncResult:
        """Initial load: the week's roster plus both counters."""
        result, _, _ = await asyncio.gather(
            self.fetch_week(week),
            self.fetch_participant_count(),
            self.fetch_weekly_attendance(),
        )
        return result

    async def save(self) -> SyncResult:
        """Send the whole roster of the current week in one request.

        On success edit mode ends and the local roster stays as the saved
        state. On failure edit mode and the local edits are kept.
        """
        if not self.store.editing:
            return SyncResult(ok=False, message="Not in edit mode", week=self.store.week)
        if self.state == SyncState.FETCHING:
            return SyncResult(
                ok=False, message="Roster is still loading", week=self.store.week
            )

        week = self.store.week
        payload = [to_wire(record, week) for record in self.store.roster]
        logger.debug("Saving %d records for week %d", len(payload), week)
        self.state = SyncState.SAVING

        try:
            response = await self.client.save_weekly_data(week, payload)
        except SYNC_ERRORS as e:
            logger.error("Save failed for week %d: %s", week, e)
            self.store.last_error = str(e)
            self.state = SyncState.SAVE_FAILED
            return SyncResult(ok=False, message=str(e), week=week)

        logger.debug("Save response: %r", response)
        if self.store.week == week:
            self.store.end_edit()
        self.store.last_error = None
        self.state = SyncState.READY
        logger.info("Saved %d records for week %d", len(payload), week)
        return SyncResult(ok=True, week=week)

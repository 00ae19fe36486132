"""The dashboard session: one store shared by the pipeline, editor and sync."""

from dataclasses import replace
from typing import Optional

from . import pipeline
from .client import DashboardClient
from .editor import EditController
from .formatters import format_roster
from .models import StudentWeekRecord
from .store import ViewStateStore
from .sync import SyncController


class Dashboard:
    """Everything an operator action needs, wired to a single store."""

    def __init__(self, client: DashboardClient, week: int = 0):
        self.client = client
        self.store = ViewStateStore(week=week)
        self.editor = EditController(self.store)
        self.sync = SyncController(self.store, self.client)

    def view(self) -> list[StudentWeekRecord]:
        return pipeline.derive_view(self.store.roster, self.store.criteria)

    def ta_options(self) -> list[str]:
        return pipeline.ta_options(self.store.roster)

    def set_filters(
        self,
        search: Optional[str] = None,
        group: Optional[str] = None,
        ta: Optional[str] = None,
    ) -> None:
        """Update only the criteria that are given."""
        criteria = self.store.criteria
        if search is not None:
            criteria = replace(criteria, search=search)
        if group is not None:
            criteria = replace(criteria, group=group)
        if ta is not None:
            criteria = replace(criteria, ta=ta)
        self.store.criteria = criteria

    def clear_filters(self) -> None:
        self.store.criteria = pipeline.clear_filters(self.store.criteria)

    def sort_by(self, key: str) -> None:
        sort = pipeline.request_sort(self.store.criteria.sort, key)
        self.store.criteria = replace(self.store.criteria, sort=sort)

    def render(self) -> str:
        return format_roster(self.store, self.view())

    async def close(self) -> None:
        await self.client.close()

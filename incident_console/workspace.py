# ============================================================
# workspace.py — Incident Workspace
# ============================================================

import logging
from typing import Any, List, Optional, Union

from incident_console.client import ResourceClient
from incident_console.controller import CreateController
from incident_console.models import (
    OperationalIncident,
    ProjectIncident,
    SortDirective,
    SortOrder,
    TabSelector,
)
from incident_console.pipeline import display
from incident_console.session import SessionReader
from incident_console.store import IncidentCollections
from incident_console.tabs import TabState

logger = logging.getLogger(__name__)

IncidentRow = Union[OperationalIncident, ProjectIncident]


class IncidentWorkspace:
    """Everything behind the incidents page: tabs, tables, search, sort and
    the create modal, wired to one resource client and one session reader.
    """

    def __init__(self, client: ResourceClient, session: SessionReader):
        self.client = client
        self.session = session
        self.tabs = TabState()
        self.collections = IncidentCollections(client, session)
        self.creator = CreateController(
            client,
            session,
            tab=lambda: self.tabs.active,
            on_created=self.collections.refresh,
        )
        self.search_term = ""
        self.sort = SortDirective()
        self.mounted = False
        self.tabs.on_change(self._tab_changed)

    # ─────────────────────────────────────────────
    # Loading
    # ─────────────────────────────────────────────

    async def mount(self) -> None:
        await self.collections.refresh()
        self.mounted = True

    async def refresh(self) -> None:
        await self.collections.refresh()

    @property
    def loading(self) -> bool:
        return not self.mounted or self.collections.loading

    # ─────────────────────────────────────────────
    # Tabs, search & sort
    # ─────────────────────────────────────────────

    @property
    def active_tab(self) -> TabSelector:
        return self.tabs.active

    def select_tab(self, tab: TabSelector) -> None:
        self.tabs.select(tab)

    def _tab_changed(self, tab: TabSelector) -> None:
        # Search term is shared between tabs; only the draft is discarded
        self.creator.reset_draft()

    def set_search(self, term: Optional[str]) -> None:
        self.search_term = term or ""

    def set_sort(self, field: Optional[str], order: Union[SortOrder, str] = SortOrder.ASC) -> None:
        if field and field not in self.tabs.sort_fields:
            raise ValueError(
                f"Cannot sort {self.tabs.active.value} incidents by {field!r}"
            )
        self.sort = SortDirective(field=field or None, order=SortOrder(order))

    def active_collection(self) -> List[IncidentRow]:
        if self.tabs.active == TabSelector.OPERATIONAL:
            return list(self.collections.operational.items)
        return list(self.collections.project.items)

    def rows(self) -> List[IncidentRow]:
        sort = self.sort
        # A sort column that only exists on the other tab leaves order untouched
        if sort.field and sort.field not in self.tabs.sort_fields:
            sort = SortDirective(order=sort.order)
        return display(
            self.active_collection(), self.search_term, sort, self.tabs.search_fields
        )

    # ─────────────────────────────────────────────
    # Create modal
    # ─────────────────────────────────────────────

    def open_create(self) -> None:
        self.creator.open()

    def edit_field(self, name: str, value: Any) -> Any:
        return self.creator.edit(name, value)

    def cancel_create(self) -> None:
        self.creator.cancel()

    async def save(self) -> bool:
        return await self.creator.submit()

# ============================================================
# tabs.py — Tab State Machine
# ============================================================

import logging
from typing import Callable, List, Tuple

from incident_console.client import OPERATIONAL_INCIDENTS_PATH, PROJECT_INCIDENTS_PATH
from incident_console.models import TabSelector
from incident_console.schemas import SEARCH_FIELDS, SORT_FIELDS, FieldSpec, schema_for

logger = logging.getLogger(__name__)

_ENDPOINTS = {
    TabSelector.OPERATIONAL: OPERATIONAL_INCIDENTS_PATH,
    TabSelector.PROJECT: PROJECT_INCIDENTS_PATH,
}


class TabState:
    """Which incident kind is live. Starts on the operational tab."""

    def __init__(self, initial: TabSelector = TabSelector.OPERATIONAL):
        self.active = TabSelector(initial)
        self._listeners: List[Callable[[TabSelector], None]] = []

    def on_change(self, listener: Callable[[TabSelector], None]) -> None:
        self._listeners.append(listener)

    def select(self, tab: TabSelector) -> None:
        # Re-selecting the current tab still notifies listeners
        self.active = TabSelector(tab)
        logger.debug(f"Tab selected: {self.active.value}")
        for listener in self._listeners:
            listener(self.active)

    @property
    def schema(self) -> Tuple[FieldSpec, ...]:
        return schema_for(self.active)

    @property
    def endpoint(self) -> str:
        return _ENDPOINTS[self.active]

    @property
    def search_fields(self) -> Tuple[str, ...]:
        return SEARCH_FIELDS[self.active]

    @property
    def sort_fields(self) -> Tuple[str, ...]:
        return SORT_FIELDS[self.active]

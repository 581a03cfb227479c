# ============================================================
# controller.py — Create/Submit Controller
# ============================================================

import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Optional

from incident_console.client import ResourceClient
from incident_console.draft import Draft
from incident_console.errors import PreconditionFailure, TransportError
from incident_console.models import TabSelector
from incident_console.session import SessionReader
from incident_console.store import require_credential

logger = logging.getLogger(__name__)


class ModalState(str, Enum):
    CLOSED = "closed"
    OPEN = "open"
    SUBMITTING = "submitting"


class CreateController:
    """
    Owns the create modal:
    - opening resets the draft for the active tab
    - edits go through the tab schema (integer fields coerced on input)
    - save posts to the tab's endpoint, then closes and refetches
    """

    def __init__(
        self,
        client: ResourceClient,
        session: SessionReader,
        tab: Callable[[], TabSelector],
        on_created: Callable[[], Awaitable[None]],
    ):
        self.client = client
        self.session = session
        self._tab = tab
        self._on_created = on_created
        self.state = ModalState.CLOSED
        self.draft = Draft.empty(tab())
        self.last_error: Optional[TransportError] = None

    @property
    def is_open(self) -> bool:
        return self.state != ModalState.CLOSED

    def reset_draft(self) -> None:
        self.draft = Draft.empty(self._tab())

    def open(self) -> None:
        self.reset_draft()
        self.last_error = None
        self.state = ModalState.OPEN

    def edit(self, name: str, value: Any) -> Any:
        """Store one field; unknown names raise KeyError and change nothing"""
        return self.draft.set(name, value)

    def cancel(self) -> None:
        self.state = ModalState.CLOSED
        self.reset_draft()
        self.last_error = None

    def _create_call(self, tab: TabSelector) -> Callable[[str, Dict[str, Any]], Awaitable[None]]:
        if tab == TabSelector.OPERATIONAL:
            return self.client.create_operational_incident
        return self.client.create_project_incident

    def _failed(self, sent: Draft, error: TransportError) -> None:
        # The sent draft comes back even if a tab change replaced it meanwhile
        logger.error(f"❌ Failed to create {sent.tab.value} incident: {error}")
        self.last_error = error
        self.draft = sent
        self.state = ModalState.OPEN

    async def submit(self) -> bool:
        """Send the draft. Returns True when the incident was created."""
        if self.state != ModalState.OPEN:
            logger.debug(f"Ignoring save while modal is {self.state.value}")
            return False

        try:
            credential = require_credential(self.session)
        except PreconditionFailure:
            logger.debug("Skipping incident create: not signed in")
            return False

        sent = self.draft
        tab = sent.tab
        self.state = ModalState.SUBMITTING
        try:
            await self._create_call(tab)(credential, sent.to_payload())
        except TransportError as e:
            # Server-side field errors are not mapped onto the form
            self._failed(sent, e)
            return False
        except Exception as e:
            self._failed(sent, TransportError(f"Could not create {tab.value} incident: {e}"))
            return False

        logger.info(f"✅ Created {tab.value} incident")
        self.last_error = None
        self.state = ModalState.CLOSED
        self.reset_draft()
        await self._on_created()
        return True

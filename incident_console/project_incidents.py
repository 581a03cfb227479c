# ============================================================
# project_incidents.py — Department Project Incidents
# ============================================================
#
# Incidents of a single project, as seen from the owning department:
# list them, load one into an edit draft, and save the edit back.

import logging
from typing import Any, List, Optional

from incident_console.client import ResourceClient
from incident_console.draft import Draft
from incident_console.errors import PreconditionFailure, TransportError
from incident_console.models import ProjectIncidentDetail, TabSelector
from incident_console.schemas import schema_for
from incident_console.session import SessionReader
from incident_console.store import Collection, fetch_into, require_credential

logger = logging.getLogger(__name__)


def department_of(session: SessionReader) -> Optional[int]:
    """Department id of the signed-in user, when the session stores one"""
    current_user = getattr(session, "current_user", None)
    if current_user is None:
        return None
    user = current_user() or {}
    try:
        return int(user["department"])
    except (KeyError, TypeError, ValueError):
        return None


class ProjectIncidentsView:
    """
    One department's view of a project's incidents:
    - refresh lists them (credential checked, stale results dropped)
    - edit loads one incident into a project draft
    - save sends the draft back, then refetches the list
    """

    def __init__(
        self,
        client: ResourceClient,
        session: SessionReader,
        department_id: int,
        project_id: int,
    ):
        self.client = client
        self.session = session
        self.department_id = int(department_id)
        self.project_id = int(project_id)
        self.incidents: Collection[ProjectIncidentDetail] = Collection(
            f"department {self.department_id} project {self.project_id} incidents"
        )
        self.editing: Optional[int] = None
        self.draft = Draft.empty(TabSelector.PROJECT)
        self.last_error: Optional[TransportError] = None

    @property
    def rows(self) -> List[ProjectIncidentDetail]:
        return list(self.incidents.items)

    async def refresh(self) -> None:
        await fetch_into(self.session, self.incidents, self._list)

    async def _list(self, credential: str) -> List[ProjectIncidentDetail]:
        return await self.client.list_department_project_incidents(
            credential, self.department_id, self.project_id
        )

    def _draft_from(self, incident: ProjectIncidentDetail) -> Draft:
        draft = Draft.empty(TabSelector.PROJECT)
        for spec in schema_for(TabSelector.PROJECT):
            value = getattr(incident, spec.name, None)
            if value is not None:
                draft.set(spec.name, value)
        draft.set("department_id", self.department_id)
        draft.set("project_id", self.project_id)
        return draft

    async def edit(self, incident_id: int) -> bool:
        """Load one incident into the edit draft. Returns True when loaded."""
        try:
            credential = require_credential(self.session)
        except PreconditionFailure:
            logger.debug("Skipping incident load: not signed in")
            return False

        try:
            incident = await self.client.get_department_project_incident(
                credential, self.department_id, self.project_id, incident_id
            )
        except TransportError as e:
            logger.error(f"❌ Failed to load project incident {incident_id}: {e}")
            self.last_error = e
            return False
        except Exception as e:
            logger.error(f"❌ Unexpected error while loading project incident {incident_id}: {e}")
            self.last_error = TransportError(f"Could not load incident {incident_id}: {e}")
            return False

        self.draft = self._draft_from(incident)
        self.editing = incident.id
        self.last_error = None
        return True

    def set_field(self, name: str, value: Any) -> Any:
        return self.draft.set(name, value)

    def cancel(self) -> None:
        self.editing = None
        self.draft = Draft.empty(TabSelector.PROJECT)
        self.last_error = None

    async def save(self) -> bool:
        """Send the edited incident. Returns True when the update went through."""
        if self.editing is None:
            logger.debug("Ignoring save: no incident is being edited")
            return False

        try:
            credential = require_credential(self.session)
        except PreconditionFailure:
            logger.debug("Skipping incident update: not signed in")
            return False

        incident_id = self.editing
        try:
            await self.client.update_department_project_incident(
                credential,
                self.department_id,
                self.project_id,
                incident_id,
                self.draft.to_payload(),
            )
        except TransportError as e:
            logger.error(f"❌ Failed to update project incident {incident_id}: {e}")
            self.last_error = e
            return False
        except Exception as e:
            logger.error(f"❌ Unexpected error while updating project incident {incident_id}: {e}")
            self.last_error = TransportError(f"Could not update incident {incident_id}: {e}")
            return False

        logger.info(f"✅ Updated project incident {incident_id}")
        self.cancel()
        await self.refresh()
        return True

# ============================================================
# client.py — REST Resource Client
# ============================================================

import logging
from typing import Any, Dict, List, Optional, Protocol, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from incident_console.errors import ConflictError, TransportError
from incident_console.models import OperationalIncident, ProjectIncident, ProjectIncidentDetail

logger = logging.getLogger(__name__)

OPERATIONAL_INCIDENTS_PATH = "/api/operations/incidents"
PROJECT_INCIDENTS_PATH = "/api/projects/incidents"

M = TypeVar("M", bound=BaseModel)


class ResourceClient(Protocol):
    async def list_operational_incidents(self, credential: str) -> List[OperationalIncident]:
        ...

    async def list_project_incidents(self, credential: str) -> List[ProjectIncident]:
        ...

    async def create_operational_incident(self, credential: str, payload: Dict[str, Any]) -> None:
        ...

    async def create_project_incident(self, credential: str, payload: Dict[str, Any]) -> None:
        ...

    async def list_department_project_incidents(
        self, credential: str, department_id: int, project_id: int
    ) -> List[ProjectIncidentDetail]:
        ...

    async def get_department_project_incident(
        self, credential: str, department_id: int, project_id: int, incident_id: int
    ) -> ProjectIncidentDetail:
        ...

    async def update_department_project_incident(
        self,
        credential: str,
        department_id: int,
        project_id: int,
        incident_id: int,
        payload: Dict[str, Any],
    ) -> None:
        ...


def _department_path(department_id: int, project_id: int) -> str:
    return f"{PROJECT_INCIDENTS_PATH}/department/{int(department_id)}/{int(project_id)}"


def _body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text or None


class HttpResourceClient:
    """
    Talks to the console API over HTTP:
    - bearer token on every request
    - list endpoints decoded into read models
    - any failure surfaces as TransportError (ConflictError for 409)
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        # One short-lived client per call so no connection outlives its event loop
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self._transport,
        )

    @staticmethod
    def _headers(credential: str) -> Dict[str, str]:
        return {"Authorization": f"Bearer {credential}"}

    async def _request(
        self,
        method: str,
        path: str,
        credential: str,
        payload: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        try:
            async with self._client() as client:
                response = await client.request(
                    method, path, json=payload, headers=self._headers(credential)
                )
        except httpx.HTTPError as e:
            raise TransportError(f"{method} {path} failed: {e}") from e

        if response.status_code == 409:
            raise ConflictError(f"{method} {path} conflict", payload=_body(response))
        if response.is_error:
            raise TransportError(
                f"{method} {path} returned {response.status_code}",
                status_code=response.status_code,
                payload=_body(response),
            )
        return response

    async def _list(self, path: str, credential: str, model: Type[M]) -> List[M]:
        response = await self._request("GET", path, credential)
        try:
            rows = response.json()
        except ValueError as e:
            raise TransportError(f"GET {path} returned invalid JSON") from e
        if not isinstance(rows, list):
            raise TransportError(f"GET {path} did not return a list", payload=rows)
        try:
            return [model(**row) for row in rows]
        except (TypeError, ValidationError) as e:
            raise TransportError(f"GET {path} returned malformed rows: {e}", payload=rows) from e

    # ─────────────────────────────────────────────
    # OPERATIONAL INCIDENTS
    # ─────────────────────────────────────────────

    async def list_operational_incidents(self, credential: str) -> List[OperationalIncident]:
        return await self._list(OPERATIONAL_INCIDENTS_PATH, credential, OperationalIncident)

    async def create_operational_incident(self, credential: str, payload: Dict[str, Any]) -> None:
        await self._request("POST", OPERATIONAL_INCIDENTS_PATH, credential, payload)

    # ─────────────────────────────────────────────
    # PROJECT INCIDENTS
    # ─────────────────────────────────────────────

    async def list_project_incidents(self, credential: str) -> List[ProjectIncident]:
        return await self._list(PROJECT_INCIDENTS_PATH, credential, ProjectIncident)

    async def create_project_incident(self, credential: str, payload: Dict[str, Any]) -> None:
        await self._request("POST", PROJECT_INCIDENTS_PATH, credential, payload)

    async def list_department_project_incidents(
        self, credential: str, department_id: int, project_id: int
    ) -> List[ProjectIncidentDetail]:
        """Project incidents scoped to one department's project"""
        path = _department_path(department_id, project_id)
        return await self._list(path, credential, ProjectIncidentDetail)

    async def get_department_project_incident(
        self, credential: str, department_id: int, project_id: int, incident_id: int
    ) -> ProjectIncidentDetail:
        path = f"{_department_path(department_id, project_id)}/{int(incident_id)}"
        response = await self._request("GET", path, credential)
        try:
            return ProjectIncidentDetail(**response.json())
        except (ValueError, TypeError, ValidationError) as e:
            raise TransportError(f"GET {path} returned a malformed incident: {e}") from e

    async def update_department_project_incident(
        self,
        credential: str,
        department_id: int,
        project_id: int,
        incident_id: int,
        payload: Dict[str, Any],
    ) -> None:
        path = f"{_department_path(department_id, project_id)}/{int(incident_id)}"
        await self._request("PUT", path, credential, payload)

from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional

import pytest

from incident_console.errors import TransportError
from incident_console.models import OperationalIncident, ProjectIncident, ProjectIncidentDetail
from incident_console.session import StaticSession


def run(coro):
    return asyncio.run(coro)


class FakeResourceClient:
    """In-memory stand-in for the REST API that records every call."""

    def __init__(
        self,
        operational: Optional[List[OperationalIncident]] = None,
        project: Optional[List[ProjectIncident]] = None,
        details: Optional[List[ProjectIncidentDetail]] = None,
    ) -> None:
        self.operational = list(operational or [])
        self.project = list(project or [])
        self.details = {d.id: d for d in details or []}
        self.calls: List[tuple] = []
        self.fail_lists = False
        self.fail_creates = False

    def count(self, name: str) -> int:
        return sum(1 for call in self.calls if call[0] == name)

    async def list_operational_incidents(self, credential: str) -> List[OperationalIncident]:
        self.calls.append(("list_operational", credential))
        if self.fail_lists:
            raise TransportError("backend down", status_code=503)
        return list(self.operational)

    async def list_project_incidents(self, credential: str) -> List[ProjectIncident]:
        self.calls.append(("list_project", credential))
        if self.fail_lists:
            raise TransportError("backend down", status_code=503)
        return list(self.project)

    async def create_operational_incident(self, credential: str, payload: Dict[str, Any]) -> None:
        self.calls.append(("create_operational", credential, payload))
        if self.fail_creates:
            raise TransportError("rejected", status_code=400)

    async def create_project_incident(self, credential: str, payload: Dict[str, Any]) -> None:
        self.calls.append(("create_project", credential, payload))
        if self.fail_creates:
            raise TransportError("rejected", status_code=400)

    async def list_department_project_incidents(
        self, credential: str, department_id: int, project_id: int
    ) -> List[ProjectIncidentDetail]:
        self.calls.append(("list_department", credential, department_id, project_id))
        if self.fail_lists:
            raise TransportError("backend down", status_code=503)
        return list(self.details.values())

    async def get_department_project_incident(
        self, credential: str, department_id: int, project_id: int, incident_id: int
    ) -> ProjectIncidentDetail:
        self.calls.append(("get_department", credential, department_id, project_id, incident_id))
        if incident_id not in self.details:
            raise TransportError("not found", status_code=404)
        return self.details[incident_id]

    async def update_department_project_incident(
        self,
        credential: str,
        department_id: int,
        project_id: int,
        incident_id: int,
        payload: Dict[str, Any],
    ) -> None:
        self.calls.append(("update_department", credential, incident_id, payload))
        if self.fail_creates:
            raise TransportError("rejected", status_code=400)
        current = self.details[incident_id].model_dump(by_alias=True)
        current.update(payload)
        self.details[incident_id] = ProjectIncidentDetail(**current)


@pytest.fixture()
def operational_rows() -> List[OperationalIncident]:
    return [
        OperationalIncident(
            id=1, serviceName="DNS", incidentDate="2024-03-01T10:00:00",
            severity="LOW", category="NETWORK",
        ),
        OperationalIncident(
            id=2, serviceName="LDAP", incidentDate="2024-01-15T08:30:00",
            severity="HIGH", category="NETWORK",
        ),
        OperationalIncident(
            id=3, serviceName="Mail relay", incidentDate="2024-02-10T12:00:00",
            severity="CRITICAL", category="SOFTWARE",
        ),
    ]


@pytest.fixture()
def project_rows() -> List[ProjectIncident]:
    return [
        ProjectIncident(id=10, title="Vendor outage", project="Billing",
                        severity="MEDIUM", category="THIRD_PARTY_ISSUE"),
        ProjectIncident(id=11, title="Phishing wave", project="Portal",
                        severity="CRITICAL", category="CYBER_ATTACK"),
    ]


@pytest.fixture()
def fake_client(operational_rows, project_rows) -> FakeResourceClient:
    return FakeResourceClient(operational_rows, project_rows)


@pytest.fixture()
def signed_in() -> StaticSession:
    return StaticSession("token-123")


@pytest.fixture()
def signed_out() -> StaticSession:
    return StaticSession(None)

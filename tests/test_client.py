from __future__ import annotations

from typing import Any, Dict, List

import httpx
import pytest
from fastapi import FastAPI, Header, HTTPException
from fastapi.responses import JSONResponse

from conftest import run
from incident_console.client import HttpResourceClient
from incident_console.errors import ConflictError, TransportError
from incident_console.models import Severity
from incident_console.project_incidents import ProjectIncidentsView
from incident_console.session import StaticSession
from incident_console.workspace import IncidentWorkspace

TOKEN = "token-123"


def _backend() -> tuple[FastAPI, Dict[str, List[Dict[str, Any]]]]:
    """Minimal stand-in for the console API"""
    app = FastAPI()
    state: Dict[str, List[Dict[str, Any]]] = {
        "operational": [
            {"id": 1, "serviceName": "DNS", "incidentDate": "2024-03-01T10:00:00",
             "severity": "LOW", "category": "NETWORK"},
        ],
        "project": [
            {"id": 10, "title": "Vendor outage", "project": "Billing",
             "severity": "MEDIUM", "category": "THIRD_PARTY_ISSUE"},
        ],
        "posted": [],
        "updated": [],
    }

    def _check(authorization: str) -> None:
        if authorization != f"Bearer {TOKEN}":
            raise HTTPException(status_code=401, detail="Unauthorized")

    @app.get("/api/operations/incidents")
    async def list_operational(authorization: str = Header("")):
        _check(authorization)
        return state["operational"]

    @app.post("/api/operations/incidents", status_code=201)
    async def create_operational(body: Dict[str, Any], authorization: str = Header("")):
        _check(authorization)
        if body.get("title") == "duplicate":
            return JSONResponse(
                status_code=409, content={"field": "title", "message": "Title already exists"}
            )
        state["posted"].append(body)
        state["operational"].append({
            "id": len(state["operational"]) + 1,
            "serviceName": body.get("title", ""),
            "incidentDate": body.get("incidentDate"),
            "severity": body.get("severity", "LOW"),
            "category": body.get("category", "OTHER"),
        })
        return {"status": "ok"}

    @app.get("/api/projects/incidents")
    async def list_project(authorization: str = Header("")):
        _check(authorization)
        return state["project"]

    @app.post("/api/projects/incidents", status_code=201)
    async def create_project(body: Dict[str, Any], authorization: str = Header("")):
        _check(authorization)
        state["posted"].append(body)
        return {"status": "ok"}

    @app.get("/api/projects/incidents/department/{department_id}/{project_id}")
    async def list_department_project(department_id: int, project_id: int, authorization: str = Header("")):
        _check(authorization)
        if department_id != 3:
            return []
        return state["project"]

    @app.get("/api/projects/incidents/department/{department_id}/{project_id}/{incident_id}")
    async def get_department_project(
        department_id: int, project_id: int, incident_id: int, authorization: str = Header("")
    ):
        _check(authorization)
        for row in state["project"]:
            if row["id"] == incident_id:
                return row
        raise HTTPException(status_code=404, detail="Incident not found")

    @app.put("/api/projects/incidents/department/{department_id}/{project_id}/{incident_id}")
    async def update_department_project(
        department_id: int, project_id: int, incident_id: int,
        body: Dict[str, Any], authorization: str = Header(""),
    ):
        _check(authorization)
        state["updated"].append(body)
        for row in state["project"]:
            if row["id"] == incident_id:
                row.update({k: v for k, v in body.items() if k in row})
        return {"status": "ok"}

    @app.get("/broken")
    async def broken():
        return {"not": "a list"}

    return app, state


@pytest.fixture()
def backend():
    return _backend()


@pytest.fixture()
def client(backend) -> HttpResourceClient:
    app, _ = backend
    return HttpResourceClient("http://console.test/", transport=httpx.ASGITransport(app=app))


def test_lists_decode_into_read_models(client):
    operational = run(client.list_operational_incidents(TOKEN))
    assert operational[0].service_name == "DNS"
    assert operational[0].severity == Severity.LOW
    assert operational[0].incident_date.year == 2024

    project = run(client.list_project_incidents(TOKEN))
    assert project[0].project == "Billing"


def test_department_scoped_project_listing(client):
    assert [i.id for i in run(client.list_department_project_incidents(TOKEN, 3, 7))] == [10]
    assert run(client.list_department_project_incidents(TOKEN, 4, 7)) == []


def test_create_sends_bearer_and_body(client, backend):
    _, state = backend
    run(client.create_project_incident(TOKEN, {"title": "Outage", "projectId": 9}))
    assert state["posted"] == [{"title": "Outage", "projectId": 9}]


def test_rejected_token_is_transport_error(client):
    with pytest.raises(TransportError) as err:
        run(client.list_operational_incidents("wrong"))
    assert err.value.status_code == 401


def test_conflict_payload_is_decoded(client):
    with pytest.raises(ConflictError) as err:
        run(client.create_operational_incident(TOKEN, {"title": "duplicate"}))
    assert err.value.status_code == 409
    assert err.value.field == "title"
    assert err.value.detail == "Title already exists"


def test_non_list_body_is_transport_error(client):
    with pytest.raises(TransportError):
        run(client._list("/broken", TOKEN, dict))


def test_connection_failure_is_transport_error():
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = HttpResourceClient("http://console.test", transport=httpx.MockTransport(refuse))
    with pytest.raises(TransportError):
        run(client.list_project_incidents(TOKEN))


def test_workspace_end_to_end_over_http(client, backend):
    _, state = backend
    ws = IncidentWorkspace(client, StaticSession(TOKEN))
    run(ws.mount())
    assert [r.service_name for r in ws.rows()] == ["DNS"]

    ws.open_create()
    ws.edit_field("title", "LDAP")
    ws.edit_field("severity", "HIGH")
    ws.edit_field("category", "NETWORK")
    ws.edit_field("reportedById", "42")
    assert run(ws.save())

    assert state["posted"][-1] == {"title": "LDAP", "severity": "HIGH", "category": "NETWORK", "reportedById": 42}
    ws.set_sort("severity", "desc")
    assert [r.service_name for r in ws.rows()] == ["LDAP", "DNS"]


def test_conflict_on_save_stays_open_without_field_mapping(client):
    ws = IncidentWorkspace(client, StaticSession(TOKEN))
    run(ws.mount())
    ws.open_create()
    ws.edit_field("title", "duplicate")
    assert not run(ws.save())
    assert ws.creator.is_open
    assert isinstance(ws.creator.last_error, ConflictError)
    assert ws.creator.draft.values == {"title": "duplicate"}


def test_get_and_update_one_department_project_incident(client, backend):
    _, state = backend
    incident = run(client.get_department_project_incident(TOKEN, 3, 7, 10))
    assert incident.title == "Vendor outage"
    assert incident.project == "Billing"

    run(client.update_department_project_incident(TOKEN, 3, 7, 10, {"severity": "HIGH"}))
    assert state["updated"] == [{"severity": "HIGH"}]

    with pytest.raises(TransportError) as err:
        run(client.get_department_project_incident(TOKEN, 3, 7, 99))
    assert err.value.status_code == 404


def test_project_incidents_view_over_http(client, backend):
    _, state = backend
    view = ProjectIncidentsView(client, StaticSession(TOKEN), department_id=3, project_id=7)
    run(view.refresh())
    assert [i.title for i in view.rows] == ["Vendor outage"]

    assert run(view.edit(10))
    view.set_field("status", "RESOLVED")
    view.set_field("actionTaken", "Failed over to backup vendor")
    assert run(view.save())

    assert state["updated"][-1] == {
        "title": "Vendor outage",
        "severity": "MEDIUM",
        "status": "RESOLVED",
        "category": "THIRD_PARTY_ISSUE",
        "actionTaken": "Failed over to backup vendor",
        "departmentId": 3,
        "projectId": 7,
    }
    assert view.rows[0].severity == Severity.MEDIUM

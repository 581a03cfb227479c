from __future__ import annotations

from typing import List

import pytest

from conftest import FakeResourceClient, run
from incident_console.errors import TransportError
from incident_console.models import ProjectIncidentDetail, Severity
from incident_console.project_incidents import ProjectIncidentsView, department_of
from incident_console.session import FileSessionStore, StaticSession


@pytest.fixture()
def details() -> List[ProjectIncidentDetail]:
    return [
        ProjectIncidentDetail(
            id=21, title="Vendor outage", description="Billing API unreachable",
            startDate="2024-04-02T08:00:00", severity="MEDIUM", category="THIRD_PARTY_ISSUE",
            status="OPEN", department="Finance", project="Billing",
        ),
        ProjectIncidentDetail(id=22, title="Phishing wave", severity="CRITICAL"),
    ]


@pytest.fixture()
def client(details) -> FakeResourceClient:
    return FakeResourceClient(details=details)


@pytest.fixture()
def view(client, signed_in) -> ProjectIncidentsView:
    return ProjectIncidentsView(client, signed_in, department_id=3, project_id=7)


def test_refresh_lists_department_project_incidents(view, client):
    run(view.refresh())
    assert [i.id for i in view.rows] == [21, 22]
    assert client.calls == [("list_department", "token-123", 3, 7)]


def test_refresh_without_credential_makes_no_calls(client, signed_out):
    view = ProjectIncidentsView(client, signed_out, 3, 7)
    run(view.refresh())
    assert client.calls == []
    assert view.rows == []


def test_refresh_failure_keeps_rows(view, client):
    run(view.refresh())
    client.fail_lists = True
    run(view.refresh())
    assert [i.id for i in view.rows] == [21, 22]


def test_edit_loads_incident_into_project_draft(view):
    assert run(view.edit(21))
    assert view.editing == 21
    assert view.draft.values == {
        "title": "Vendor outage",
        "description": "Billing API unreachable",
        "start_date": "2024-04-02T08:00:00",
        "severity": "MEDIUM",
        "status": "OPEN",
        "category": "THIRD_PARTY_ISSUE",
        "department_id": 3,
        "project_id": 7,
    }


def test_edit_of_missing_incident_reports_error(view):
    assert not run(view.edit(99))
    assert view.editing is None
    assert view.last_error.status_code == 404


def test_save_sends_update_then_refetches(view, client):
    run(view.edit(22))
    view.set_field("severity", Severity.LOW)
    view.set_field("rootCause", "Mail filter rule missing")
    client.calls.clear()

    assert run(view.save())
    name, credential, incident_id, payload = client.calls[0]
    assert (name, credential, incident_id) == ("update_department", "token-123", 22)
    assert payload == {
        "title": "Phishing wave",
        "severity": "LOW",
        "rootCause": "Mail filter rule missing",
        "departmentId": 3,
        "projectId": 7,
    }
    assert client.count("list_department") == 1
    assert view.editing is None
    assert view.draft.is_empty()
    assert {i.id: i.severity for i in view.rows}[22] == Severity.LOW


def test_failed_update_keeps_draft(view, client):
    run(view.edit(22))
    view.set_field("title", "Phishing wave (contained)")
    before = view.draft.values
    client.fail_creates = True
    client.calls.clear()

    assert not run(view.save())
    assert view.editing == 22
    assert view.draft.values == before
    assert isinstance(view.last_error, TransportError)
    assert client.count("list_department") == 0


def test_save_without_edit_does_nothing(view, client):
    assert not run(view.save())
    assert client.calls == []


def test_unexpected_error_on_update_does_not_escape(details, signed_in):
    class BrokenUpdateClient(FakeResourceClient):
        async def update_department_project_incident(self, *args):
            raise RuntimeError("connection reset")

    view = ProjectIncidentsView(BrokenUpdateClient(details=details), signed_in, 3, 7)
    run(view.edit(21))
    assert not run(view.save())
    assert view.editing == 21
    assert "connection reset" in str(view.last_error)


def test_department_comes_from_stored_user(tmp_path):
    store = FileSessionStore(tmp_path / "session.json")
    assert department_of(store) is None
    store.save("tok", {"department": "3"})
    assert department_of(store) == 3
    assert department_of(StaticSession("tok")) is None

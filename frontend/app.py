# ============================================================
# app.py — Incident Console Frontend (Streamlit)
# ============================================================

import asyncio
from datetime import datetime

import streamlit as st

from incident_console.client import HttpResourceClient
from incident_console.config import configure_logging, load_settings, session_reader_for
from incident_console.errors import ConfigurationError
from incident_console.models import SortOrder, TabSelector
from incident_console.project_incidents import ProjectIncidentsView, department_of
from incident_console.schemas import FieldKind, schema_for
from incident_console.session import FileSessionStore
from incident_console.workspace import IncidentWorkspace

# ─────────────────────────────────────────────
# Configuration
# ─────────────────────────────────────────────

st.set_page_config(layout="wide")
st.title("🚨 Incidents")

try:
    settings = load_settings()
except ConfigurationError as e:
    st.error(str(e))
    st.stop()

configure_logging(settings.log_level)
session = session_reader_for(settings)

TAB_LABELS = {
    TabSelector.OPERATIONAL: "Operational Incidents",
    TabSelector.PROJECT: "Project Incidents",
}
SORT_LABELS = {
    "": "Sort By",
    "severity": "Severity",
    "category": "Category",
    "incident_date": "Date",
}
SEVERITY_BADGES = {"CRITICAL": "🔴", "HIGH": "🟠", "MEDIUM": "🟡", "LOW": "🟢"}


# ─────────────────────────────────────────────
# Session
# ─────────────────────────────────────────────

with st.sidebar:
    st.subheader("Session")
    if isinstance(session, FileSessionStore):
        token = st.text_input("Access token", type="password")
        col1, col2 = st.columns(2)
        if col1.button("Save token") and token:
            session.save(token)
            st.rerun()
        if col2.button("Sign out"):
            session.clear()
            st.rerun()
    st.caption("Signed in" if session.current_credential() else "Not signed in")


# ─────────────────────────────────────────────
# Workspace (kept across reruns)
# ─────────────────────────────────────────────

if "workspace" not in st.session_state:
    workspace = IncidentWorkspace(
        HttpResourceClient(settings.api_base_url, timeout=settings.timeout),
        session,
    )
    with st.spinner("Loading incidents..."):
        asyncio.run(workspace.mount())
    st.session_state.workspace = workspace

workspace: IncidentWorkspace = st.session_state.workspace

_, header_right = st.columns([4, 1])
with header_right:
    if st.button("+ Add Incident"):
        workspace.open_create()


# ─────────────────────────────────────────────
# Tabs, Search & Sort
# ─────────────────────────────────────────────

selected = st.radio(
    "View",
    list(TAB_LABELS),
    index=list(TAB_LABELS).index(workspace.active_tab),
    format_func=TAB_LABELS.get,
    horizontal=True,
    label_visibility="collapsed",
)
if selected != workspace.active_tab:
    workspace.select_tab(selected)

col1, col2, col3 = st.columns([4, 1, 1])
with col1:
    workspace.set_search(st.text_input("Search", placeholder="Search...", value=workspace.search_term))
with col2:
    options = [""] + list(workspace.tabs.sort_fields)
    current = workspace.sort.field if workspace.sort.field in options else ""
    sort_field = st.selectbox(
        "Sort By", options, index=options.index(current), format_func=SORT_LABELS.get
    )
with col3:
    orders = list(SortOrder)
    sort_order = st.selectbox(
        "Order", orders, index=orders.index(workspace.sort.order),
        format_func=lambda o: o.value.title(),
    )
workspace.set_sort(sort_field or None, sort_order)


# ─────────────────────────────────────────────
# Table
# ─────────────────────────────────────────────

def _row(incident):
    data = incident.model_dump(mode="json", by_alias=True)
    data["severity"] = f"{SEVERITY_BADGES.get(data['severity'], '')} {data['severity']}"
    return data


rows = [_row(i) for i in workspace.rows()]
if rows:
    st.dataframe(rows, use_container_width=True, hide_index=True)
else:
    st.info("No incidents found.")


# ─────────────────────────────────────────────
# Create Modal
# ─────────────────────────────────────────────

def _input(spec, key):
    if spec.kind == FieldKind.LONGTEXT:
        return st.text_area(spec.label, key=key)
    if spec.kind == FieldKind.ENUM:
        choice = st.selectbox(f"Select {spec.label}", ("",) + spec.enum_values, key=key)
        return choice or None
    if spec.kind == FieldKind.INTEGER:
        return st.text_input(spec.label, placeholder=spec.label, key=key)
    if spec.kind == FieldKind.DATETIME:
        day = st.date_input(spec.label, value=None, key=f"{key}_day")
        clock = st.time_input(f"{spec.label} time", value=None, key=f"{key}_time")
        if day is None:
            return None
        moment = datetime.combine(day, clock) if clock else datetime.combine(day, datetime.min.time())
        return moment.strftime("%Y-%m-%dT%H:%M")
    return st.text_input(spec.label, key=key)


if workspace.creator.is_open:
    tab = workspace.active_tab
    label = "Operational" if tab == TabSelector.OPERATIONAL else "Project"
    with st.form(f"create_{tab.value}"):
        st.subheader(f"Add {label} Incident")
        values = {spec.name: _input(spec, f"{tab.value}_{spec.name}") for spec in schema_for(tab)}
        save_col, cancel_col = st.columns(2)
        save = save_col.form_submit_button("Save")
        cancel = cancel_col.form_submit_button("Cancel")

    if cancel:
        workspace.cancel_create()
        st.rerun()
    if save:
        # st.form holds every widget value until Save, so all edits land here at once
        for name, value in values.items():
            if value not in (None, ""):
                workspace.edit_field(name, value)
        if asyncio.run(workspace.save()):
            st.success("Incident saved.")
            st.rerun()
        elif workspace.creator.last_error:
            st.error("Failed to save incident.")
        else:
            st.warning("Sign in to create incidents.")


# ─────────────────────────────────────────────
# Department Project Incidents
# ─────────────────────────────────────────────

department_id = department_of(session)
if department_id is not None:
    st.divider()
    st.subheader("🏢 Department Project Incidents")
    project_id = st.number_input("Project ID", min_value=1, step=1, value=None)

    if project_id and st.button("Load project incidents"):
        view = ProjectIncidentsView(workspace.client, session, department_id, int(project_id))
        asyncio.run(view.refresh())
        st.session_state.project_view = view

    view = st.session_state.get("project_view")
    if view is not None:
        project_rows = [i.model_dump(mode="json", by_alias=True) for i in view.rows]
        if project_rows:
            st.dataframe(project_rows, use_container_width=True, hide_index=True)
        else:
            st.info("No incidents for this project.")

        ids = [i.id for i in view.rows]
        if ids:
            incident_id = st.selectbox("Incident", ids)
            if st.button("Edit incident") and not asyncio.run(view.edit(incident_id)):
                st.error("Failed to load incident.")

        if view.editing is not None:
            with st.form(f"edit_{view.editing}"):
                st.subheader(f"Edit Incident #{view.editing}")
                edits = {}
                for spec in schema_for(TabSelector.PROJECT):
                    if spec.kind == FieldKind.INTEGER:
                        continue
                    current = view.draft.get(spec.name)
                    if spec.kind == FieldKind.ENUM:
                        choices = ("",) + spec.enum_values
                        index = choices.index(current) if current in choices else 0
                        edits[spec.name] = st.selectbox(
                            spec.label, choices, index=index, key=f"edit_{spec.name}"
                        ) or None
                    elif spec.kind == FieldKind.LONGTEXT:
                        edits[spec.name] = st.text_area(spec.label, value=current or "", key=f"edit_{spec.name}")
                    else:
                        edits[spec.name] = st.text_input(spec.label, value=current or "", key=f"edit_{spec.name}")
                update_col, back_col = st.columns(2)
                update = update_col.form_submit_button("Update")
                back = back_col.form_submit_button("Cancel")

            if back:
                view.cancel()
                st.rerun()
            if update:
                for name, value in edits.items():
                    if value not in (None, ""):
                        view.set_field(name, value)
                if asyncio.run(view.save()):
                    st.success("Incident updated.")
                    st.rerun()
                else:
                    st.error("Failed to update incident.")

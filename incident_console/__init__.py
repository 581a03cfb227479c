"""Incident console: operational and project incident tracking over a REST API."""

from incident_console.client import HttpResourceClient, ResourceClient
from incident_console.controller import CreateController, ModalState
from incident_console.draft import Draft
from incident_console.errors import (
    ConfigurationError,
    ConflictError,
    ConsoleError,
    PreconditionFailure,
    TransportError,
)
from incident_console.models import SortDirective, SortOrder, TabSelector
from incident_console.pipeline import display
from incident_console.project_incidents import ProjectIncidentsView
from incident_console.schemas import FieldKind, FieldSpec, schema_for
from incident_console.workspace import IncidentWorkspace

__all__ = [
    "ConfigurationError",
    "ConflictError",
    "ConsoleError",
    "CreateController",
    "Draft",
    "FieldKind",
    "FieldSpec",
    "HttpResourceClient",
    "IncidentWorkspace",
    "ModalState",
    "PreconditionFailure",
    "ProjectIncidentsView",
    "ResourceClient",
    "SortDirective",
    "SortOrder",
    "TabSelector",
    "TransportError",
    "display",
    "schema_for",
]

__version__ = "1.0.0"

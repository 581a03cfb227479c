# ============================================================
# schemas.py — Form Schema Registry
# ============================================================
#
# Ordered field descriptions for the two incident kinds. The same tables
# drive the create form and decide which inputs are coerced to integers.

import math
from datetime import date, datetime
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, FrozenSet, Optional, Tuple, Type

from incident_console.models import (
    OperationalCategory,
    OperationalIncidentDraft,
    ProjectCategory,
    ProjectIncidentDraft,
    Severity,
    Status,
    TabSelector,
)


class FieldKind(str, Enum):
    TEXT = "text"
    LONGTEXT = "longtext"
    DATETIME = "datetime"
    ENUM = "enum"
    INTEGER = "integer"


@dataclass(frozen=True)
class FieldSpec:
    name: str
    alias: str
    label: str
    kind: FieldKind
    enum_values: Tuple[str, ...] = ()


def _values(enum_cls: Type[Enum]) -> Tuple[str, ...]:
    return tuple(member.value for member in enum_cls)


# ─────────────────────────────────────────────
# Field Tables
# ─────────────────────────────────────────────

OPERATIONAL_SCHEMA: Tuple[FieldSpec, ...] = (
    FieldSpec("title", "title", "Title", FieldKind.TEXT),
    FieldSpec("description", "description", "Description", FieldKind.LONGTEXT),
    FieldSpec("incident_date", "incidentDate", "Incident Date", FieldKind.DATETIME),
    FieldSpec("resolution_date", "resolutionDate", "Resolution Date", FieldKind.DATETIME),
    FieldSpec("severity", "severity", "Severity", FieldKind.ENUM, _values(Severity)),
    FieldSpec("status", "status", "Status", FieldKind.ENUM, _values(Status)),
    FieldSpec("category", "category", "Category", FieldKind.ENUM, _values(OperationalCategory)),
    FieldSpec("root_cause", "rootCause", "Root Cause", FieldKind.LONGTEXT),
    FieldSpec("action_taken", "actionTaken", "Action Taken", FieldKind.LONGTEXT),
    FieldSpec("operation_id", "operationId", "Operation ID", FieldKind.INTEGER),
    FieldSpec("reported_by_id", "reportedById", "Reported By ID", FieldKind.INTEGER),
    FieldSpec("resolved_by_id", "resolvedById", "Resolved By ID", FieldKind.INTEGER),
)

PROJECT_SCHEMA: Tuple[FieldSpec, ...] = (
    FieldSpec("title", "title", "Title", FieldKind.TEXT),
    FieldSpec("description", "description", "Description", FieldKind.LONGTEXT),
    FieldSpec("start_date", "startDate", "Start Date", FieldKind.DATETIME),
    FieldSpec("end_date", "endDate", "End Date", FieldKind.DATETIME),
    FieldSpec("severity", "severity", "Severity", FieldKind.ENUM, _values(Severity)),
    FieldSpec("status", "status", "Status", FieldKind.ENUM, _values(Status)),
    FieldSpec("category", "category", "Category", FieldKind.ENUM, _values(ProjectCategory)),
    FieldSpec("root_cause", "rootCause", "Root Cause", FieldKind.LONGTEXT),
    FieldSpec("action_taken", "actionTaken", "Action Taken", FieldKind.LONGTEXT),
    FieldSpec("department_id", "departmentId", "Department ID", FieldKind.INTEGER),
    FieldSpec("project_id", "projectId", "Project ID", FieldKind.INTEGER),
)

_SCHEMAS: Dict[TabSelector, Tuple[FieldSpec, ...]] = {
    TabSelector.OPERATIONAL: OPERATIONAL_SCHEMA,
    TabSelector.PROJECT: PROJECT_SCHEMA,
}

DRAFT_MODELS = {
    TabSelector.OPERATIONAL: OperationalIncidentDraft,
    TabSelector.PROJECT: ProjectIncidentDraft,
}

# Free-text search columns and offered sort columns per tab
SEARCH_FIELDS: Dict[TabSelector, Tuple[str, ...]] = {
    TabSelector.OPERATIONAL: ("service_name", "category"),
    TabSelector.PROJECT: ("title", "project", "category"),
}

SORT_FIELDS: Dict[TabSelector, Tuple[str, ...]] = {
    TabSelector.OPERATIONAL: ("severity", "category", "incident_date"),
    TabSelector.PROJECT: ("severity", "category"),
}


# ─────────────────────────────────────────────
# Lookups
# ─────────────────────────────────────────────

def schema_for(tab: TabSelector) -> Tuple[FieldSpec, ...]:
    return _SCHEMAS[TabSelector(tab)]


def field_spec(tab: TabSelector, name: str) -> Optional[FieldSpec]:
    """Find a field by attribute name or wire alias; None when unknown"""
    for spec in schema_for(tab):
        if name in (spec.name, spec.alias):
            return spec
    return None


def integer_fields(tab: TabSelector) -> FrozenSet[str]:
    return frozenset(
        spec.name for spec in schema_for(tab) if spec.kind == FieldKind.INTEGER
    )


# ─────────────────────────────────────────────
# Coercion
# ─────────────────────────────────────────────

def _to_int(raw: Any) -> int:
    if isinstance(raw, bool):
        return int(raw)
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(raw) if math.isfinite(raw) else 0

    text = str(raw).strip() if raw is not None else ""
    if not text:
        return 0
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return 0
    return int(number) if math.isfinite(number) else 0


def coerce(spec: FieldSpec, raw: Any) -> Any:
    """Convert a raw input value to the type its field stores.

    INTEGER fields always yield an ``int``: integral text parses directly,
    decimal text truncates toward zero, and anything else (empty input,
    letters, NaN, infinities) becomes ``0``. Every other kind is stored as
    text: enum members become their value, dates and datetimes their ISO
    form, anything else ``str(raw)``. ``None`` stays ``None``.
    """
    if spec.kind == FieldKind.INTEGER:
        return _to_int(raw)
    if raw is None:
        return None
    if isinstance(raw, Enum):
        return str(raw.value)
    if spec.kind == FieldKind.DATETIME and isinstance(raw, (datetime, date)):
        return raw.isoformat()
    return str(raw)

# ============================================================
# models.py — Incident Console Models
# ============================================================

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from enum import Enum


# ─────────────────────────────────────────────
# Enums for Type Safety
# ─────────────────────────────────────────────

class Severity(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class Status(str, Enum):
    OPEN = "OPEN"
    IN_PROGRESS = "IN_PROGRESS"
    RESOLVED = "RESOLVED"
    CLOSED = "CLOSED"


class OperationalCategory(str, Enum):
    NETWORK = "NETWORK"
    HARDWARE = "HARDWARE"
    SOFTWARE = "SOFTWARE"
    OTHER = "OTHER"


class ProjectCategory(str, Enum):
    SYSTEM_FAILURE = "SYSTEM_FAILURE"
    CYBER_ATTACK = "CYBER_ATTACK"
    HARDWARE_FAILURE = "HARDWARE_FAILURE"
    THIRD_PARTY_ISSUE = "THIRD_PARTY_ISSUE"


class TabSelector(str, Enum):
    OPERATIONAL = "operational"
    PROJECT = "project"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


# ─────────────────────────────────────────────
# Read Models (rows returned by the API)
# ─────────────────────────────────────────────

class OperationalIncident(BaseModel):
    """Operational incident as listed by the operations endpoint"""
    id: int
    service_name: str = Field(alias="serviceName")
    incident_date: Optional[datetime] = Field(default=None, alias="incidentDate")
    severity: Severity
    category: OperationalCategory

    class Config:
        populate_by_name = True


class ProjectIncident(BaseModel):
    """Project incident as listed by the projects endpoint"""
    id: int
    title: str
    project: str
    severity: Severity
    category: ProjectCategory

    class Config:
        populate_by_name = True


class ProjectIncidentDetail(BaseModel):
    """Full project incident, as returned by the department-scoped endpoints"""
    id: int
    title: str
    description: Optional[str] = None
    date_registered: Optional[datetime] = Field(default=None, alias="dateRegistered")
    start_date: Optional[datetime] = Field(default=None, alias="startDate")
    end_date: Optional[datetime] = Field(default=None, alias="endDate")
    severity: Optional[Severity] = None
    category: Optional[str] = None
    status: Optional[Status] = None
    root_cause: Optional[str] = Field(default=None, alias="rootCause")
    action_taken: Optional[str] = Field(default=None, alias="actionTaken")
    department: Optional[str] = None
    project: Optional[str] = None

    class Config:
        populate_by_name = True


# ─────────────────────────────────────────────
# Write Models (create/update payloads)
# ─────────────────────────────────────────────
# Enum and date fields stay plain text: drafts are sent as entered and the
# server is the only validator.

class OperationalIncidentDraft(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    severity: Optional[str] = None
    status: Optional[str] = None
    incident_date: Optional[str] = Field(default=None, alias="incidentDate")
    resolution_date: Optional[str] = Field(default=None, alias="resolutionDate")
    category: Optional[str] = None
    root_cause: Optional[str] = Field(default=None, alias="rootCause")
    action_taken: Optional[str] = Field(default=None, alias="actionTaken")
    operation_id: Optional[int] = Field(default=None, alias="operationId")
    reported_by_id: Optional[int] = Field(default=None, alias="reportedById")
    resolved_by_id: Optional[int] = Field(default=None, alias="resolvedById")

    class Config:
        populate_by_name = True


class ProjectIncidentDraft(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    severity: Optional[str] = None
    status: Optional[str] = None
    start_date: Optional[str] = Field(default=None, alias="startDate")
    end_date: Optional[str] = Field(default=None, alias="endDate")
    category: Optional[str] = None
    root_cause: Optional[str] = Field(default=None, alias="rootCause")
    action_taken: Optional[str] = Field(default=None, alias="actionTaken")
    department_id: Optional[int] = Field(default=None, alias="departmentId")
    project_id: Optional[int] = Field(default=None, alias="projectId")

    class Config:
        populate_by_name = True


class SortDirective(BaseModel):
    """Which column to sort by, and in which direction"""
    field: Optional[str] = None
    order: SortOrder = SortOrder.ASC

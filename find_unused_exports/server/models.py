"""Pydantic models for find-unused-exports API requests and responses."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class HealthStatus(BaseModel):
    status: str
    version: str
    root: str
    uptime_seconds: float = Field(default=0.0, description="Seconds since the server started.")


class UnusedExportsRequest(BaseModel):
    """Request model for POST /unused-exports endpoint."""

    cwd: Optional[str] = Field(
        default=None, description="Project directory (defaults to the server root)."
    )
    module_glob: Optional[str] = Field(
        default=None, description="Module file glob pattern."
    )
    resolve_file_extensions: Optional[List[str]] = Field(
        default=None,
        description="File extensions, in preference order, for extensionless specifiers.",
    )
    resolve_index_files: Optional[bool] = Field(
        default=None, description="Resolve directory index files."
    )


class UnusedModuleModel(BaseModel):
    """Unused exports of a single module."""

    path: str
    relative_path: str
    exports: List[str]


class UnusedExportsReportModel(BaseModel):
    """Response model for POST /unused-exports endpoint."""

    report_schema_version: str
    cwd: str
    modules: List[UnusedModuleModel]
    module_count: int
    export_count: int


class ErrorModel(BaseModel):
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None


class ErrorResponse(BaseModel):
    """Body of a failed request."""

    error: ErrorModel

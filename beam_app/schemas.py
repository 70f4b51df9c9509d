"""Pydantic request/response models."""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


# --- Request ---


class SourceFileIn(BaseModel):
    """One source file supplied by the caller."""

    path: str = Field(..., min_length=1, description="File path used for reporting and tier classification")
    content: str = Field(..., description="Raw file text")


class CheckOptions(BaseModel):
    """Per-request overrides of the server configuration."""

    strict: Optional[bool] = Field(default=None, description="Treat warnings as errors for exit_code")
    state_words: Optional[List[str]] = Field(default=None, description="Vocabulary for rule:state-in-class")
    theme_pattern: Optional[str] = Field(default=None, description="Glob identifying the global theme file(s)")


class CheckRequest(BaseModel):
    """Request body for POST /check and POST /report."""

    files: List[SourceFileIn] = Field(..., description="Files to check, in order")
    options: Optional[CheckOptions] = None


# --- Diagnostic (response) ---


class LocationOut(BaseModel):
    file: str
    line: int
    column: int


class DiagnosticOut(BaseModel):
    """Single convention violation."""

    rule_id: str
    severity: str = Field(..., description="error or warning")
    message: str
    locations: List[LocationOut] = Field(default_factory=list, description="Primary location first")
    suggestion: Optional[str] = None


# --- Responses ---


class CheckSummary(BaseModel):
    errors: int = 0
    warnings: int = 0
    by_rule: Dict[str, int] = Field(default_factory=dict)


class CheckResponse(BaseModel):
    """Response for POST /check."""

    status: str = Field(..., description="clean, warnings, failed or cancelled")
    exit_code: int
    diagnostics: List[DiagnosticOut] = Field(default_factory=list)
    summary: CheckSummary = Field(default_factory=CheckSummary)


class RuleOut(BaseModel):
    rule_id: str
    severity: str
    description: str


class ErrorDetail(BaseModel):
    """Error response detail."""

    detail: str = Field(..., description="Error message")

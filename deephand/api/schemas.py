"""
Response models for the service endpoints that are not form submissions.
Form submissions answer with core.schema.SubmissionResult.
"""

from typing import List, Optional

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str
    version: str
    email_config_valid: bool
    issues: List[str] = []


class ErrorResponse(BaseModel):
    success: bool = False
    message: str
    debug: Optional[str] = None

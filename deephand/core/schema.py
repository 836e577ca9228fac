"""
Result and record types exchanged by the submission pipeline.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class SubmissionResult(BaseModel):
    """Outcome of one submission attempt, as carried in the HTTP response body."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    success: bool
    message: Optional[str] = None
    request_id: Optional[str] = None
    field_errors: Optional[Dict[str, List[str]]] = None

    def to_body(self) -> Dict:
        return self.model_dump(by_alias=True, exclude_none=True)


@dataclass(frozen=True)
class EmailMessage:
    sender: str
    recipient: str
    subject: str
    html: str
    text: str
    reply_to: Optional[str] = None


@dataclass(frozen=True)
class EmailDispatchRecord:
    provider_message_id: str
    recipient: str
    subject: str
    sent_at: datetime


@dataclass(frozen=True)
class DispatchOutcome:
    delivered: bool
    message_id: Optional[str] = None
    reason: Optional[str] = None


@dataclass(frozen=True)
class NotificationReport:
    """Both sends of one submission; the business email decides overall success."""

    business: DispatchOutcome
    acknowledgment: Optional[DispatchOutcome] = None

    @property
    def acknowledged(self) -> bool:
        return self.acknowledgment is not None and self.acknowledgment.delivered

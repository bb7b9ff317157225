"""
Audit trail Pydantic schemas.
"""

from pydantic import BaseModel
from datetime import datetime
from typing import Any, Dict, List, Optional


class AuditEventResponse(BaseModel):
    id: int
    actor_id: str
    action: str
    entity_type: str
    entity_id: str
    meta_data: Optional[Dict[str, Any]]
    timestamp: datetime

    class Config:
        from_attributes = True


class AuditTrailResponse(BaseModel):
    events: List[AuditEventResponse]

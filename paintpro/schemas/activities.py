from datetime import datetime
from typing import Optional

from .common import WireModel, ReadModel, RequiredText


class ActivityCreate(WireModel):
    type: RequiredText
    description: RequiredText
    user_id: Optional[int] = None
    project_id: Optional[int] = None
    client_id: Optional[int] = None


class ActivityResponse(ReadModel):
    id: int
    type: str
    description: str
    user_id: Optional[int] = None
    project_id: Optional[int] = None
    client_id: Optional[int] = None
    created_at: datetime

from pydantic import BaseModel
from typing import Any, Optional


class NotificationOut(BaseModel):
    id: str
    title: str
    description: str = ""
    href: str = "/"
    timestamp: Optional[str] = None  # notifyAt when scheduled, else createdAt
    tone: str = "info"
    read: bool = False
    state: str
    eventKey: Optional[str] = None
    metadata: Optional[Any] = None


class UnreadCountOut(BaseModel):
    count: int

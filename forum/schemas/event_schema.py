from pydantic import BaseModel
from typing import Any, Dict


class SocketEvent(BaseModel):
    """One JSON frame on the real-time channel, in either direction."""

    event: str
    data: Dict[str, Any] = {}

from enum import Enum
from pydantic import BaseModel
from typing import Any, Dict, Optional
from datetime import datetime

class TaskStatus(str, Enum):
    pending = "pending"
    processing = "processing"
    completed = "completed"
    failed = "failed"

class Operation(BaseModel):
    id: str
    user_id: str
    tool_id: Any
    input_meta: Optional[Dict[str, Any]] = None
    session_id: str
    timestamp: datetime

class PendingTask(BaseModel):
    id: str
    operation_id: str
    user_id: Optional[str] = None
    status: TaskStatus
    result: Optional[Any] = None
    error: Optional[str] = None
    created_at: datetime
    updated_at: datetime

from pydantic import BaseModel, Field
from typing import Optional, Any, List, Literal
from datetime import datetime


class Credentials(BaseModel):
    """Schema for sign-up and sign-in requests"""
    email: str = Field(..., max_length=320)
    password: str = Field(..., max_length=256)


class UserResponse(BaseModel):
    """Schema for the authenticated identity"""
    id: str
    email: str
    created_at: datetime

    class Config:
        from_attributes = True


class SessionResponse(BaseModel):
    """Schema for an issued session"""
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserResponse


class TaskCreate(BaseModel):
    """Schema for creating a new task"""
    text: str = Field(..., min_length=1, max_length=500)
    notes: str = ""
    priority: int = Field(0, ge=0)
    user_id: Optional[str] = None


class TaskUpdate(BaseModel):
    """Schema for updating a task; only the given fields change"""
    notes: Optional[str] = None
    priority: Optional[int] = Field(None, ge=0)


class TaskResponse(BaseModel):
    """Schema for task response"""
    id: str
    user_id: str
    text: str
    notes: str
    priority: int
    created_at: datetime

    class Config:
        from_attributes = True


class PriorityAssignment(BaseModel):
    id: str
    priority: int = Field(..., ge=0)


class PriorityUpdate(BaseModel):
    """Schema for rewriting several priorities in one transaction"""
    assignments: List[PriorityAssignment]


SortField = Literal["priority", "created_at"]
SortDirection = Literal["asc", "desc"]


class ApiResponse(BaseModel):
    """Standard API response wrapper"""
    success: bool
    data: Optional[Any] = None
    error: Optional[dict] = None

# campusconnect/models/user.py
from typing import Optional

from pydantic import BaseModel, Field


class User(BaseModel):
    id: str
    name: str
    email: str
    password: str
    role: str
    department: str = ""
    semester: Optional[int] = None
    employeeId: Optional[str] = None
    createdAt: str
    lastLogin: Optional[str] = None
    isActive: bool = True

    def to_record(self) -> dict:
        """Shape persisted in users.json; role-specific fields only when set."""
        data = self.model_dump(mode="json")
        for key in ("semester", "employeeId"):
            if data.get(key) is None:
                data.pop(key, None)
        return data

    def public(self) -> dict:
        data = self.to_record()
        data.pop("password", None)
        return data


class CurrentUser(BaseModel):
    """Identity attached to an authenticated request. Never carries the password."""
    id: str
    email: str
    name: str
    role: str


class AuthorSnapshot(BaseModel):
    id: str
    name: str
    role: str


class UploaderSnapshot(BaseModel):
    id: str
    name: str
    email: Optional[str] = None
    role: Optional[str] = None
    department: Optional[str] = None
    semester: Optional[int] = None


class Pagination(BaseModel):
    total: int
    page: int
    limit: int
    pages: int = Field(..., ge=0)

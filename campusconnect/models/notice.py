# campusconnect/models/notice.py
from typing import Optional

from pydantic import BaseModel

from campusconnect.models.user import AuthorSnapshot


class Notice(BaseModel):
    id: str
    title: str
    content: str
    category: str
    targetAudience: str = "all"
    department: Optional[str] = None
    expiryDate: Optional[str] = None
    author: AuthorSnapshot
    createdAt: str
    updatedAt: str
    isActive: bool = True

# campusconnect/models/material.py
from typing import Optional

from pydantic import BaseModel

from campusconnect.models.user import AuthorSnapshot


class Material(BaseModel):
    id: str
    title: str
    description: str = ""
    subject: str
    semester: int
    department: str
    materialType: str
    fileName: str
    filePath: str
    fileSize: int
    mimeType: str
    uploadedBy: AuthorSnapshot
    downloadCount: int = 0
    lastDownloaded: Optional[str] = None
    createdAt: str
    updatedAt: str

# campusconnect/models/resume.py
from typing import List, Optional

from pydantic import BaseModel, Field

from campusconnect.models.user import UploaderSnapshot


class Resume(BaseModel):
    id: str
    title: str
    description: str = ""
    category: str
    skills: List[str] = Field(default_factory=list)
    experience: str = "fresher"
    fileName: str
    filePath: str
    fileSize: int
    mimeType: str
    uploadedBy: UploaderSnapshot
    isPublic: bool = False
    viewCount: int = 0
    downloadCount: int = 0
    lastViewed: Optional[str] = None
    lastDownloaded: Optional[str] = None
    createdAt: str
    updatedAt: str

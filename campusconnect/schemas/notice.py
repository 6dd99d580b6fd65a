from datetime import datetime
from typing import Annotated, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

NoticeTitle = Annotated[str, Field(min_length=5, max_length=200)]
NoticeContent = Annotated[str, Field(min_length=10, max_length=2000)]
NoticeCategory = Literal["academic", "event", "general", "urgent"]
TargetAudience = Literal["all", "students", "faculty"]
Department = Annotated[str, Field(max_length=50)]


class NoticeCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    title: NoticeTitle
    content: NoticeContent
    category: NoticeCategory
    targetAudience: TargetAudience = "all"
    expiryDate: Optional[datetime] = None
    department: Optional[Department] = None


class NoticeUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    title: Optional[NoticeTitle] = None
    content: Optional[NoticeContent] = None
    category: Optional[NoticeCategory] = None
    targetAudience: Optional[TargetAudience] = None
    expiryDate: Optional[datetime] = None
    department: Optional[Department] = None
    isActive: Optional[bool] = None

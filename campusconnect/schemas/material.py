from typing import Annotated, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

MaterialTitle = Annotated[str, Field(min_length=3, max_length=200)]
MaterialDescription = Annotated[str, Field(max_length=500)]
Subject = Annotated[str, Field(min_length=2, max_length=100)]
Semester = Annotated[int, Field(ge=1, le=8)]
MaterialDepartment = Annotated[str, Field(min_length=2, max_length=50)]
MaterialType = Literal["notes", "assignment", "syllabus", "previous-papers", "reference"]


class MaterialCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    title: MaterialTitle
    description: MaterialDescription = ""
    subject: Subject
    semester: Semester
    department: MaterialDepartment
    materialType: MaterialType


class MaterialUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    title: Optional[MaterialTitle] = None
    description: Optional[MaterialDescription] = None
    subject: Optional[Subject] = None
    semester: Optional[Semester] = None
    department: Optional[MaterialDepartment] = None
    materialType: Optional[MaterialType] = None

from typing import Annotated, List, Literal, Optional

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, Field, StrictBool

MAX_SKILLS = 20


def _split_skills(v):
    # "python, sql" 형태의 폼 값도 허용
    if isinstance(v, str):
        return [s.strip() for s in v.split(",")]
    return v


def _unique_skills(v):
    seen = []
    for skill in (s.strip() for s in v):
        if skill and skill.lower() not in [s.lower() for s in seen]:
            seen.append(skill)
    if len(seen) > MAX_SKILLS:
        raise ValueError(f"at most {MAX_SKILLS} skills are allowed")
    return seen


ResumeTitle = Annotated[str, Field(min_length=3, max_length=200)]
ResumeDescription = Annotated[str, Field(max_length=300)]
ResumeCategory = Literal["internship", "placement", "freelance", "project"]
Experience = Literal["fresher", "0-1", "1-2", "2-5", "5+"]
Skill = Annotated[str, Field(max_length=50)]
Skills = Annotated[List[Skill], BeforeValidator(_split_skills), AfterValidator(_unique_skills)]


class ResumeCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    title: ResumeTitle
    description: ResumeDescription = ""
    category: ResumeCategory
    skills: Skills = []
    experience: Experience = "fresher"


class ResumeUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    title: Optional[ResumeTitle] = None
    description: Optional[ResumeDescription] = None
    category: Optional[ResumeCategory] = None
    skills: Optional[Skills] = None
    experience: Optional[Experience] = None


class VisibilityUpdate(BaseModel):
    isPublic: StrictBool

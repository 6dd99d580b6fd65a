from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator


class UserCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    name: str = Field(..., min_length=2, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6)
    role: Literal["student", "faculty", "admin"] = "student"
    department: str = Field("", max_length=50)
    semester: Optional[int] = Field(None, ge=1, le=8)
    employeeId: Optional[str] = Field(None, max_length=50)

    @field_validator("email")
    @classmethod
    def lower_email(cls, v):
        return v.lower()

    @field_validator("semester", "employeeId", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @model_validator(mode="after")
    def role_fields(self):
        if self.role == "student" and self.semester is None:
            raise ValueError("semester is required for students")
        if self.role == "faculty" and not self.employeeId:
            raise ValueError("employeeId is required for faculty")
        return self


class UserLogin(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def lower_email(cls, v):
        return v.lower()


class ProfileUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    name: Optional[str] = Field(None, min_length=2, max_length=50)
    department: Optional[str] = Field(None, max_length=50)
    semester: Optional[int] = Field(None, ge=1, le=8)
    employeeId: Optional[str] = Field(None, min_length=1, max_length=50)


class PasswordChange(BaseModel):
    currentPassword: str = Field(..., min_length=1)
    newPassword: str = Field(..., min_length=6)

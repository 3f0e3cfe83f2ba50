"""Pydantic request schemas used by the API.

Fields the endpoints treat as required are still declared optional
here: presence is checked by the services so that a missing field
produces the endpoint's own 400 message instead of a generic
validation error. Wire names follow the platform's existing clients,
which mix camelCase and snake_case. `role` accepts any JSON value so
that every unrecognised token is reported as an invalid role.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class _Body(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class SignupIn(_Body):
    """Payload for `/api/users/signup`."""
    email: Optional[str] = None
    password: Optional[str] = None
    role: Optional[Any] = None
    profile_info: Optional[Any] = Field(default=None, alias="profileInfo")


class LoginIn(_Body):
    """Payload for `/api/users/login`."""
    email: Optional[str] = None
    password: Optional[str] = None
    role: Optional[Any] = None


class RegisterIn(_Body):
    """Payload for the document-store `/api/users/register` endpoint."""
    email: Optional[str] = None
    password: Optional[str] = None
    user_type: Optional[str] = None
    name: Optional[str] = None


class CourseIn(_Body):
    name: Optional[str] = None
    faculty_id: Optional[int] = None


class FacultyIn(_Body):
    name: Optional[str] = None
    institute_id: Optional[int] = Field(default=None, alias="instituteId")


class InstituteIn(_Body):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class ApplicationIn(_Body):
    course_id: Optional[int] = Field(default=None, alias="courseId")
    name: Optional[str] = None
    email: Optional[str] = None


class ApplicationStatusIn(_Body):
    status: Optional[str] = None

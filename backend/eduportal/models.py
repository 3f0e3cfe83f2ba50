"""SQLModel data models.

This module defines the application's database tables using SQLModel.
The three credential partitions (`admins`, `institutes`, `students`)
share one shape through `CredentialBase`; the rest are catalog tables
for faculties, courses and course applications.
"""

from typing import Any, Optional

from sqlalchemy import JSON
from sqlmodel import SQLModel, Field


class CredentialBase(SQLModel):
    """Columns common to every credential partition.

    Fields:
    - `email`: login name, unique within the partition only
    - `password_hash`: output of the password hasher (never plaintext)
    - `profile_info`: free-form JSON profile, may be absent
    """
    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(index=True, unique=True, nullable=False)
    password_hash: str
    profile_info: Optional[Any] = Field(default=None, sa_type=JSON)


class Admin(CredentialBase, table=True):
    __tablename__ = "admins"


class Institute(CredentialBase, table=True):
    """Institution accounts.

    Also managed directly by the institute endpoints, which set `name`
    and leave `profile_info` empty.
    """
    __tablename__ = "institutes"
    name: Optional[str] = None


class Student(CredentialBase, table=True):
    __tablename__ = "students"


class Faculty(SQLModel, table=True):
    """A faculty belonging to an institute."""
    __tablename__ = "faculties"
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    institute_id: int = Field(index=True)


class Course(SQLModel, table=True):
    """A course offered by a faculty."""
    __tablename__ = "courses"
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    faculty_id: int = Field(foreign_key="faculties.id", index=True)


APPLICATION_STATUSES = ("pending", "approved", "rejected")


class Application(SQLModel, table=True):
    """A prospective student's application to a course."""
    __tablename__ = "applications"
    id: Optional[int] = Field(default=None, primary_key=True)
    course_id: int = Field(index=True)
    name: str
    email: str
    status: str = Field(default="pending")

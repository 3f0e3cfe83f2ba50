"""Business logic services used by HTTP controllers.

This module holds small service classes that coordinate repositories
and the password hasher. Services are intentionally thin: they perform
validation, execute domain logic and persist rows via repositories,
raising `PortalError` subclasses that the HTTP layer renders as-is.
"""

import logging
from typing import List, Optional

from sqlmodel import Session

from . import models, repositories
from .errors import (
    InvalidCredentials,
    InvalidReference,
    InvalidStatus,
    MissingField,
    NotFound,
    storage_errors,
)
from .passwords import PasswordHasher
from .roles import Role, partition_for, resolve_role

logger = logging.getLogger("eduportal.services")

CREDENTIALS_REQUIRED = "Email, password, and role are required"


def _require(message: str, *values):
    """Raise `MissingField` unless every value is present and non-empty."""
    if any(v is None or v == "" for v in values):
        raise MissingField(message)


class AccountService:
    """Signup and login against the role-partitioned credential tables."""
    def __init__(self, session: Session, hasher: PasswordHasher):
        self.session = session
        self.hasher = hasher

    def _repository(self, role: Role) -> repositories.CredentialRepository:
        return repositories.CredentialRepository(self.session, partition_for(role))

    def signup(self, email: Optional[str], password: Optional[str], role: Optional[str], profile_info=None) -> Role:
        """Create a credential record in the partition named by `role`.

        Validation happens before any hashing or storage access. Returns
        the resolved `Role`. A duplicate email in the same partition
        surfaces as `StorageError` like any other failed insert.
        """
        _require(CREDENTIALS_REQUIRED, email, password, role)
        resolved = resolve_role(role)
        password_hash = self.hasher.hash(password)
        with storage_errors("Error creating user", self.session):
            self._repository(resolved).create(email, password_hash, profile_info)
        logger.info("created %s account", resolved.value)
        return resolved

    def login(self, email: Optional[str], password: Optional[str], role: Optional[str]) -> dict:
        """Verify credentials within the claimed role's partition only.

        Returns `{"email", "role"}` where `role` is the claimed role.
        Raises `NotFound` when the partition has no such email and
        `InvalidCredentials` when the password does not verify.
        """
        _require(CREDENTIALS_REQUIRED, email, password, role)
        resolved = resolve_role(role)
        with storage_errors("Error logging in", self.session):
            record = self._repository(resolved).get_by_email(email)
        if record is None:
            raise NotFound("User not found")
        if not self.hasher.verify(password, record.password_hash):
            raise InvalidCredentials()
        return {"email": record.email, "role": resolved.value}


class CourseService:
    def __init__(self, session: Session):
        self.session = session
        self.course_repo = repositories.CourseRepository(session)
        self.faculty_repo = repositories.FacultyRepository(session)

    def list_courses(self, faculty_id: Optional[int] = None) -> List[models.Course]:
        with storage_errors("Error retrieving courses", self.session):
            return self.course_repo.list(faculty_id)

    def get_course(self, course_id: int) -> models.Course:
        with storage_errors("Failed to retrieve course details.", self.session):
            course = self.course_repo.get(course_id)
        if course is None:
            raise NotFound("Course not found.")
        return course

    def add_course(self, name: Optional[str], faculty_id: Optional[int]) -> models.Course:
        """Create a course after checking that its faculty exists."""
        _require("Name and Faculty ID are required", name, faculty_id)
        with storage_errors("Error checking faculty", self.session):
            faculty = self.faculty_repo.get(faculty_id)
        if faculty is None:
            raise InvalidReference("Invalid faculty ID")
        with storage_errors("Error adding course", self.session):
            return self.course_repo.create(models.Course(name=name, faculty_id=faculty_id))


class FacultyService:
    def __init__(self, session: Session):
        self.session = session
        self.faculty_repo = repositories.FacultyRepository(session)

    def list_faculties(self, institute_id: Optional[int] = None) -> List[models.Faculty]:
        with storage_errors("Error retrieving faculties", self.session):
            return self.faculty_repo.list(institute_id)

    def add_faculty(self, name: Optional[str], institute_id: Optional[int]) -> models.Faculty:
        _require("Name and Institute ID are required", name, institute_id)
        with storage_errors("Error adding faculty", self.session):
            return self.faculty_repo.create(models.Faculty(name=name, institute_id=institute_id))


class InstituteService:
    """Administrative institute management on the Institution partition."""
    def __init__(self, session: Session, hasher: PasswordHasher):
        self.session = session
        self.hasher = hasher
        self.institute_repo = repositories.InstituteRepository(session)

    def add_institute(self, name: Optional[str], email: Optional[str], password: Optional[str]) -> models.Institute:
        _require("Name, email, and password are required", name, email, password)
        password_hash = self.hasher.hash(password)
        institute = models.Institute(name=name, email=email, password_hash=password_hash)
        with storage_errors("Error adding institute", self.session):
            return self.institute_repo.create(institute)

    def list_institutes(self) -> List[dict]:
        """Return public institute fields only; hashes never leave storage."""
        with storage_errors("Error fetching institutes", self.session):
            institutes = self.institute_repo.list()
        return [{"institute_id": i.id, "name": i.name, "email": i.email} for i in institutes]

    def delete_institute(self, institute_id: int) -> bool:
        with storage_errors("Error deleting institute", self.session):
            deleted = self.institute_repo.delete(institute_id)
        if not deleted:
            logger.info("delete requested for unknown institute %s", institute_id)
        return deleted


class ApplicationService:
    def __init__(self, session: Session):
        self.session = session
        self.application_repo = repositories.ApplicationRepository(session)

    def submit(self, course_id: Optional[int], name: Optional[str], email: Optional[str]) -> models.Application:
        """Record a new application with status `pending`."""
        _require("Course ID, name, and email are required.", course_id, name, email)
        application = models.Application(course_id=course_id, name=name, email=email, status="pending")
        with storage_errors("Failed to submit application.", self.session):
            return self.application_repo.create(application)

    def list_for_course(self, course_id: Optional[int]) -> List[models.Application]:
        _require("Course ID is required.", course_id)
        with storage_errors("Error retrieving applications", self.session):
            return self.application_repo.list_for_course(course_id)

    def update_status(self, application_id: int, status: Optional[str]) -> str:
        if status not in models.APPLICATION_STATUSES:
            raise InvalidStatus()
        with storage_errors("Failed to update application status.", self.session):
            updated = self.application_repo.set_status(application_id, status)
        if not updated:
            logger.info("status update for unknown application %s", application_id)
        return status

"""Repository classes encapsulating database operations.

Each repository is small and focused on a single table (or, for
credentials, a single partition). Repositories return SQLModel objects,
perform commits/refreshes where appropriate and let SQLAlchemy errors
propagate; services decide how a failure is reported.
"""

from typing import List, Optional, Type

from sqlmodel import Session, select

from . import models


class CredentialRepository:
    """Create and look up credential records in one partition.

    The partition is the table model chosen by the role dispatcher;
    every query is scoped to that table alone.
    """
    def __init__(self, session: Session, partition: Type[models.CredentialBase]):
        self.session = session
        self.partition = partition

    def create(self, email: str, password_hash: str, profile_info=None) -> models.CredentialBase:
        """Insert one record and return the managed instance."""
        record = self.partition(email=email, password_hash=password_hash, profile_info=profile_info)
        self.session.add(record)
        self.session.commit()
        self.session.refresh(record)
        return record

    def get_by_email(self, email: str) -> Optional[models.CredentialBase]:
        """Return the record for `email` in this partition or `None`."""
        stmt = select(self.partition).where(self.partition.email == email)
        return self.session.exec(stmt).first()


class CourseRepository:
    def __init__(self, session: Session):
        self.session = session

    def list(self, faculty_id: Optional[int] = None) -> List[models.Course]:
        stmt = select(models.Course)
        if faculty_id is not None:
            stmt = stmt.where(models.Course.faculty_id == faculty_id)
        return self.session.exec(stmt).all()

    def get(self, course_id: int) -> Optional[models.Course]:
        return self.session.get(models.Course, course_id)

    def create(self, course: models.Course) -> models.Course:
        self.session.add(course)
        self.session.commit()
        self.session.refresh(course)
        return course


class FacultyRepository:
    def __init__(self, session: Session):
        self.session = session

    def list(self, institute_id: Optional[int] = None) -> List[models.Faculty]:
        stmt = select(models.Faculty)
        if institute_id is not None:
            stmt = stmt.where(models.Faculty.institute_id == institute_id)
        return self.session.exec(stmt).all()

    def get(self, faculty_id: int) -> Optional[models.Faculty]:
        return self.session.get(models.Faculty, faculty_id)

    def create(self, faculty: models.Faculty) -> models.Faculty:
        self.session.add(faculty)
        self.session.commit()
        self.session.refresh(faculty)
        return faculty


class InstituteRepository:
    """Administrative access to the `institutes` table."""
    def __init__(self, session: Session):
        self.session = session

    def create(self, institute: models.Institute) -> models.Institute:
        self.session.add(institute)
        self.session.commit()
        self.session.refresh(institute)
        return institute

    def list(self) -> List[models.Institute]:
        return self.session.exec(select(models.Institute)).all()

    def delete(self, institute_id: int) -> bool:
        """Delete by primary key; return False if no such institute exists."""
        institute = self.session.get(models.Institute, institute_id)
        if institute is None:
            return False
        self.session.delete(institute)
        self.session.commit()
        return True


class ApplicationRepository:
    def __init__(self, session: Session):
        self.session = session

    def create(self, application: models.Application) -> models.Application:
        self.session.add(application)
        self.session.commit()
        self.session.refresh(application)
        return application

    def list_for_course(self, course_id: int) -> List[models.Application]:
        stmt = select(models.Application).where(models.Application.course_id == course_id)
        return self.session.exec(stmt).all()

    def set_status(self, application_id: int, status: str) -> bool:
        """Update the status of one application; return False if it does not exist."""
        application = self.session.get(models.Application, application_id)
        if application is None:
            return False
        application.status = status
        self.session.add(application)
        self.session.commit()
        return True

"""Role tokens and the credential partition each one selects."""

from enum import Enum
from typing import Dict, Type

from . import models
from .errors import InvalidRole


class Role(str, Enum):
    ADMIN = "Admin"
    INSTITUTION = "Institution"
    STUDENT = "Student"


PARTITIONS: Dict[Role, Type[models.CredentialBase]] = {
    Role.ADMIN: models.Admin,
    Role.INSTITUTION: models.Institute,
    Role.STUDENT: models.Student,
}


def resolve_role(token) -> Role:
    """Return the `Role` named by `token`, matching case exactly.

    Anything else (case variants, empty string, None, non-strings)
    raises `InvalidRole`.
    """
    if not isinstance(token, str):
        raise InvalidRole()
    for role in Role:
        if role.value == token:
            return role
    raise InvalidRole()


def partition_for(role: Role) -> Type[models.CredentialBase]:
    """Return the table model holding credentials for `role`."""
    return PARTITIONS[role]

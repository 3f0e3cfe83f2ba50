"""FastAPI application entrypoint and HTTP controllers.

This module defines the HTTP endpoints of the education portal
backend. Controllers are intentionally thin: they accept requests,
delegate to services, and return JSON responses. Errors raised by the
services are rendered by the handlers in `errors` as `{"error": ...}`.

Endpoints implemented:
- POST /api/users/signup
- POST /api/users/login
- POST /api/users/register
- GET/POST /api/courses, GET /api/courses/{id}
- GET/POST /api/faculties
- GET/POST /api/institutes, DELETE /api/institutes/{id}
- GET/POST /api/applications, PUT /api/applications/{id}
- GET /health
"""

import json
import logging
import time
import uuid
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from fastapi.responses import Response
from sqlmodel import Session

from . import services
from .config import Settings
from .database import get_session, open_database
from .documents import UserDocumentStore, UserRegistrationService, open_user_store
from .errors import (
    PortalError,
    http_exception_handler,
    portal_error_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)
from .passwords import PasswordHasher
from .schemas import (
    ApplicationIn,
    ApplicationStatusIn,
    CourseIn,
    FacultyIn,
    InstituteIn,
    LoginIn,
    RegisterIn,
    SignupIn,
)

logger = logging.getLogger("eduportal.api")


def get_hasher(request: Request) -> PasswordHasher:
    return request.app.state.hasher


def get_user_store(request: Request) -> UserDocumentStore:
    return request.app.state.user_store


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open storage handles at startup and release them at shutdown."""
    settings: Settings = app.state.settings
    app.state.db = open_database(settings.DATABASE_URL)
    app.state.user_store = open_user_store(settings)
    app.state.hasher = PasswordHasher.from_settings(settings)
    logger.info("eduportal started (env=%s)", settings.ENV)
    try:
        yield
    finally:
        app.state.user_store.close()
        app.state.db.dispose()
        logger.info("eduportal stopped")


async def request_context_middleware(request: Request, call_next):
    req_id = request.headers.get("X-Request-ID", uuid.uuid4().hex)
    request.state.request_id = req_id
    started = time.perf_counter()
    response: Response
    try:
        response = await call_next(request)
    except Exception:
        elapsed_ms = round((time.perf_counter() - started) * 1000.0, 2)
        if request.url.path.startswith("/api"):
            logger.exception(
                "request_failed %s",
                json.dumps(
                    {
                        "request_id": req_id,
                        "path": request.url.path,
                        "method": request.method,
                        "duration_ms": elapsed_ms,
                        "client": request.client.host if request.client else "unknown",
                    },
                    ensure_ascii=True,
                ),
            )
        raise
    response.headers["X-Request-ID"] = req_id
    elapsed_ms = round((time.perf_counter() - started) * 1000.0, 2)
    if request.url.path.startswith("/api"):
        logger.info(
            "request_done %s",
            json.dumps(
                {
                    "request_id": req_id,
                    "path": request.url.path,
                    "method": request.method,
                    "status_code": response.status_code,
                    "duration_ms": elapsed_ms,
                    "client": request.client.host if request.client else "unknown",
                },
                ensure_ascii=True,
            ),
        )
    return response


settings = Settings()
if not logger.handlers:
    logging.basicConfig(level=settings.LOG_LEVEL)

app = FastAPI(title="EduPortal API", lifespan=lifespan)
# Read by `lifespan`; tests replace it before starting the app.
app.state.settings = settings

# Browser frontends are served from other origins during development.
if settings.ALLOW_DEV_CORS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
app.middleware("http")(request_context_middleware)

app.add_exception_handler(PortalError, portal_error_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)


@app.post('/api/users/signup', status_code=201)
def signup(payload: SignupIn, db: Session = Depends(get_session), hasher: PasswordHasher = Depends(get_hasher)):
    """Create an account in the credential table for the given role.

    `role` must be exactly `Admin`, `Institution` or `Student`.
    """
    role = services.AccountService(db, hasher).signup(
        payload.email, payload.password, payload.role, payload.profile_info
    )
    return {'message': f'{role.value} created successfully'}

@app.post('/api/users/login')
def login(payload: LoginIn, db: Session = Depends(get_session), hasher: PasswordHasher = Depends(get_hasher)):
    """Check an email/password pair against the claimed role's accounts.

    No session or token is issued; the response only echoes the
    authenticated email and role.
    """
    user = services.AccountService(db, hasher).login(payload.email, payload.password, payload.role)
    return {'message': 'Login successful', 'user': user}

@app.post('/api/users/register', status_code=201)
def register(payload: RegisterIn, store: UserDocumentStore = Depends(get_user_store), hasher: PasswordHasher = Depends(get_hasher)):
    """Register a platform user in the document store."""
    document = UserRegistrationService(store, hasher).register(
        payload.email, payload.password, payload.user_type, payload.name
    )
    return {'message': 'User registered successfully!', 'user': document.public()}

@app.get('/api/courses')
def list_courses(faculty_id: Optional[int] = Query(default=None, alias='facultyId'), db: Session = Depends(get_session)):
    """List courses, optionally only those of one faculty."""
    return [c.model_dump() for c in services.CourseService(db).list_courses(faculty_id)]

@app.post('/api/courses', status_code=201)
def add_course(payload: CourseIn, db: Session = Depends(get_session)):
    course = services.CourseService(db).add_course(payload.name, payload.faculty_id)
    return {'id': course.id, 'name': course.name, 'faculty_id': course.faculty_id}

@app.get('/api/courses/{course_id}')
def get_course(course_id: int, db: Session = Depends(get_session)):
    return services.CourseService(db).get_course(course_id).model_dump()

@app.get('/api/faculties')
def list_faculties(institute_id: Optional[int] = Query(default=None, alias='instituteId'), db: Session = Depends(get_session)):
    return [f.model_dump() for f in services.FacultyService(db).list_faculties(institute_id)]

@app.post('/api/faculties', status_code=201)
def add_faculty(payload: FacultyIn, db: Session = Depends(get_session)):
    faculty = services.FacultyService(db).add_faculty(payload.name, payload.institute_id)
    return {'faculty_id': faculty.id, 'name': faculty.name}

@app.post('/api/institutes', status_code=201)
def add_institute(payload: InstituteIn, db: Session = Depends(get_session), hasher: PasswordHasher = Depends(get_hasher)):
    """Add an institute account directly (administrative path)."""
    institute = services.InstituteService(db, hasher).add_institute(payload.name, payload.email, payload.password)
    return {'message': 'Institute added successfully', 'institute_id': institute.id}

@app.get('/api/institutes')
def list_institutes(db: Session = Depends(get_session), hasher: PasswordHasher = Depends(get_hasher)):
    return services.InstituteService(db, hasher).list_institutes()

@app.delete('/api/institutes/{institute_id}')
def delete_institute(institute_id: int, db: Session = Depends(get_session), hasher: PasswordHasher = Depends(get_hasher)):
    services.InstituteService(db, hasher).delete_institute(institute_id)
    return {'message': 'Institute deleted successfully'}

@app.post('/api/applications', status_code=201)
def submit_application(payload: ApplicationIn, db: Session = Depends(get_session)):
    services.ApplicationService(db).submit(payload.course_id, payload.name, payload.email)
    return {'message': 'Application submitted successfully.'}

@app.get('/api/applications')
def list_applications(course_id: Optional[int] = Query(default=None, alias='courseId'), db: Session = Depends(get_session)):
    """List the applications submitted to one course (`courseId` is required)."""
    return [a.model_dump() for a in services.ApplicationService(db).list_for_course(course_id)]

@app.put('/api/applications/{application_id}')
def update_application(application_id: int, payload: ApplicationStatusIn, db: Session = Depends(get_session)):
    status = services.ApplicationService(db).update_status(application_id, payload.status)
    return {'message': f'Application status updated to {status}'}

@app.get("/health")
def health():
    """Lightweight health check for uptime monitoring."""
    return {"status": "ok"}


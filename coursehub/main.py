import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from coursehub.core.config import settings
from coursehub.core.errors import CourseHubError
from coursehub.core.logging_middleware import LoggingMiddleware
from coursehub.db.init_db import init_db

from coursehub.routers.assignments import router as assignments_router
from coursehub.routers.auth import router as auth_router
from coursehub.routers.courses import router as courses_router
from coursehub.routers.grades import router as grades_router
from coursehub.routers.materials import router as materials_router
from coursehub.routers.submissions import router as submissions_router

logging.basicConfig(level=settings.LOG_LEVEL)

app = FastAPI(title=settings.PROJECT_NAME)

# Middleware
app.add_middleware(LoggingMiddleware)


@app.exception_handler(CourseHubError)
def handle_course_hub_error(request: Request, exc: CourseHubError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "kind": exc.kind},
    )


# Health check
@app.get("/health")
def health():
    return {"status": "ok"}


# Startup event
@app.on_event("startup")
def on_startup():
    init_db()


# Include routers
app.include_router(auth_router, prefix="/auth", tags=["auth"])
app.include_router(courses_router, prefix="/courses", tags=["courses"])
app.include_router(assignments_router, tags=["assignments"])
app.include_router(materials_router, tags=["materials"])
app.include_router(submissions_router, tags=["submissions"])
app.include_router(grades_router, tags=["grades"])

# Uploaded files, read-only
app.mount(
    settings.UPLOAD_URL_PREFIX,
    StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False),
    name="uploads",
)

import logging
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from college_portal.core.config import settings, validate_runtime_config
from college_portal.core.database import close_mongo_connection, connect_to_mongo, db
from college_portal.core.database_setup import ensure_indexes
from college_portal.core.errors import register_exception_handlers
from college_portal.core.middleware import RequestSizeLimitMiddleware, SecurityHeadersMiddleware
from college_portal.routers import auth, faculty, students, students_self

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger("main")

validate_runtime_config()

app = FastAPI(
    title=settings.API_TITLE,
    version=settings.API_VERSION,
    debug=settings.DEBUG,
)

# last added runs first: size check, then CORS, then headers
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.CLIENT_ORIGIN],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestSizeLimitMiddleware, max_size=settings.MAX_BODY_SIZE)

register_exception_handlers(app)


@app.on_event("startup")
async def startup_event():
    await connect_to_mongo()
    await ensure_indexes(db)
    logger.info(f"{settings.API_TITLE} ready ({settings.APP_ENV})")


@app.on_event("shutdown")
async def shutdown_event():
    await close_mongo_connection()


# routers ("/api" prefix); /students/me must be registered before /students/{id}
app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(students_self.router, prefix="/api/students", tags=["students"])
app.include_router(students.router, prefix="/api/students", tags=["students"])
app.include_router(faculty.router, prefix="/api/faculty", tags=["faculty"])


@app.get("/api/health")
async def health():
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}

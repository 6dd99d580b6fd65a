import logging
import os

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from campusconnect.core.config import settings
from campusconnect.core.exceptions import AppError
from campusconnect.core.responses import error, success
from campusconnect.core.storage_setup import setup_storage
from campusconnect.routers import auth, events, materials, notices, resumes
from campusconnect.utils.timeutils import now_iso

logging.basicConfig(level=logging.DEBUG if settings.DEBUG else logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger("campusconnect")

# FastAPI 앱 생성
app = FastAPI(
    title=settings.API_TITLE,
    version=settings.API_VERSION,
    debug=settings.DEBUG
)

# CORS 미들웨어 추가
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=error(exc.message, exc.errors))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path", "form")) or "body",
            "message": err.get("msg", "Invalid value"),
        }
        for err in exc.errors()
    ]
    return JSONResponse(status_code=400, content=error("Validation failed", errors))


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return JSONResponse(status_code=404, content=error("Route not found"))
    return JSONResponse(status_code=exc.status_code, content=error(str(exc.detail)))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    body = error("Internal server error")
    if settings.DEBUG:
        body["error"] = str(exc)
    return JSONResponse(status_code=500, content=body)


@app.on_event("startup")
def startup_event():
    if setup_storage(settings):
        logger.info(f"Storage ready (data: {settings.DATA_DIR}, uploads: {settings.UPLOAD_DIR})")
    else:
        logger.error("Storage setup failed; requests touching data will error")


# 라우터 등록 ("/api" prefix)
app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(notices.router, prefix="/api/notices", tags=["notices"])
app.include_router(events.router, prefix="/api/events", tags=["events"])
app.include_router(materials.router, prefix="/api/materials", tags=["materials"])
app.include_router(resumes.router, prefix="/api/resumes", tags=["resumes"])


@app.get("/api/health")
def health():
    return success("CampusConnect API is running", {"timestamp": now_iso()})


# 업로드 파일 정적 제공
os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")

# app/main.py
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings
from app.core.errors import DataIntegrityError, GoalsError
from app.database import AsyncSessionLocal, Base, engine
from app.models import activity, attachment, goal, idea, user  # noqa: F401  register tables
from app.routers import activity as activity_router
from app.routers import dashboard, goals, ideas, logs, notes, photos, users
from app.services.seed import seed_database
from app.utils.dates import utcnow

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(title="Couple Goals Dashboard", version="1.0")

# Include Routers
app.include_router(goals.router)
app.include_router(logs.router)
app.include_router(users.router)
app.include_router(activity_router.router)
app.include_router(dashboard.router)
app.include_router(notes.router)
app.include_router(photos.router)
app.include_router(ideas.router)


@app.exception_handler(GoalsError)
async def goals_error_handler(request: Request, exc: GoalsError):
    if isinstance(exc, DataIntegrityError):
        logger.error("Integrity violation on %s %s: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"message": "Internal server error"})
    content = {"message": exc.message}
    if getattr(exc, "field", None):
        content["field"] = exc.field
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if not errors:
        return JSONResponse(status_code=400, content={"message": "Invalid request"})
    err = errors[0]
    loc = [str(part) for part in err.get("loc", ())]
    if loc and loc[0] in ("body", "query", "path"):
        loc = loc[1:]
    field = ".".join(loc)
    content = {"message": f"{field}: {err['msg']}" if field else err["msg"]}
    if field:
        content["field"] = field
    return JSONResponse(status_code=400, content=content)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"message": str(exc.detail)})


# Create DB Tables (use Alembic for managed deployments)
@app.on_event("startup")
async def startup_event():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema ready")

    if settings.SEED_ON_STARTUP:
        async with AsyncSessionLocal() as db:
            await seed_database(db, utcnow())


@app.get("/")
def read_root():
    return {"message": "Welcome to the Couple Goals API"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True)

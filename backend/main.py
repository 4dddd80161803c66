"""FastAPI application entry point."""
import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from backend.api.router import api_router
from backend.config import Config
from backend.db.base import Base
from backend.db.session import engine
from backend.db import models  # noqa: F401


logging.basicConfig(
    level=Config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Freebet Planner API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=Config.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle Pydantic validation errors."""
    errors = exc.errors()
    logger.info("Validation errors on %s: %s", request.url.path, errors)
    return JSONResponse(
        status_code=422,
        content={"detail": [{"field": ".".join(str(loc) for loc in e["loc"]), "message": e["msg"]} for e in errors]}
    )


@app.on_event("startup")
def _startup_create_tables() -> None:
    if Config.ENV == "production":
        Config.validate()
    if Config.AUTO_CREATE_TABLES:
        logger.info("Creating database tables")
        Base.metadata.create_all(bind=engine)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)

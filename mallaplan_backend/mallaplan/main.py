import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from mallaplan.api.routes import router as api_router
from mallaplan.core.config import settings
from mallaplan.core.database import engine
from mallaplan.core.errors import InvalidTermError, UnknownCareerError
from mallaplan.core.logging_config import setup_logging
from mallaplan.models.base import Base
from mallaplan.services.cache import CatalogCache
import mallaplan.models  # noqa: F401

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="MallaPlan API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.state.catalog_cache = CatalogCache(ttl_seconds=settings.catalog_cache_ttl_seconds)
app.include_router(api_router)


@app.exception_handler(InvalidTermError)
async def invalid_term_handler(request: Request, exc: InvalidTermError):
    return JSONResponse(
        status_code=400,
        content={
            "detail": str(exc),
            "period": exc.period,
            "year": exc.year,
            "reason": exc.reason,
        },
    )


@app.exception_handler(UnknownCareerError)
async def unknown_career_handler(request: Request, exc: UnknownCareerError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.on_event("startup")
def on_startup():
    Base.metadata.create_all(bind=engine)
    logger.info("MallaPlan API started (%s)", settings.environment)


@app.get("/health")
def health_check():
    return {"status": "ok"}

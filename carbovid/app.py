"""Main FastAPI application for Carbovid service."""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, List, Optional

from fastapi import FastAPI, HTTPException, Query
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, PlainTextResponse

from carbovid.config import load_config, Config
from carbovid.correlation import CorrelationEngine
from carbovid.exceptions import UpstreamError, ValidationError
from carbovid.models import CarbonResponse, CorrelationResult, CovidResponse, RegionDescriptor
from carbovid.regions import DEFAULT_DIRECTORY


logger = logging.getLogger(__name__)

# Global configuration and engine
config: Optional[Config] = None
engine: Optional[CorrelationEngine] = None


def _get_engine() -> CorrelationEngine:
    if engine is None:
        raise HTTPException(status_code=500, detail="Configuration not loaded")
    return engine


@asynccontextmanager
async def lifespan(fastapi_app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    global config, engine  # pylint: disable=global-statement

    try:
        config = load_config()

        # Configure logging
        log_level = config.logging.level.upper()  # pylint: disable=no-member
        logging.basicConfig(level=getattr(logging, log_level))
        logger.info("Starting %s", fastapi_app.title)

        engine = CorrelationEngine.from_config(config, DEFAULT_DIRECTORY)

        logger.info("Application startup complete")
        yield

    except Exception as e:
        logger.error("Failed to start application: %s", e)
        raise

    finally:
        logger.info("Application shutdown complete")


app = FastAPI(
    title="Carbovid Correlation Service",
    description="Correlates UK regional grid carbon intensity with COVID case counts",
    version="0.1",
    lifespan=lifespan,
)


@app.exception_handler(ValueError)
async def value_error_handler(_: Any, exc: ValueError) -> JSONResponse:
    """Handle validation errors that escaped an endpoint."""
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.get("/", response_class=PlainTextResponse)
async def index() -> str:
    """Liveness check."""
    return "homepage"


@app.get("/regions")
async def list_regions() -> List[RegionDescriptor]:
    """Return all known grid regions with their health-area counterparts."""
    return list(_get_engine().directory)


def _single_day(region_id: str, from_date: str, to_date: Optional[str]):
    """Validate a raw-data query, returning the region id and the ``from`` day."""
    current = _get_engine()
    try:
        region = current.directory.resolve(region_id)
        date_range = current.parser.parse(from_date, to_date)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return region.region_id, date_range.start


@app.get("/carbon")
async def get_carbon(
    region_id: str = Query(..., description="Grid region id (1-17)"),
    from_date: str = Query(..., alias="from", description="Day in YYYY-MM-DD format"),
    to_date: Optional[str] = Query(None, alias="to", description="Optional end day in YYYY-MM-DD format"),
) -> CarbonResponse:
    """Return the raw Carbon Intensity response for the ``from`` day."""
    region, day = _single_day(region_id, from_date, to_date)
    try:
        return await run_in_threadpool(_get_engine().carbon_client.fetch_raw, region, day)
    except UpstreamError as e:
        raise HTTPException(status_code=503, detail="Carbon Intensity service temporarily unavailable") from e


@app.get("/covid")
async def get_covid(
    region_id: str = Query(..., description="Grid region id (1-17)"),
    from_date: str = Query(..., alias="from", description="Day in YYYY-MM-DD format"),
    to_date: Optional[str] = Query(None, alias="to", description="Optional end day in YYYY-MM-DD format"),
) -> CovidResponse:
    """Return the raw coronavirus dashboard response for the ``from`` day."""
    region, day = _single_day(region_id, from_date, to_date)
    try:
        return await run_in_threadpool(_get_engine().covid_client.fetch_raw, region, day)
    except UpstreamError as e:
        raise HTTPException(status_code=503, detail="Coronavirus dashboard service temporarily unavailable") from e


@app.get("/main", response_model=CorrelationResult)
async def get_correlation(
    region_id: Optional[str] = Query(None, description="Grid region id (1-17)"),
    from_date: Optional[str] = Query(None, alias="from", description="First day in YYYY-MM-DD format"),
    to_date: Optional[str] = Query(None, alias="to", description="Last day in YYYY-MM-DD format, defaults to from + 1 day"),
) -> JSONResponse:
    """Correlate carbon intensity and cumulative cases for every day of the range."""
    result = await run_in_threadpool(_get_engine().correlate_query, region_id, from_date, to_date)

    status_code = 400 if result.error else 200
    return JSONResponse(status_code=status_code, content=result.model_dump(mode="json"))

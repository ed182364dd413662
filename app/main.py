from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse
from loguru import logger

from app.api.dependencies.jobs import get_job_manager, get_status_store
from app.api.generate import router as generate_router
from app.api.patterns import router as patterns_router
from app.core.logger import setup_logger
from app.core.settings import settings

setup_logger(level=settings.log_level, log_file=settings.log_file)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Load persisted status on startup; let running deployments finish on shutdown."""
    store = get_status_store()
    logger.info(f"[STATUS] Startup status: {store.latest().state}")

    yield

    jobs = get_job_manager(store)
    if jobs.active_runs:
        logger.info(f"[JOBS] Waiting for {len(jobs.active_runs)} running deployment(s) before shutdown")
        await jobs.join()


app = FastAPI(title="GitPainter", lifespan=lifespan)


app.include_router(generate_router)
app.include_router(patterns_router)

logger.info("FastAPI application initialized")


@app.get("/health")
def health():
    return {"status": "ok"}


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all HTTP requests."""
    logger.debug(f"Request: {request.method} {request.url.path}")
    response = await call_next(request)
    logger.debug(f"Response: {response.status_code} for {request.method} {request.url.path}")
    return response


@app.get("/", response_class=HTMLResponse)
def root():
    return """
    <html>
        <head>
            <title>GitPainter</title>
        </head>
        <body>
            <h1>GitPainter</h1>
            <p>Paint your GitHub contribution graph with backdated commits</p>
            <h2>Available Endpoints:</h2>
            <ul>
                <li><a href="/docs">API Documentation (Swagger)</a></li>
                <li><a href="/redoc">API Documentation (ReDoc)</a></li>
                <li><a href="/api/status">Current job status</a></li>
                <li><a href="/api/patterns/presets">Pattern presets</a></li>
            </ul>
        </body>
    </html>
    """

"""
RailLovable - Chat-driven website generator

FastAPI application entry point.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .database import init_db, close_db
from .config import settings
from .engine.orchestrator import get_orchestrator
from .api import projects_router, chat_router, events_router, settings_router
from .store import ProjectNotFoundError
from .tracer import setup_follow_through_logging

NOISY_LOGGERS = ("aiosqlite", "sqlalchemy.engine", "httpx", "openai", "anthropic")


def configure_logging() -> None:
    """DEBUG when debugging, WARNING under follow-through tracing, INFO otherwise."""
    if settings.debug:
        level = logging.DEBUG
    elif settings.follow_through:
        level = logging.WARNING  # tracer output only
    else:
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    if not settings.debug:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    setup_follow_through_logging()


configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables on startup when the SQL store is active; dispose the engine on shutdown."""
    uses_database = settings.store_backend == "sqlite"
    logger.info(f"Starting RailLovable (store={settings.store_backend})")

    # A missing key is reported on the first turn, not here
    if settings.has_api_key():
        logger.info(f"Using LLM provider: {settings.llm_provider} ({settings.get_model()})")
    else:
        logger.warning(
            f"No API key configured for {settings.llm_provider}; "
            "turns will fail until one is set"
        )

    if uses_database:
        await init_db()
        logger.info(f"Database ready at {settings.database_url}")

    # Placeholders still streaming belong to a process that died mid-turn
    await get_orchestrator().recover_interrupted()

    yield

    logger.info("Shutting down RailLovable...")
    if uses_database:
        await close_db()


app = FastAPI(
    title="RailLovable",
    description="""
    Describe a website in chat, optionally with screenshots, and get a runnable
    React + Tailwind project back.

    ## Features
    - **Projects**: each conversation owns a versioned set of generated files
    - **Incremental edits**: every reply's code blocks are merged over the current files
    - **Providers**: OpenAI, Anthropic or Gemini, selected by configuration
    - **Cancellation**: stop an in-flight generation without touching the files
    - **Export**: download the project as a Vite app
    """,
    version="1.0.0",
    lifespan=lifespan,
)

# The generated-site preview runs on another origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

for router in (projects_router, chat_router, events_router, settings_router):
    app.include_router(router)


@app.exception_handler(ProjectNotFoundError)
async def project_not_found(request: Request, exc: ProjectNotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.get("/")
async def root():
    """Service name, active provider and where the docs live."""
    return {
        "name": "RailLovable",
        "version": app.version,
        "provider": settings.llm_provider,
        "model": settings.get_model(),
        "store": settings.store_backend,
        "docs": "/docs",
    }


@app.get("/health")
async def health():
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)

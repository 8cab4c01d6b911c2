"""Web service for musicstream."""

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from musicstream import __version__
from musicstream.config import Settings, setup_logging
from musicstream.web.routes import router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    yield
    # Shutdown


app = FastAPI(
    title="musicstream",
    description="Browse and scrobble a music library",
    version=__version__,
    lifespan=lifespan,
)

# Include API routes
app.include_router(router)


def main():
    """Run the web server."""
    settings = Settings.from_env()
    setup_logging(settings.log_level)

    uvicorn.run(
        "musicstream.web:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
    )


if __name__ == "__main__":
    main()

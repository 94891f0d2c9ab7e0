"""
Treasure Hunter FastAPI Application

Main entry point for the treasure map application, serving the REST API
for the clue catalog, search, discoveries and the map viewport, plus the
notification stream.
"""

import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv

# Load environment variables before modules that read them at import time
load_dotenv()

from fastapi import FastAPI, Request  # noqa: E402
from fastapi.responses import JSONResponse  # noqa: E402

from database import init_db, seed_treasures  # noqa: E402
from logic.config import load_config  # noqa: E402
from logic.errors import AuthenticationRequired, ValidationError  # noqa: E402
from server.auth import router as auth_router  # noqa: E402
from server.broadcast import router as broadcast_router  # noqa: E402
from server.routes import router as routes_router  # noqa: E402
from server.treasures import router as treasures_router  # noqa: E402
from server.viewport import router as viewport_router  # noqa: E402
from treasure_store import SqlTreasureStore  # noqa: E402
from user_context import SessionRegistry  # noqa: E402

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    config = load_config()
    init_db()
    seed_treasures(config)

    store = SqlTreasureStore(timeout=config["backend"]["timeout_seconds"])
    app.state.config = config
    app.state.store = store
    app.state.sessions = SessionRegistry(store, config)
    logger.info("Treasure map ready")

    yield

    app.state.sessions.close_all()


app = FastAPI(title="Treasure Hunter", lifespan=lifespan)

# Include all routers
app.include_router(routes_router)
app.include_router(auth_router)
app.include_router(treasures_router)
app.include_router(viewport_router)
app.include_router(broadcast_router)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=400, content={"detail": str(exc), "field": exc.field})


@app.exception_handler(AuthenticationRequired)
async def authentication_required_handler(request: Request, exc: AuthenticationRequired):
    return JSONResponse(status_code=401, content={"detail": str(exc)})


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)

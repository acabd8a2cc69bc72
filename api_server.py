from __future__ import annotations  # FastAPI server exposing the mock interview flow

import datetime as dt
import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import router
from config.settings import settings
from storage.migrate import migrate


logger = logging.getLogger(__name__)

_STARTED_AT = time.monotonic()


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:  # Ensure the schema exists before serving
    migrate()
    logger.info("Database ready at %s", settings.DB_PATH)
    yield


app = FastAPI(title="Mock Interview API", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(router)


@app.get("/")
def root() -> Dict[str, str]:  # Liveness banner
    return {
        "status": "ok",
        "message": "AI Interview Coach API is running",
        "timestamp": dt.datetime.now(dt.timezone.utc).isoformat(),
    }


@app.get("/health")
def health() -> Dict[str, object]:  # Health probe with process uptime
    return {"status": "ok", "uptime": round(time.monotonic() - _STARTED_AT, 3)}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("api_server:app", host="0.0.0.0", port=8000)

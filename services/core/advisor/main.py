from __future__ import annotations

import logging
import time
from typing import Any

from fastapi import FastAPI

from .api import advice, meta
from .config import get_settings


settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.get_log_level(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

app = FastAPI(
    title=settings.api_title,
    version="0.1.0",
)

app.include_router(advice.router)
app.include_router(meta.router)


@app.get("/health")
async def health() -> dict[str, Any]:
    return {"ok": True, "ts": int(time.time())}

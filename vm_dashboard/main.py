from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from .api import health, hosts, metrics
from .config import get_settings
from .logging_config import setup_logging
from .services import metrics_poller


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(get_settings().log_level)
    poller = metrics_poller.get_poller()
    await poller.start()
    try:
        yield
    finally:
        await poller.stop()


app = FastAPI(title="VM Metrics Dashboard", lifespan=lifespan)

app.include_router(health.router, prefix="/health", tags=["health"])
app.include_router(hosts.router, prefix="/hosts", tags=["hosts"])
app.include_router(metrics.router, prefix="/metrics", tags=["metrics"])


def run() -> None:
    settings = get_settings()
    uvicorn.run(app, host="0.0.0.0", port=8000, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()

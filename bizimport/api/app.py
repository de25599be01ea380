from fastapi import FastAPI

from .routes import router
from ..core.config import settings
from ..core.logging import configure_logging

configure_logging(settings.log_level, settings.log_file or None)

app = FastAPI(title="BizImport API", version="0.1.0")
app.include_router(router, prefix="/v1")


@app.get("/health")
async def health():
    return {"status": "ok"}

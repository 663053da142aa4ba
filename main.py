import logging

from fastapi import Depends, FastAPI
import uvicorn

from config import Settings, get_settings
from route_modules import combined_router

logger = logging.getLogger("gymkhana")

app = FastAPI(title="Gymkhana")
app.include_router(combined_router)


@app.middleware("http")
async def add_no_cache_header(request, call_next):
    response = await call_next(request)
    # Pages depend on who is signed in; never let a cache replay them
    response.headers["Cache-Control"] = "no-cache, no-store, must-revalidate, max-age=0, private"
    response.headers["Pragma"] = "no-cache"
    response.headers["Expires"] = "0"
    return response


@app.get("/health")
async def health(settings: Settings = Depends(get_settings)):
    return {"status": "ok", "backend_mode": settings.backend_mode}


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    settings = get_settings()
    logger.info(f"Starting Gymkhana on port {settings.port} (backend: {settings.backend_mode})")
    uvicorn.run(app, host="0.0.0.0", port=settings.port)

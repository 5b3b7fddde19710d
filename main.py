import logging

from fastapi import FastAPI
from config.settings import settings
from rescaler.controller.scale_controller import build_preset_router, router as scale_router

def create_app() -> FastAPI:
    logging.basicConfig(level=settings.log_level)
    app = FastAPI(title="Run-Rescaler", version="1.0.0")
    app.include_router(scale_router)
    app.include_router(build_preset_router(settings.presets))
    return app

app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8080, reload=True)

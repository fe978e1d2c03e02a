from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse
from fastapi.staticfiles import StaticFiles

from app.api.routers import api_router
from app.config import settings
from app.errors import register_exception_handlers
from app.services.uploads import UPLOAD_URL_PREFIX, upload_dir


logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


class UncachedStaticFiles(StaticFiles):
    async def get_response(self, path, scope):
        response = await super().get_response(path, scope)
        response.headers["Cache-Control"] = "no-store"
        return response


app = FastAPI(title="Kanban Boards", default_response_class=ORJSONResponse)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(api_router)

upload_dir().mkdir(parents=True, exist_ok=True)
app.mount(UPLOAD_URL_PREFIX, UncachedStaticFiles(directory=upload_dir()), name="uploads")


@app.get("/health")
async def health() -> dict:
    return {"status": "ok"}

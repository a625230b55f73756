from importlib.metadata import version as pkg_version

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from commandtable.api import health_router, rooms_router
from commandtable.config import settings

app = FastAPI(
    title=settings.app_name,
    version=pkg_version("commandtable"),
    debug=settings.debug,
)

app.include_router(health_router)
app.include_router(rooms_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Tighten in production
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

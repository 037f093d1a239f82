import logging
from contextlib import asynccontextmanager

from application.rest.routers.router_health import router as health_router
from application.rest.routers.router_metadata import router as metadata_router
from application.rest.routers.router_search import router as search_router
from application.rest.routers.router_tags import router as tags_router
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from utils.config import HOST, PORT
from utils.dependencies import init_db

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("Library service started")
    yield


# FastAPI app
app = FastAPI(
    title="STL Library Service",
    description="Model library metadata and hierarchical search service",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router, tags=["health"])
app.include_router(search_router, tags=["search"])
app.include_router(metadata_router, tags=["metadata"])
app.include_router(tags_router, tags=["tags"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=HOST, port=PORT)

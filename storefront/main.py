from contextlib import asynccontextmanager

from fastapi import FastAPI

from storefront.core.config import settings
from storefront.core.logging_config import setup_logging
from storefront.core.mongo import close_mongo, connect_mongo, get_mongo_db
from storefront.routers.search import router as search_router
from storefront.services.search_term_service import SearchTermService

# Setup logging (must be done before any other imports that use logging)
setup_logging(log_level=settings.LOG_LEVEL)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    await connect_mongo()
    await SearchTermService(get_mongo_db()).ensure_indexes()
    yield
    # Shutdown
    await close_mongo()


app = FastAPI(
    title=settings.APP_NAME,
    description="Storefront product search: facets, keyword search and search-term statistics",
    version="1.0.0",
    lifespan=lifespan,
)

app.include_router(search_router, prefix="/api/v1")


@app.get("/")
async def root():
    return {"message": f"Welcome to {settings.APP_NAME}"}


@app.get("/health")
async def health_check():
    return {"status": "healthy"}

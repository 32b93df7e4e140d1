"""
Storefront - Main FastAPI Application

Single entry point for the catalog and cart API.
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storefront.logging import get_logger
from storefront.routers import cart_router, catalog_router
from storefront.routers.deps import shutdown_services

logger = get_logger(__name__)


# ==================== FASTAPI APP ====================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler"""
    logger.info("Storefront API starting")
    yield
    await shutdown_services()


app = FastAPI(
    title="Storefront",
    description="Product catalog and shopping cart API",
    version="1.0.0",
    lifespan=lifespan
)

# The browser storefront is served from a different origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(catalog_router)
app.include_router(cart_router)


# ==================== HEALTH CHECK ====================

@app.get("/api/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "ok", "service": "storefront"}

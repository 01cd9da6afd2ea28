"""
Edition Auction API - Main Application.

FastAPI application with CORS enabled for frontend communication.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api import __version__
from api.settings import load_settings

settings = load_settings()
logging.basicConfig(level=getattr(logging, settings.log_level, logging.INFO))

# Create FastAPI application
app = FastAPI(
    title="Edition Auction API",
    description="REST API for pricing and selling edition units through step-decreasing auctions",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Configure CORS - Allow all origins for development
# TODO: Restrict origins in production
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Allow all origins for demo
    allow_credentials=True,
    allow_methods=["*"],  # Allow all HTTP methods
    allow_headers=["*"],  # Allow all headers
)


@app.get("/health", tags=["Health"])
def health_check():
    """
    Health check endpoint.

    Returns the API status and version.
    """
    return {
        "status": "healthy",
        "version": __version__,
        "service": "edition-auction-api",
        "store_backend": settings.store_backend,
    }


@app.get("/", tags=["Root"])
def root():
    """
    Root endpoint with API information.
    """
    return {
        "message": "Edition Auction API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health"
    }


# Import and include routers
from api.routers import sales, purchases

app.include_router(sales.router, prefix="/api/v1", tags=["Sales"])
app.include_router(purchases.router, prefix="/api/v1", tags=["Purchases"])

"""
Cubtton Storefront - Main FastAPI Application

Single entry point for the web client's API routes.
"""
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cubtton.logging import get_logger
from cubtton.routers import auth_router, cart_router, products_router
from cubtton.state import SessionRegistry

logger = get_logger(__name__)

WEBAPP_URL = os.environ.get("WEBAPP_URL", "http://localhost:5173")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the session registry once, unless a test already installed one."""
    if getattr(app.state, "cubtton", None) is None:
        app.state.cubtton = SessionRegistry.from_env()
    yield


app = FastAPI(title="Cubtton Storefront API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[WEBAPP_URL],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(products_router, prefix="/api")
app.include_router(cart_router, prefix="/api")
app.include_router(auth_router, prefix="/api")


@app.get("/api/health")
async def health_check():
    return {"status": "ok"}

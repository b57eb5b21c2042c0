"""FastAPI application entry point."""

from fastapi import FastAPI

from app import __version__
from app.api import health, plan

app = FastAPI(
    title="Signal Planner",
    description="Static traffic-light green-time planning from recorded routes",
    version=__version__,
)

app.include_router(health.router, tags=["health"])
app.include_router(plan.router, tags=["plan"])

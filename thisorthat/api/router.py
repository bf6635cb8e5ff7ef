"""
Router registration for the This or That API.
"""
from fastapi import FastAPI

from thisorthat.api import admin, play


def include_routers(app: FastAPI) -> None:
    """Include all API routers with the FastAPI application."""
    app.include_router(admin.router, prefix="/api", tags=["admin"])
    app.include_router(play.router, prefix="/api", tags=["play"])

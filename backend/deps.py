"""FastAPI dependencies: services live on ``app.state``."""

from fastapi import Request

from rcb.jobs.engine import JobEngine
from rcb.services import Services, build_services

__all__ = ["Services", "build_services", "get_engine", "get_services"]


def get_services(request: Request) -> Services:
    return request.app.state.services


def get_engine(request: Request) -> JobEngine:
    return request.app.state.services.engine

"""Route dependencies — resolve the per-app StateService from application state."""

from fastapi import Request

from app.services.state_service import StateService


def get_state_service(request: Request) -> StateService:
    return request.app.state.state_service

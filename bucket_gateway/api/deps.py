from __future__ import annotations

from fastapi import Request

from bucket_gateway.services.bundle import ServiceBundle


def get_services(request: Request) -> ServiceBundle:
    """Service bundle built once by create_app from the startup settings."""
    return request.app.state.services

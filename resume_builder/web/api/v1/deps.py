"""Dependency providers for v1 API."""

from __future__ import annotations

from fastapi import Request

from ....config import AppConfig
from ....observability import RenderObserver
from ....optimizer import ResumeOptimizer
from ....providers import create_provider
from ...errors import APIError


def get_config(request: Request) -> AppConfig:
    """Access the application config from app state."""
    return request.app.state.config


def get_observer(request: Request) -> RenderObserver:
    return request.app.state.observer


def get_optimizer(request: Request) -> ResumeOptimizer:
    """Return the process-wide optimizer, building it from config on first use.

    Tests replace this dependency through ``app.dependency_overrides``.
    """
    optimizer = getattr(request.app.state, "optimizer", None)
    if optimizer is not None:
        return optimizer

    config = get_config(request)
    try:
        provider = create_provider(
            provider=config.provider,
            api_key=config.api_key,
            model=config.model,
            api_base=config.api_base,
            temperature=config.temperature,
            max_tokens=config.max_tokens,
        )
    except ValueError as e:
        raise APIError(503, "SERVICE_NOT_CONFIGURED", str(e), {"provider": config.provider}) from e

    optimizer = ResumeOptimizer(provider, observer=get_observer(request))
    request.app.state.optimizer = optimizer
    return optimizer

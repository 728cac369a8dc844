"""API routers for the Elixhauser composite score service."""

from elixhauser.api.scores import router as scores_router

__all__ = [
    "scores_router",
]

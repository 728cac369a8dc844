"""Pydantic schemas for the Elixhauser composite score API."""

from elixhauser.schemas.scores import (
    ComorbidityInfo,
    MethodInfo,
    PatientScoreRequest,
    PatientScoreResponse,
    ScoreRequest,
    ScoreResponse,
)

__all__ = [
    "ComorbidityInfo",
    "MethodInfo",
    "PatientScoreRequest",
    "PatientScoreResponse",
    "ScoreRequest",
    "ScoreResponse",
]

"""Services for the Elixhauser composite score API.

- ElixhauserScoreService: van Walraven / SID_30 / SID_29 composite scores
"""

from elixhauser.services.elixhauser_scores import (
    CARDIAC_ARRHYTHMIA,
    CARDIAC_ARRHYTHMIA_WEIGHTS,
    COMORBIDITY_DESCRIPTIONS,
    REQUIRED_COMORBIDITIES,
    WEIGHTS,
    DomainError,
    ElixhauserScoreError,
    ElixhauserScoreResult,
    ElixhauserScoreService,
    InvalidArgumentError,
    SchemaError,
    ScoreMethod,
    append_scores,
    compute,
    get_elixhauser_score_service,
    reset_elixhauser_score_service,
    score_patient,
)

__all__ = [
    "CARDIAC_ARRHYTHMIA",
    "CARDIAC_ARRHYTHMIA_WEIGHTS",
    "COMORBIDITY_DESCRIPTIONS",
    "REQUIRED_COMORBIDITIES",
    "WEIGHTS",
    "DomainError",
    "ElixhauserScoreError",
    "ElixhauserScoreResult",
    "ElixhauserScoreService",
    "InvalidArgumentError",
    "SchemaError",
    "ScoreMethod",
    "append_scores",
    "compute",
    "get_elixhauser_score_service",
    "reset_elixhauser_score_service",
    "score_patient",
]

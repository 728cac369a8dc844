"""Request and response schemas for the composite score API."""

from typing import Any

from pydantic import BaseModel, Field


class ScoreRequest(BaseModel):
    """Rows of HCUP comorbidity indicators to score."""

    rows: list[dict[str, Any]] = Field(
        ...,
        description="One mapping per patient of HCUP comorbidity name to 0/1",
    )
    method: str | None = Field(
        None,
        description="van_walraven, sid_30 or sid_29 (defaults to the configured method)",
    )
    include_cardiac_arrhythmia: bool | None = Field(
        None,
        description="Add the CARDARRH term (not defined for sid_29)",
    )


class ScoreResponse(BaseModel):
    """Composite scores in input row order."""

    method: str
    include_cardiac_arrhythmia: bool
    row_count: int
    scores: list[int]


class PatientScoreResponse(BaseModel):
    """Composite score for one patient with its per-comorbidity breakdown."""

    calculator_name: str
    method: str
    include_cardiac_arrhythmia: bool
    score: int
    score_unit: str
    components: dict[str, int] = Field(
        default_factory=dict,
        description="Weight contributed by each present comorbidity (non-zero only)",
    )
    present_comorbidities: list[str] = Field(default_factory=list)
    references: list[str] = Field(default_factory=list)


class PatientScoreRequest(BaseModel):
    """Indicators for a single patient."""

    indicators: dict[str, Any] = Field(..., description="HCUP comorbidity name to 0/1")
    method: str | None = None
    include_cardiac_arrhythmia: bool | None = None


class MethodInfo(BaseModel):
    """A supported weighting scheme."""

    method: str
    description: str
    supports_cardiac_arrhythmia: bool


class ComorbidityInfo(BaseModel):
    """An HCUP comorbidity column and its weight under each method."""

    name: str
    description: str
    required: bool
    weights: dict[str, int | None]

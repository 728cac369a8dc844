"""Elixhauser Composite Score API Endpoints.

Scores rows of HCUP comorbidity indicators with the van Walraven,
SID_30 or SID_29 weights and exposes the weight tables.
"""

import logging

from fastapi import APIRouter, HTTPException

from elixhauser.core.audit import log_score_request
from elixhauser.core.config import settings
from elixhauser.schemas.scores import (
    ComorbidityInfo,
    MethodInfo,
    PatientScoreRequest,
    PatientScoreResponse,
    ScoreRequest,
    ScoreResponse,
)
from elixhauser.services.elixhauser_scores import (
    CARDIAC_ARRHYTHMIA,
    CARDIAC_ARRHYTHMIA_WEIGHTS,
    COMORBIDITY_DESCRIPTIONS,
    ElixhauserScoreError,
    InvalidArgumentError,
    ScoreMethod,
    get_elixhauser_score_service,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/elixhauser", tags=["Elixhauser"])


def _to_http_error(error: ElixhauserScoreError) -> HTTPException:
    if isinstance(error, InvalidArgumentError):
        return HTTPException(status_code=400, detail=str(error))
    return HTTPException(status_code=422, detail=str(error))


@router.post(
    "/scores",
    response_model=ScoreResponse,
    summary="Compute composite scores",
    description="Compute one Elixhauser composite score per row. The whole request is rejected if any row is invalid.",
)
async def compute_scores(request: ScoreRequest) -> ScoreResponse:
    """Compute composite scores for a batch of patients.

    Args:
        request: Indicator rows plus method and cardiac arrhythmia options.

    Returns:
        ScoreResponse with scores in input row order.
    """
    method = request.method or settings.default_method
    include_cardiac_arrhythmia = (
        settings.default_include_cardiac_arrhythmia
        if request.include_cardiac_arrhythmia is None
        else request.include_cardiac_arrhythmia
    )

    service = get_elixhauser_score_service()
    try:
        scores = service.compute(request.rows, method, include_cardiac_arrhythmia)
    except ElixhauserScoreError as e:
        logger.warning(f"Score request rejected: {type(e).__name__}")
        log_score_request(method, len(request.rows), include_cardiac_arrhythmia, error=type(e).__name__)
        raise _to_http_error(e) from e

    log_score_request(method, len(request.rows), include_cardiac_arrhythmia)

    return ScoreResponse(
        method=ScoreMethod.parse(method).value,
        include_cardiac_arrhythmia=include_cardiac_arrhythmia,
        row_count=len(scores),
        scores=scores.tolist(),
    )


@router.post(
    "/patient",
    response_model=PatientScoreResponse,
    summary="Score one patient",
    description="Compute a composite score for one patient with the weight contributed by each comorbidity.",
)
async def score_single_patient(request: PatientScoreRequest) -> PatientScoreResponse:
    """Score a single patient with a per-comorbidity breakdown."""
    method = request.method or settings.default_method
    include_cardiac_arrhythmia = (
        settings.default_include_cardiac_arrhythmia
        if request.include_cardiac_arrhythmia is None
        else request.include_cardiac_arrhythmia
    )

    service = get_elixhauser_score_service()
    try:
        result = service.score_patient(request.indicators, method, include_cardiac_arrhythmia)
    except ElixhauserScoreError as e:
        logger.warning(f"Patient score request rejected: {type(e).__name__}")
        log_score_request(method, 1, include_cardiac_arrhythmia, error=type(e).__name__)
        raise _to_http_error(e) from e

    log_score_request(method, 1, include_cardiac_arrhythmia)

    return PatientScoreResponse(
        calculator_name=result.calculator_name,
        method=result.method.value,
        include_cardiac_arrhythmia=result.include_cardiac_arrhythmia,
        score=result.score,
        score_unit=result.score_unit,
        components=result.components,
        present_comorbidities=result.present_comorbidities,
        references=result.references,
    )


@router.get(
    "/methods",
    response_model=list[MethodInfo],
    summary="List scoring methods",
)
async def list_methods() -> list[MethodInfo]:
    """List the supported weighting schemes."""
    service = get_elixhauser_score_service()
    return [
        MethodInfo(
            method=name,
            description=description,
            supports_cardiac_arrhythmia=ScoreMethod(name) in CARDIAC_ARRHYTHMIA_WEIGHTS,
        )
        for name, description in service.get_available_methods().items()
    ]


@router.get(
    "/comorbidities",
    response_model=list[ComorbidityInfo],
    summary="List comorbidity columns and weights",
)
async def list_comorbidities() -> list[ComorbidityInfo]:
    """List every HCUP comorbidity column with its weight under each method."""
    service = get_elixhauser_score_service()
    tables = {method.value: service.get_weight_table(method) for method in ScoreMethod}

    return [
        ComorbidityInfo(
            name=name,
            description=description,
            required=name != CARDIAC_ARRHYTHMIA,
            weights={method: table[name] for method, table in tables.items()},
        )
        for name, description in COMORBIDITY_DESCRIPTIONS.items()
    ]

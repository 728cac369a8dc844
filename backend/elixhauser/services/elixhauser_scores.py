"""Elixhauser Comorbidity Composite Score Service.

Computes the van Walraven (2009), SID_30 and SID_29 composite scores from
0/1 comorbidity indicators. Indicator columns must use the HCUP
Comorbidity Software names; deriving the indicators from ICD codes is done
upstream (e.g. with the HCUP software itself).

See http://www.hcup-us.ahrq.gov/toolssoftware/comorbidity/comorbidity.jsp
"""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from threading import Lock
from types import MappingProxyType
from typing import Any

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)


class ScoreMethod(str, Enum):
    """Published Elixhauser weighting schemes."""

    VAN_WALRAVEN = "van_walraven"
    SID_30 = "sid_30"
    SID_29 = "sid_29"

    @classmethod
    def parse(cls, value: "ScoreMethod | str") -> "ScoreMethod":
        """Resolve a method identifier, accepting exact names only."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except (ValueError, TypeError):
            allowed = ", ".join(m.value for m in cls)
            raise InvalidArgumentError(
                f"Unknown scoring method: {value!r}. Method must be one of: {allowed}"
            ) from None


# ============================================================================
# Errors
# ============================================================================


class ElixhauserScoreError(ValueError):
    """Base error for composite score computation."""


class InvalidArgumentError(ElixhauserScoreError):
    """Raised for an unrecognized method or unusable call arguments."""


class SchemaError(ElixhauserScoreError):
    """Raised when required indicator columns are missing or misnamed."""

    def __init__(self, message: str, missing_columns: list[str]) -> None:
        super().__init__(message)
        self.missing_columns = missing_columns


class DomainError(ElixhauserScoreError):
    """Raised when an indicator holds anything other than 0 or 1."""

    def __init__(self, message: str, invalid_cells: dict[str, int]) -> None:
        super().__init__(message)
        self.invalid_cells = invalid_cells

    @property
    def invalid_count(self) -> int:
        return sum(self.invalid_cells.values())


# ============================================================================
# Reference Data
# ============================================================================

# HCUP Comorbidity Software names and descriptions
COMORBIDITY_DESCRIPTIONS: Mapping[str, str] = MappingProxyType({
    "AIDS": "AIDS/HIV",
    "ALCOHOL": "Alcohol Abuse",
    "ANEMDEF": "Deficiency Anemia",
    "ARTH": "Rheumatoid Arthritis",
    "BLDLOSS": "Blood Loss Anemia",
    "CARDARRH": "Cardiac Arrhythmia",
    "CHF": "Congestive Heart Failure",
    "CHRNLUNG": "Chronic Pulmonary Disease",
    "COAG": "Coagulopathy",
    "DEPRESS": "Depression",
    "DM": "Diabetes without Chronic Complications",
    "DMCX": "Diabetes with Chronic Complications",
    "DRUG": "Drug Abuse",
    "HTN_C": "Hypertension",
    "HYPOTHY": "Hypothyroidism",
    "LIVER": "Liver Disease",
    "LYMPH": "Lymphoma",
    "LYTES": "Fluid and Electrolyte Disorders",
    "METS": "Metastatic Cancer",
    "NEURO": "Other Neurological Disorders",
    "OBESE": "Obesity",
    "PARA": "Paralysis",
    "PERIVASC": "Peripheral Vascular Disease",
    "PSYCH": "Psychoses",
    "PULMCIRC": "Pulmonary Circulation Disorder",
    "RENLFAIL": "Renal Failure",
    "TUMOR": "Solid Tumor without Metastasis",
    "ULCER": "Peptic Ulcer Disease",
    "VALVE": "Valvular Disease",
    "WGHTLOSS": "Weight Loss",
})

CARDIAC_ARRHYTHMIA = "CARDARRH"

REQUIRED_COMORBIDITIES: tuple[str, ...] = tuple(
    name for name in COMORBIDITY_DESCRIPTIONS if name != CARDIAC_ARRHYTHMIA
)

# Weights per comorbidity as (van_walraven, sid_30, sid_29)
_WEIGHT_ROWS: dict[str, tuple[int, int, int]] = {
    "AIDS": (0, 0, 0),
    "ALCOHOL": (0, 0, -2),
    "ANEMDEF": (-2, 0, 0),
    "ARTH": (0, 0, 0),
    "BLDLOSS": (-2, -3, -2),
    "CHF": (7, 9, 9),
    "CHRNLUNG": (3, 3, 3),
    "COAG": (3, 12, 9),
    "DEPRESS": (-3, -5, -4),
    "DM": (0, 1, 0),
    "DMCX": (0, 0, -1),
    "DRUG": (-7, -11, -8),
    "HTN_C": (0, -2, -1),
    "HYPOTHY": (0, 0, 0),
    "LIVER": (11, 7, 5),
    "LYMPH": (9, 8, 6),
    "LYTES": (5, 11, 9),
    "METS": (12, 17, 13),
    "NEURO": (6, 5, 4),
    "OBESE": (-4, -5, -4),
    "PARA": (7, 4, 3),
    "PERIVASC": (2, 4, 4),
    "PSYCH": (0, -6, -4),
    "PULMCIRC": (4, 5, 5),
    "RENLFAIL": (5, 7, 6),
    "TUMOR": (4, 10, 8),
    "ULCER": (0, 0, 0),
    "VALVE": (-1, 0, 0),
    "WGHTLOSS": (6, 10, 8),
}

WEIGHTS: Mapping[ScoreMethod, Mapping[str, int]] = MappingProxyType({
    method: MappingProxyType({name: _WEIGHT_ROWS[name][i] for name in REQUIRED_COMORBIDITIES})
    for i, method in enumerate(ScoreMethod)
})

# SID_29 has no cardiac arrhythmia term
CARDIAC_ARRHYTHMIA_WEIGHTS: Mapping[ScoreMethod, int] = MappingProxyType({
    ScoreMethod.VAN_WALRAVEN: 5,
    ScoreMethod.SID_30: 8,
})

METHOD_DESCRIPTIONS: Mapping[ScoreMethod, str] = MappingProxyType({
    ScoreMethod.VAN_WALRAVEN: "van Walraven et al. (2009) composite score",
    ScoreMethod.SID_30: "SID_30 composite score (30 comorbidities)",
    ScoreMethod.SID_29: "SID_29 composite score (29 comorbidities, no cardiac arrhythmia)",
})

_WEIGHT_VECTORS: dict[ScoreMethod, np.ndarray] = {
    method: np.array([WEIGHTS[method][name] for name in REQUIRED_COMORBIDITIES], dtype=np.int64)
    for method in ScoreMethod
}

_SCORE_COLUMNS: dict[ScoreMethod, str] = {
    ScoreMethod.VAN_WALRAVEN: "vw_score",
    ScoreMethod.SID_30: "sid_30",
    ScoreMethod.SID_29: "sid_29",
}

REFERENCES = [
    "van Walraven C, et al. Med Care 2009;47(6):626-633",
    "Moore BJ, et al. Med Care 2017;55(7):698-705",
]


@dataclass
class ElixhauserScoreResult:
    """Composite score for a single patient."""

    method: ScoreMethod
    score: int
    include_cardiac_arrhythmia: bool
    components: dict[str, int] = field(default_factory=dict)
    present_comorbidities: list[str] = field(default_factory=list)
    calculator_name: str = "Elixhauser Comorbidity Composite Score"
    score_unit: str = "points"
    references: list[str] = field(default_factory=lambda: list(REFERENCES))


# ============================================================================
# Validation
# ============================================================================


def _expected_names_message() -> str:
    lines = [
        f"  {name} ({COMORBIDITY_DESCRIPTIONS[name]})" for name in REQUIRED_COMORBIDITIES
    ]
    return "\n".join(lines)


def _resolve_arguments(
    method: ScoreMethod | str,
    include_cardiac_arrhythmia: bool,
) -> ScoreMethod:
    score_method = ScoreMethod.parse(method)
    if include_cardiac_arrhythmia and score_method not in CARDIAC_ARRHYTHMIA_WEIGHTS:
        raise InvalidArgumentError(
            f"Method {score_method.value} defines no cardiac arrhythmia term; "
            f"use van_walraven or sid_30 to include {CARDIAC_ARRHYTHMIA}"
        )
    return score_method


def _to_frame(dataset: Any) -> pd.DataFrame:
    """Convert a supported dataset shape to a DataFrame without copying frames."""
    if dataset is None:
        raise InvalidArgumentError("A dataset must be specified")

    if isinstance(dataset, pd.DataFrame):
        return dataset

    if isinstance(dataset, Mapping):
        try:
            return pd.DataFrame({key: list(values) for key, values in dataset.items()})
        except (TypeError, ValueError) as e:
            raise InvalidArgumentError(f"Column mapping is not a valid table: {e}") from e

    if isinstance(dataset, Sequence) and not isinstance(dataset, (str, bytes)):
        rows = list(dataset)
        if not all(isinstance(row, Mapping) for row in rows):
            raise InvalidArgumentError("Every row must be a mapping of column name to indicator")
        return pd.DataFrame([dict(row) for row in rows])

    raise InvalidArgumentError(
        f"Unsupported dataset type: {type(dataset).__name__}. "
        "Pass a DataFrame, a list of row mappings or a mapping of columns"
    )


def _invalid_cells(frame: pd.DataFrame, columns: Sequence[str]) -> dict[str, int]:
    """Count non-0/1 cells per column across every row."""
    valid = frame.loc[:, list(columns)].isin([0, 1])
    counts = (~valid).sum(axis=0)
    return {column: int(count) for column, count in counts.items() if count}


def validate_dataset(
    frame: pd.DataFrame,
    include_cardiac_arrhythmia: bool = False,
) -> None:
    """Check a DataFrame against the indicator schema.

    Checks run in a fixed order and the first failure is raised: required
    columns, required values, then (when requested) the cardiac arrhythmia
    column and its values. Each value check covers every row.

    Raises:
        SchemaError: If a required column is missing.
        DomainError: If any checked value is not 0 or 1.
    """
    missing = [name for name in REQUIRED_COMORBIDITIES if name not in frame.columns]
    if missing:
        raise SchemaError(
            "Comorbidity indicator names in the dataset must match the HCUP "
            f"Comorbidity Software names (missing: {', '.join(missing)}). "
            f"Expected columns:\n{_expected_names_message()}",
            missing_columns=missing,
        )

    invalid = _invalid_cells(frame, REQUIRED_COMORBIDITIES)
    if invalid:
        total = sum(invalid.values())
        raise DomainError(
            "All comorbidity indicators must be coded as 0/1 where 1 indicates the "
            "comorbidity is present and 0 indicates it is absent "
            f"({total} invalid value(s) in: {', '.join(invalid)})",
            invalid_cells=invalid,
        )

    if not include_cardiac_arrhythmia:
        return

    if CARDIAC_ARRHYTHMIA not in frame.columns:
        raise SchemaError(
            "Cardiac arrhythmia indicator is either missing or needs to be "
            f"renamed {CARDIAC_ARRHYTHMIA}",
            missing_columns=[CARDIAC_ARRHYTHMIA],
        )

    invalid = _invalid_cells(frame, [CARDIAC_ARRHYTHMIA])
    if invalid:
        raise DomainError(
            f"{CARDIAC_ARRHYTHMIA} must be coded as 0/1 where 1 indicates cardiac "
            "arrhythmia is present and 0 indicates it is absent "
            f"({invalid[CARDIAC_ARRHYTHMIA]} invalid value(s))",
            invalid_cells=invalid,
        )


# ============================================================================
# Scoring
# ============================================================================


def score_column_name(
    method: ScoreMethod | str,
    include_cardiac_arrhythmia: bool = False,
) -> str:
    """Default output column name for a method."""
    score_method = _resolve_arguments(method, include_cardiac_arrhythmia)
    name = _SCORE_COLUMNS[score_method]
    return f"{name}_card_arr" if include_cardiac_arrhythmia else name


def compute(
    dataset: Any,
    method: ScoreMethod | str = ScoreMethod.VAN_WALRAVEN,
    include_cardiac_arrhythmia: bool = False,
) -> pd.Series:
    """Compute an Elixhauser composite score for every row.

    Args:
        dataset: DataFrame, list of row mappings, or mapping of columns
            holding the 29 HCUP indicator columns (and CARDARRH if needed).
        method: van_walraven (default), sid_30 or sid_29.
        include_cardiac_arrhythmia: Add the CARDARRH term (5 points for
            van_walraven, 8 for sid_30).

    Returns:
        Integer Series aligned with the input rows.

    Raises:
        InvalidArgumentError: Unknown method, missing dataset, or sid_29
            combined with the cardiac arrhythmia term.
        SchemaError: Required columns missing.
        DomainError: Any indicator not coded 0/1.
    """
    score_method = _resolve_arguments(method, include_cardiac_arrhythmia)
    frame = _to_frame(dataset)
    validate_dataset(frame, include_cardiac_arrhythmia)

    indicators = frame.loc[:, list(REQUIRED_COMORBIDITIES)].to_numpy(dtype=np.int64)
    scores = indicators @ _WEIGHT_VECTORS[score_method]

    if include_cardiac_arrhythmia:
        cardiac = frame[CARDIAC_ARRHYTHMIA].to_numpy(dtype=np.int64)
        scores = scores + CARDIAC_ARRHYTHMIA_WEIGHTS[score_method] * cardiac

    logger.debug(
        f"Computed {score_method.value} scores for {len(frame)} rows "
        f"(cardiac arrhythmia: {include_cardiac_arrhythmia})"
    )

    return pd.Series(
        scores,
        index=frame.index,
        name=score_column_name(score_method, include_cardiac_arrhythmia),
        dtype="int64",
    )


def append_scores(
    dataset: Any,
    method: ScoreMethod | str = ScoreMethod.VAN_WALRAVEN,
    include_cardiac_arrhythmia: bool = False,
    column: str | None = None,
) -> pd.DataFrame:
    """Return a copy of the dataset with the composite score appended."""
    _resolve_arguments(method, include_cardiac_arrhythmia)
    frame = _to_frame(dataset)
    scores = compute(frame, method, include_cardiac_arrhythmia)
    result = frame.copy()
    result[column or scores.name] = scores
    return result


def score_patient(
    indicators: Mapping[str, Any],
    method: ScoreMethod | str = ScoreMethod.VAN_WALRAVEN,
    include_cardiac_arrhythmia: bool = False,
) -> ElixhauserScoreResult:
    """Score a single patient and break the score down by comorbidity.

    Args:
        indicators: Mapping of HCUP comorbidity name to 0/1.
        method: Scoring method.
        include_cardiac_arrhythmia: Add the CARDARRH term.

    Returns:
        ElixhauserScoreResult with the non-zero contributions.
    """
    if indicators is None:
        raise InvalidArgumentError("Patient indicators must be specified")

    score_method = _resolve_arguments(method, include_cardiac_arrhythmia)
    score = int(compute([indicators], score_method, include_cardiac_arrhythmia).iloc[0])

    weights = dict(WEIGHTS[score_method])
    if include_cardiac_arrhythmia:
        weights[CARDIAC_ARRHYTHMIA] = CARDIAC_ARRHYTHMIA_WEIGHTS[score_method]

    present = [name for name in weights if int(indicators[name]) == 1]
    components = {name: weights[name] for name in present if weights[name] != 0}

    return ElixhauserScoreResult(
        method=score_method,
        score=score,
        include_cardiac_arrhythmia=include_cardiac_arrhythmia,
        components=components,
        present_comorbidities=present,
    )


# ============================================================================
# Service
# ============================================================================


class ElixhauserScoreService:
    """Service wrapper around the Elixhauser composite score functions."""

    def __init__(self) -> None:
        """Initialize the service."""
        logger.info(
            f"Elixhauser score service initialized with {len(ScoreMethod)} methods "
            f"over {len(REQUIRED_COMORBIDITIES)} comorbidities"
        )

    def get_available_methods(self) -> dict[str, str]:
        """Get available scoring methods with descriptions."""
        return {method.value: METHOD_DESCRIPTIONS[method] for method in ScoreMethod}

    def get_weight_table(self, method: ScoreMethod | str) -> dict[str, int | None]:
        """Get weights for a method, including the cardiac arrhythmia weight.

        The CARDARRH entry is None when the method defines no such term.
        """
        score_method = ScoreMethod.parse(method)
        table: dict[str, int | None] = dict(WEIGHTS[score_method])
        table[CARDIAC_ARRHYTHMIA] = CARDIAC_ARRHYTHMIA_WEIGHTS.get(score_method)
        return table

    def compute(
        self,
        dataset: Any,
        method: ScoreMethod | str = ScoreMethod.VAN_WALRAVEN,
        include_cardiac_arrhythmia: bool = False,
    ) -> pd.Series:
        """Compute scores for every row. See `compute`."""
        return compute(dataset, method, include_cardiac_arrhythmia)

    def append_scores(
        self,
        dataset: Any,
        method: ScoreMethod | str = ScoreMethod.VAN_WALRAVEN,
        include_cardiac_arrhythmia: bool = False,
        column: str | None = None,
    ) -> pd.DataFrame:
        """Return the dataset with a score column. See `append_scores`."""
        return append_scores(dataset, method, include_cardiac_arrhythmia, column)

    def score_patient(
        self,
        indicators: Mapping[str, Any],
        method: ScoreMethod | str = ScoreMethod.VAN_WALRAVEN,
        include_cardiac_arrhythmia: bool = False,
    ) -> ElixhauserScoreResult:
        """Score one patient. See `score_patient`."""
        return score_patient(indicators, method, include_cardiac_arrhythmia)

    def get_stats(self) -> dict[str, Any]:
        """Get statistics about the loaded weight tables."""
        return {
            "total_methods": len(ScoreMethod),
            "method_list": [method.value for method in ScoreMethod],
            "required_comorbidities": len(REQUIRED_COMORBIDITIES),
            "optional_columns": [CARDIAC_ARRHYTHMIA],
        }


# Singleton instance and lock
_elixhauser_score_service: ElixhauserScoreService | None = None
_elixhauser_score_lock = Lock()


def get_elixhauser_score_service() -> ElixhauserScoreService:
    """Get the singleton ElixhauserScoreService instance.

    Returns:
        The singleton ElixhauserScoreService instance.
    """
    global _elixhauser_score_service

    if _elixhauser_score_service is None:
        with _elixhauser_score_lock:
            if _elixhauser_score_service is None:
                logger.info("Creating singleton ElixhauserScoreService instance")
                _elixhauser_score_service = ElixhauserScoreService()

    return _elixhauser_score_service


def reset_elixhauser_score_service() -> None:
    """Reset the singleton instance (for testing)."""
    global _elixhauser_score_service
    with _elixhauser_score_lock:
        _elixhauser_score_service = None

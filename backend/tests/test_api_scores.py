"""Tests for the Elixhauser composite score API endpoints."""

import pytest
from httpx import AsyncClient

SCORES_URL = "/api/v1/elixhauser/scores"
PATIENT_URL = "/api/v1/elixhauser/patient"


def with_present(row: dict, *names: str, **overrides) -> dict:
    """Copy a row with the named comorbidities set to 1."""
    result = dict(row)
    for name in names:
        result[name] = 1
    result.update(overrides)
    return result


class TestComputeScores:
    """Test POST /elixhauser/scores."""

    @pytest.mark.asyncio
    async def test_default_method(self, client: AsyncClient, empty_row: dict) -> None:
        """Test van Walraven is used by default."""
        rows = [with_present(empty_row, "CHF", "DRUG", "METS"), empty_row]
        response = await client.post(SCORES_URL, json={"rows": rows})

        assert response.status_code == 200
        data = response.json()
        assert data["method"] == "van_walraven"
        assert data["include_cardiac_arrhythmia"] is False
        assert data["row_count"] == 2
        assert data["scores"] == [12, 0]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method,expected", [("sid_30", 15), ("sid_29", 14)])
    async def test_selected_method(
        self, client: AsyncClient, empty_row: dict, method: str, expected: int
    ) -> None:
        """Test SID_30 and SID_29 weights."""
        rows = [with_present(empty_row, "CHF", "DRUG", "METS")]
        response = await client.post(SCORES_URL, json={"rows": rows, "method": method})

        assert response.status_code == 200
        assert response.json()["scores"] == [expected]

    @pytest.mark.asyncio
    async def test_cardiac_arrhythmia(self, client: AsyncClient, empty_row: dict) -> None:
        """Test the CARDARRH term is added when requested."""
        rows = [with_present(empty_row, CARDARRH=1)]
        response = await client.post(
            SCORES_URL,
            json={"rows": rows, "method": "van_walraven", "include_cardiac_arrhythmia": True},
        )

        assert response.status_code == 200
        assert response.json()["scores"] == [5]

    @pytest.mark.asyncio
    async def test_sid_29_with_cardiac_arrhythmia_rejected(
        self, client: AsyncClient, empty_row: dict
    ) -> None:
        """Test SID_29 with the CARDARRH term returns 400."""
        rows = [with_present(empty_row, CARDARRH=1)]
        response = await client.post(
            SCORES_URL,
            json={"rows": rows, "method": "sid_29", "include_cardiac_arrhythmia": True},
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_unknown_method_rejected(self, client: AsyncClient, empty_row: dict) -> None:
        """Test an unrecognized method returns 400."""
        response = await client.post(SCORES_URL, json={"rows": [empty_row], "method": "sid30"})

        assert response.status_code == 400
        assert "sid30" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_missing_column_rejected(self, client: AsyncClient, empty_row: dict) -> None:
        """Test a missing column returns 422 listing the expected names."""
        row = dict(empty_row)
        del row["AIDS"]
        response = await client.post(SCORES_URL, json={"rows": [row]})

        assert response.status_code == 422
        detail = response.json()["detail"]
        assert "AIDS (AIDS/HIV)" in detail
        assert "WGHTLOSS (Weight Loss)" in detail

    @pytest.mark.asyncio
    async def test_non_binary_value_rejected(self, client: AsyncClient, empty_row: dict) -> None:
        """Test a non 0/1 value anywhere rejects the whole batch."""
        rows = [empty_row, with_present(empty_row, CHF="yes"), empty_row]
        response = await client.post(SCORES_URL, json={"rows": rows})

        assert response.status_code == 422
        assert "0/1" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_empty_rows_rejected(self, client: AsyncClient) -> None:
        """Test an empty batch fails the column check."""
        response = await client.post(SCORES_URL, json={"rows": []})
        assert response.status_code == 422


class TestScorePatient:
    """Test POST /elixhauser/patient."""

    @pytest.mark.asyncio
    async def test_breakdown(self, client: AsyncClient, empty_row: dict) -> None:
        """Test per-comorbidity contributions are returned."""
        indicators = with_present(empty_row, "LIVER", "OBESE", "ULCER")
        response = await client.post(PATIENT_URL, json={"indicators": indicators})

        assert response.status_code == 200
        data = response.json()
        assert data["score"] == 7
        assert data["score_unit"] == "points"
        assert data["components"] == {"LIVER": 11, "OBESE": -4}
        assert data["present_comorbidities"] == ["LIVER", "OBESE", "ULCER"]

    @pytest.mark.asyncio
    async def test_invalid_patient(self, client: AsyncClient) -> None:
        """Test a patient without the required columns returns 422."""
        response = await client.post(PATIENT_URL, json={"indicators": {"CHF": 1}})
        assert response.status_code == 422


class TestReferenceEndpoints:
    """Test the method and comorbidity listings."""

    @pytest.mark.asyncio
    async def test_list_methods(self, client: AsyncClient) -> None:
        """Test all three methods are listed."""
        response = await client.get("/api/v1/elixhauser/methods")

        assert response.status_code == 200
        methods = {item["method"]: item for item in response.json()}
        assert set(methods) == {"van_walraven", "sid_30", "sid_29"}
        assert methods["van_walraven"]["supports_cardiac_arrhythmia"] is True
        assert methods["sid_29"]["supports_cardiac_arrhythmia"] is False

    @pytest.mark.asyncio
    async def test_list_comorbidities(self, client: AsyncClient) -> None:
        """Test every column is listed with its weights."""
        response = await client.get("/api/v1/elixhauser/comorbidities")

        assert response.status_code == 200
        items = {item["name"]: item for item in response.json()}
        assert len(items) == 30
        assert items["CHF"]["weights"] == {"van_walraven": 7, "sid_30": 9, "sid_29": 9}
        assert items["CHF"]["required"] is True
        assert items["CARDARRH"]["required"] is False
        assert items["CARDARRH"]["weights"] == {"van_walraven": 5, "sid_30": 8, "sid_29": None}

"""Tests for the npi_lookup command line entry point"""

import json
import pytest
from unittest.mock import AsyncMock, patch
from npi_common.errors import InternalError, NoValidInputError
from npi_common.models import DisplayRecord
from npi_lookup.__main__ import main


SUCCESS = DisplayRecord(
    npi="1306849806",
    name="SPRINGFIELD CLINIC LLP",
    entity_type="Organization",
    sex="N/A",
    specialty="Clinic/Center",
    license="N/A",
    license_state="N/A",
    phone="217-555-0100",
    fax="N/A",
    address="123 Main St, Springfield, IL 62704",
    last_updated="November 2, 2019",
)


class TestMain:

    @pytest.mark.asyncio
    async def test_no_arguments(self, capsys):
        assert await main([]) == 1
        assert "Usage" in capsys.readouterr().out

    @pytest.mark.asyncio
    @patch("npi_lookup.__main__.lookup_npis", new_callable=AsyncMock)
    async def test_joins_arguments_and_prints(self, mock_lookup, capsys):
        mock_lookup.return_value = [SUCCESS]

        exit_code = await main(["1306849806", "bad"])

        assert exit_code == 0
        mock_lookup.assert_awaited_once_with("1306849806,bad")
        out = capsys.readouterr().out
        assert "SPRINGFIELD CLINIC LLP" in out
        assert "123 Main St, Springfield, IL 62704" in out

    @pytest.mark.asyncio
    @patch("npi_lookup.__main__.lookup_npis", new_callable=AsyncMock)
    async def test_json_output(self, mock_lookup, capsys):
        mock_lookup.return_value = [SUCCESS, DisplayRecord.failure("1417005489", "Not found")]

        exit_code = await main(["1306849806,1417005489", "--json"])

        assert exit_code == 1
        payload = json.loads(capsys.readouterr().out)
        assert payload["results"][0]["entityType"] == "Organization"
        assert payload["results"][1] == {"npi": "1417005489", "error": "Not found"}

    @pytest.mark.asyncio
    @patch("npi_lookup.__main__.lookup_npis", new_callable=AsyncMock)
    async def test_no_valid_input(self, mock_lookup, capsys):
        mock_lookup.side_effect = NoValidInputError()

        assert await main(["bad"]) == 1
        assert "No valid NPI numbers provided" in capsys.readouterr().out

    @pytest.mark.asyncio
    @patch("npi_lookup.__main__.lookup_npis", new_callable=AsyncMock)
    async def test_internal_error(self, mock_lookup, capsys):
        mock_lookup.side_effect = InternalError()

        assert await main(["1306849806"]) == 1
        assert "Internal server error" in capsys.readouterr().out

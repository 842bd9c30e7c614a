from __future__ import annotations

import pytest

import main
from services.asset_directory import AssetDirectory
from services.converter_session import ConverterSession
from services.rate_converter import RateConverter
from tests.helpers.stub_providers import StubPriceProvider


def _session(directory: AssetDirectory, prices: dict) -> ConverterSession:
    return ConverterSession(RateConverter(directory=directory, provider=StubPriceProvider(prices)))


def test_run_search_prints_labels(directory: AssetDirectory, capsys: pytest.CaptureFixture[str]) -> None:
    assert main.run_search(directory, "ethereum") == 0

    out = capsys.readouterr().out
    assert out.strip() == "ETH — Ethereum  (ethereum)"


def test_run_convert_prints_display_value(directory: AssetDirectory, capsys: pytest.CaptureFixture[str]) -> None:
    session = _session(directory, {"bitcoin": {"usd": 65000}})

    assert main.run_convert(session, "2", "bitcoin", "usd") == 0
    assert capsys.readouterr().out.strip() == "130000.000000 USD"


def test_run_convert_reports_failure_on_stderr(directory: AssetDirectory, capsys: pytest.CaptureFixture[str]) -> None:
    session = _session(directory, {})

    assert main.run_convert(session, "2", "bitcoin", "usd") == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "Conversion failed" in captured.err


def test_fiats_command_lists_codes(capsys: pytest.CaptureFixture[str]) -> None:
    assert main.main(["fiats"]) == 0

    assert capsys.readouterr().out.split() == ["USD", "EUR", "UZS", "RUB", "GBP", "TRY", "KZT"]

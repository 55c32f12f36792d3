"""Tests for environment-driven settings."""

import pytest

from core import config
from core.config import Settings

ENV_VARS = [
    "STOCK_WAREHOUSE_CODE",
    "STOCK_TRANSFER_AREA_PREFIX",
    "STOCK_TRANSFER_LOCATION_PREFIX",
    "STOCK_DIFF_MOVEMENTS",
    "STOCK_SHRINKAGE_MOVEMENT",
    "STOCK_EXPIRY_MOVEMENT",
    "STOCK_UNDEFINED_CENTRO",
    "STOCK_LOG_LEVEL",
    "OPENAI_MODEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.setattr(config, "load_dotenv", lambda: False)
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = Settings.from_env()

    assert settings == Settings()
    assert settings.warehouse_code == "PT01"
    assert settings.inventory_difference_movements == ("Z59", "Z60", "Z65", "Z66")
    assert settings.undefined_centro == "INDEFINIDO"


def test_overrides(monkeypatch):
    monkeypatch.setenv("STOCK_WAREHOUSE_CODE", " pt02 ")
    monkeypatch.setenv("STOCK_TRANSFER_AREA_PREFIX", "area despacho")
    monkeypatch.setenv("STOCK_DIFF_MOVEMENTS", "z59, Z61,,")
    monkeypatch.setenv("STOCK_SHRINKAGE_MOVEMENT", "z43")
    monkeypatch.setenv("STOCK_LOG_LEVEL", "debug")
    monkeypatch.setenv("OPENAI_MODEL", "gpt-4o")

    settings = Settings.from_env()

    assert settings.warehouse_code == "PT02"
    assert settings.transfer_area_prefix == "AREA DESPACHO"
    assert settings.inventory_difference_movements == ("Z59", "Z61")
    assert settings.shrinkage_movement == "Z43"
    assert settings.log_level == "DEBUG"
    assert settings.openai_model == "gpt-4o"


def test_direct_construction_is_normalised():
    settings = Settings(
        warehouse_code=" pt01",
        transfer_area_prefix="area stage",
        transfer_location_prefix=" 7 ",
        inventory_difference_movements=["z59", " Z60 ", ""],
        shrinkage_movement="z42",
        expiry_movement="z44 ",
        log_level="debug",
    )

    assert settings.warehouse_code == "PT01"
    assert settings.transfer_area_prefix == "AREA STAGE"
    assert settings.transfer_location_prefix == "7"
    assert settings.inventory_difference_movements == ("Z59", "Z60")
    assert settings.shrinkage_movement == "Z42"
    assert settings.expiry_movement == "Z44"
    assert settings.log_level == "DEBUG"

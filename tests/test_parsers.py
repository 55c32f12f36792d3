"""Tests for header resolution and cell parsing."""

import math

import numpy as np
import pandas as pd
import pytest

from core.parsers import (
    AREA_SYNONYMS,
    QTY_SYNONYMS,
    SKU_SYNONYMS,
    WAREHOUSE_SYNONYMS,
    HeaderResolver,
    QuantityParser,
    clean_text,
    find_header,
    parse_quantity,
)


class TestFindHeader:
    def test_exact_match_returns_original_label(self):
        assert find_header(["  Material ", "Centro"], SKU_SYNONYMS) == "  Material "

    def test_whitespace_is_collapsed(self):
        assert find_header(["Libre   utilización"], QTY_SYNONYMS) == "Libre   utilización"

    def test_exact_match_wins_over_earlier_partial(self):
        # "Stock para Traslado" contains "stock" but "Cantidad" is an exact synonym
        columns = ["Stock para Traslado", "Cantidad"]
        assert find_header(columns, QTY_SYNONYMS) == "Cantidad"

    def test_synonym_order_decides_between_exact_matches(self):
        assert find_header(["Cantidad", "Quantity"], QTY_SYNONYMS) == "Quantity"

    def test_partial_match_fallback(self):
        assert find_header(["Código de material"], SKU_SYNONYMS) == "Código de material"

    def test_accented_and_plain_variants(self):
        assert find_header(["Área"], AREA_SYNONYMS) == "Área"
        assert find_header(["Almacen"], WAREHOUSE_SYNONYMS) == "Almacen"

    def test_area_sap_preferred_for_warehouse(self):
        columns = ["Área", "AREA SAP", "Ubicación"]
        assert find_header(columns, WAREHOUSE_SYNONYMS) == "AREA SAP"
        assert find_header(columns, AREA_SYNONYMS) == "Área"

    def test_no_match(self):
        assert find_header(["Fecha", "Lote"], SKU_SYNONYMS) is None

    def test_empty_columns(self):
        assert find_header([], SKU_SYNONYMS) is None

    def test_non_string_labels(self):
        assert find_header([0, 1, "SKU"], SKU_SYNONYMS) == "SKU"


def test_header_resolver_resolves_frame_and_reports_missing():
    df = pd.DataFrame(columns=["Material", "Fecha"])
    resolver = HeaderResolver({"sku": SKU_SYNONYMS, "qty": QTY_SYNONYMS})

    headers = resolver.resolve(df)

    assert headers == {"sku": "Material", "qty": None}
    assert HeaderResolver.missing(headers, ["sku", "qty"]) == ["qty"]


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, ""),
        (float("nan"), ""),
        (pd.NA, ""),
        ("  1001 ", "1001"),
        (1001, "1001"),
        (1001.0, "1001"),
        (12.5, "12.5"),
        (np.int64(7), "7"),
    ],
)
def test_clean_text(value, expected):
    assert clean_text(value) == expected


@pytest.mark.parametrize(
    "value, expected",
    [
        (12, 12.0),
        (np.float64(3.5), 3.5),
        ("1,234.5", 1234.5),
        ("-40", -40.0),
        ("12 UN", 12.0),
        ("  7", 7.0),
        (".5", 0.5),
        ("1e3", 1000.0),
    ],
)
def test_parse_quantity_numbers(value, expected):
    assert parse_quantity(value) == expected


@pytest.mark.parametrize(
    "value", [None, float("nan"), "", "n/a", "UN 12", True, "Infinity", "-inf", "NaN"]
)
def test_parse_quantity_rejects(value):
    assert parse_quantity(value) is None


def test_parse_series_gives_nan_for_bad_cells():
    parsed = QuantityParser().parse_series(pd.Series(["1,000", "abc", None, 5], dtype=object))

    assert parsed.dtype == float
    assert parsed.iloc[0] == 1000.0
    assert math.isnan(parsed.iloc[1])
    assert math.isnan(parsed.iloc[2])
    assert parsed.iloc[3] == 5.0

"""
Reusable parsers for SAP and WMS spreadsheet exports.

These parsers handle the messy reality of stock extracts:
- The same column is called differently depending on who exported it
  ("Material", "SKU", "Código", ...)
- Quantities come as numbers, as text with thousands separators, or with units
- Codes typed as numbers come back as floats ("123.0")
"""

import numbers
import re
import numpy as np
import pandas as pd


# Header synonyms per column role, ordered by preference.
SKU_SYNONYMS = [
    "sku",
    "material",
    "código",
    "codigo",
    "cód",
    "cod",
    "item",
    "producto",
    "product id",
    "artículo",
    "articulo",
    "referencia",
    "ref",
    "número de artículo",
    "numero de articulo",
]
QTY_SYNONYMS = [
    "unrestrictedstock",
    "libre utilización",
    "ctd.en um entrada",
    "quantity",
    "unrestricted",
    "cantidad",
    "cant",
    "stock",
    "existencia",
    "existencias",
    "qty",
    "on hand",
    "disponible",
    "stock sap",
    "stock wms",
    "ajuste",
    "ajustes",
]
AREA_SYNONYMS = ["area", "área"]
WAREHOUSE_SYNONYMS = ["area sap", "almacén", "almacen", "storage location"]
LOCATION_SYNONYMS = ["ubicación", "ubicacion", "bin", "location"]
CENTRO_SYNONYMS = ["centro", "center", "plant"]
PRODUCT_NAME_SYNONYMS = [
    "nombre prod",
    "nombre producto",
    "product name",
    "descripción",
    "descripcion",
    "description",
    "texto breve de material",
]
MOVEMENT_CLASS_SYNONYMS = ["clase de movimiento", "clase mov", "cl. mov."]


def normalize_header(label) -> str:
    """Lowercase, trim and collapse whitespace so headers compare equal."""
    return re.sub(r"\s+", " ", str(label).lower().strip())


def find_header(columns, synonyms: list[str]) -> str | None:
    """
    Find the column matching any of the synonyms.

    Exact matches win over partial ones; within each pass the synonym order
    decides, then the column order. Returns the original column label.
    """
    columns = list(columns)
    if not columns:
        return None

    normalized = [normalize_header(c) for c in columns]
    cleaned = [normalize_header(s) for s in synonyms]

    for synonym in cleaned:
        for idx, key in enumerate(normalized):
            if key == synonym:
                return columns[idx]

    # Fallback for partial matches
    for synonym in cleaned:
        for idx, key in enumerate(normalized):
            if synonym in key:
                return columns[idx]

    return None


class HeaderResolver:
    """
    Resolves a set of column roles against a DataFrame's headers.

    Usage:
        resolver = HeaderResolver({"sku": SKU_SYNONYMS, "qty": QTY_SYNONYMS})
        headers = resolver.resolve(df)  # {"sku": "Material", "qty": None}
    """

    def __init__(self, roles: dict[str, list[str]]):
        self.roles = roles

    def resolve(self, df: pd.DataFrame) -> dict[str, str | None]:
        return {
            role: find_header(df.columns, synonyms)
            for role, synonyms in self.roles.items()
        }

    @staticmethod
    def missing(headers: dict[str, str | None], required: list[str]) -> list[str]:
        """Return the required roles that did not resolve."""
        return [role for role in required if not headers.get(role)]


def clean_text(value) -> str:
    """Render a cell as trimmed text; blanks become an empty string."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if not isinstance(value, str) and pd.isna(value):
        return ""
    return str(value).strip()


def clean_text_series(series: pd.Series) -> pd.Series:
    """Apply clean_text to a whole column."""
    return series.map(clean_text).astype(object)


class QuantityParser:
    """
    Lenient quantity parser.

    Thousands separators are removed and the leading number is taken,
    so "1,234.5" -> 1234.5 and "12 UN" -> 12. Text with no leading
    number parses to None and the row is skipped by the reconciler.
    Spelled-out values such as "Infinity" or "NaN" are not quantities
    either, even though float() would accept them.
    """

    LEADING_NUMBER = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")

    def __init__(self):
        self._cache: dict[str, float | None] = {}

    def parse(self, value) -> float | None:
        if value is None or isinstance(value, (bool, np.bool_)):
            return None
        if isinstance(value, numbers.Number):
            if pd.isna(value):
                return None
            return float(value)
        if not isinstance(value, str) and pd.isna(value):
            return None

        text = str(value).replace(",", "")
        if text in self._cache:
            return self._cache[text]

        match = self.LEADING_NUMBER.match(text)
        result = float(match.group(1)) if match else None
        self._cache[text] = result
        return result

    def parse_series(self, series: pd.Series) -> pd.Series:
        """Parse an entire column; unparseable cells become NaN."""
        return pd.to_numeric(series.map(self.parse), errors="coerce").astype(float)


def parse_quantity(value) -> float | None:
    """Parse a single quantity cell."""
    return QuantityParser().parse(value)

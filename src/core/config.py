"""
Runtime settings for the reconciliation.

Defaults match the SAP/WMS conventions of the CD8000 distribution centre.
Any of them can be overridden with environment variables (or a .env file).
"""

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv


def env_get(key: str, default: str | None = None) -> str | None:
    """Get environment variable or return default."""
    return os.getenv(key, default)


def _split_codes(value: str) -> tuple[str, ...]:
    return tuple(code.strip().upper() for code in value.split(",") if code.strip())


@dataclass(frozen=True)
class Settings:
    """Business rules and runtime options for one reconciliation run."""

    # Storage location that both systems are compared on
    warehouse_code: str = "PT01"
    # WMS rows in this area and a location starting with the prefix are staged for transfer
    transfer_area_prefix: str = "AREA STAGE"
    transfer_location_prefix: str = "7"
    # SAP movement classes
    inventory_difference_movements: tuple[str, ...] = ("Z59", "Z60", "Z65", "Z66")
    shrinkage_movement: str = "Z42"
    expiry_movement: str = "Z44"
    undefined_centro: str = "INDEFINIDO"
    chart_colors: tuple[str, ...] = field(
        default=("#3498db", "#2ecc71", "#e74c3c", "#f39c12", "#9b59b6")
    )
    log_level: str = "INFO"
    openai_model: str = "gpt-4o-mini"

    def __post_init__(self):
        # Extract values are compared upper-cased against these
        for name in (
            "warehouse_code",
            "transfer_area_prefix",
            "shrinkage_movement",
            "expiry_movement",
            "log_level",
        ):
            object.__setattr__(self, name, getattr(self, name).strip().upper())
        object.__setattr__(
            self, "transfer_location_prefix", self.transfer_location_prefix.strip()
        )
        object.__setattr__(
            self,
            "inventory_difference_movements",
            _split_codes(",".join(self.inventory_difference_movements)),
        )

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the environment, loading .env first."""
        load_dotenv()
        defaults = cls()
        return cls(
            warehouse_code=env_get("STOCK_WAREHOUSE_CODE", defaults.warehouse_code),
            transfer_area_prefix=env_get(
                "STOCK_TRANSFER_AREA_PREFIX", defaults.transfer_area_prefix
            ),
            transfer_location_prefix=env_get(
                "STOCK_TRANSFER_LOCATION_PREFIX", defaults.transfer_location_prefix
            ),
            inventory_difference_movements=_split_codes(
                env_get(
                    "STOCK_DIFF_MOVEMENTS",
                    ",".join(defaults.inventory_difference_movements),
                )
            ),
            shrinkage_movement=env_get(
                "STOCK_SHRINKAGE_MOVEMENT", defaults.shrinkage_movement
            ),
            expiry_movement=env_get("STOCK_EXPIRY_MOVEMENT", defaults.expiry_movement),
            undefined_centro=env_get("STOCK_UNDEFINED_CENTRO", defaults.undefined_centro),
            log_level=env_get("STOCK_LOG_LEVEL", defaults.log_level),
            openai_model=env_get("OPENAI_MODEL", defaults.openai_model),
        )

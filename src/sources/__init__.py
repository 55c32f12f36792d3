# Source-system adapters
# Each module contains the logic specific to one pair of stock exports

from .sap_wms_client import SapWmsLoader, LoadedExtracts, read_extract, read_base64_extract
from .stock_analysis import AnalysisOutput, generate_analysis_file

__all__ = [
    "SapWmsLoader",
    "LoadedExtracts",
    "read_extract",
    "read_base64_extract",
    "AnalysisOutput",
    "generate_analysis_file",
]

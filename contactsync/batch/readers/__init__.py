"""
Upload file readers.
"""

from .csv_reader import CSVReader
from .file_reader import SUPPORTED_FORMATS, FileReader, detect_format
from .xlsx_reader import XLSXReader

__all__ = [
    "CSVReader",
    "FileReader",
    "SUPPORTED_FORMATS",
    "XLSXReader",
    "detect_format",
]

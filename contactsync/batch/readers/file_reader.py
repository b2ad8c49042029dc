"""
Upload file reader dispatching on the original file extension.
"""

from pathlib import Path
from typing import Any, Callable

from pyspark.sql import SparkSession

from contactsync.core.errors import UnsupportedFileFormatError

from .csv_reader import CSVReader
from .xlsx_reader import XLSXReader

SUPPORTED_FORMATS = ("csv", "xlsx")


def detect_format(original_name: str) -> str:
    """
    Format from the uploaded file's original name.

    Raises:
        UnsupportedFileFormatError: If the extension is not .csv or .xlsx
    """
    suffix = Path(original_name or "").suffix.lower().lstrip(".")
    if suffix not in SUPPORTED_FORMATS:
        raise UnsupportedFileFormatError(original_name)
    return suffix


class FileReader:
    """
    Reads uploaded files into raw row dictionaries.

    CSV goes through Spark; the session is built lazily on the first CSV
    read when none was injected.
    """

    def __init__(
        self,
        spark: SparkSession | None = None,
        spark_factory: Callable[[], SparkSession] | None = None,
    ):
        """
        Args:
            spark: Active Spark session (optional)
            spark_factory: Builds a session on demand when ``spark`` is None
        """
        self._spark = spark
        self._spark_factory = spark_factory
        self.xlsx_reader = XLSXReader()

    @property
    def spark(self) -> SparkSession:
        if self._spark is None:
            if self._spark_factory is None:
                from contactsync.batch.spark import create_spark_session

                self._spark_factory = create_spark_session
            self._spark = self._spark_factory()
        return self._spark

    def read(self, file_path: str, file_format: str) -> list[dict[str, Any]]:
        """
        Read file rows.

        Args:
            file_path: Path to the stored upload
            file_format: "csv" or "xlsx"

        Raises:
            UnsupportedFileFormatError: If file format is unsupported
        """
        if file_format == "csv":
            return CSVReader(self.spark).read_rows(file_path)
        elif file_format == "xlsx":
            return self.xlsx_reader.read_rows(file_path)
        else:
            raise UnsupportedFileFormatError(file_path)

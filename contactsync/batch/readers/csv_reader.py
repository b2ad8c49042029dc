"""
CSV reader using Spark.
"""

from typing import Any

from pyspark.sql import DataFrame, SparkSession


class CSVReader:
    """
    Reads contact CSV files with Spark. Every column is read as a string;
    no schema inference, since the canonical schema is all text.
    """

    def __init__(self, spark: SparkSession):
        """
        Initialize CSV reader.

        Args:
            spark: Active Spark session
        """
        self.spark = spark

    def read(
        self,
        file_path: str,
        header: bool = True,
        delimiter: str = ",",
        encoding: str = "UTF-8",
    ) -> DataFrame:
        """
        Read CSV file into Spark DataFrame.

        Args:
            file_path: Path to CSV file
            header: Whether CSV has header row
            delimiter: Field delimiter
            encoding: File encoding

        Returns:
            Spark DataFrame
        """
        return self.spark.read \
            .option("header", str(header).lower()) \
            .option("inferSchema", "false") \
            .option("delimiter", delimiter) \
            .option("encoding", encoding) \
            .option("multiLine", "true") \
            .option("escape", '"') \
            .option("mode", "PERMISSIVE") \
            .csv(file_path)

    def read_rows(self, file_path: str, **options) -> list[dict[str, Any]]:
        """
        Read a CSV file and collect it to row dictionaries in file order.
        """
        df = self.read(file_path, **options)
        return [row.asDict() for row in df.collect()]

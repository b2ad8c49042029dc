"""
Spark session construction for upload parsing.
"""

import os

from pyspark.sql import SparkSession


def create_spark_session(app_name: str = "contactsync-ingest") -> SparkSession:
    """
    Create (or reuse) a local Spark session.

    Args:
        app_name: Application name

    Returns:
        SparkSession
    """
    master = os.getenv("SPARK_MASTER", "local[*]")
    return SparkSession.builder \
        .appName(app_name) \
        .master(master) \
        .config("spark.ui.enabled", "false") \
        .config("spark.sql.adaptive.enabled", "true") \
        .config("spark.sql.adaptive.coalescePartitions.enabled", "true") \
        .getOrCreate()

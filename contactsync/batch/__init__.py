"""
Upload ingestion: readers, duplicate detection, reporting and the pipeline.
"""

from .dedup import DuplicateDetector, DuplicateReport, distinct_keys, find_in_batch_duplicates
from .pipeline import IngestionPipeline, IngestionResult
from .report_recorder import RecordedReport, UploadReportRecorder

__all__ = [
    "DuplicateDetector",
    "DuplicateReport",
    "IngestionPipeline",
    "IngestionResult",
    "RecordedReport",
    "UploadReportRecorder",
    "distinct_keys",
    "find_in_batch_duplicates",
]

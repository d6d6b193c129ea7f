"""
Bulk export of the conversation history.
"""

from .csv_export import EXPORT_COLUMNS, ExportArtifact, ExportJob, serialize_csv

__all__ = ["EXPORT_COLUMNS", "ExportArtifact", "ExportJob", "serialize_csv"]

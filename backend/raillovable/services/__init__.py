"""
Services module for RailLovable.
"""
from .export import ProjectExporter, ZipProjectExporter, archive_filename, get_exporter

__all__ = [
    "ProjectExporter",
    "ZipProjectExporter",
    "archive_filename",
    "get_exporter",
]

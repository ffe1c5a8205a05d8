"""
AuditScope Utils Package

This package contains utility functions and helper modules:
- Logging: Structured logging with JSON support
- HTTP Client: Timed JSON fetches
- File Utils: Source and JSON file access
- Report Generator: Render estimate reports
"""

from .file_utils import read_json, read_source, write_text
from .http_client import HTTPClient
from .logger import get_logger, setup_logger
from .report_generator import generate_report

__all__ = [
    'get_logger',
    'setup_logger',
    'HTTPClient',
    'read_json',
    'read_source',
    'write_text',
    'generate_report',
]

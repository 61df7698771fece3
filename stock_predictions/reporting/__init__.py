"""Report writers for prediction runs."""

from .html_report import build_html
from .report_generator import ReportGenerator

__all__ = ["ReportGenerator", "build_html"]

"""Report generation for AuditScope estimates."""
import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional, Type, TypeVar, Union

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from .file_utils import write_text
from .logger import get_logger

ReportData = Dict[str, Any]

T = TypeVar('T', bound='BaseReportExporter')

TEMPLATES_DIR = Path(__file__).parent / 'templates'


def format_hours(value: float) -> str:
    """Render hours without a trailing ``.0`` for whole numbers."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return f"{value:.2f}".rstrip('0').rstrip('.')


class BaseReportExporter(ABC):
    """Base class for all report exporters."""

    suffix = '.txt'

    def __init__(self):
        self.logger = get_logger(f"exporter.{self.__class__.__name__}")

    @abstractmethod
    def render(self, data: ReportData) -> str:
        """Render the report data to text."""

    def export(self, data: ReportData, output_path: Optional[Union[str, Path]] = None) -> Union[str, Path]:
        """Export the report data.

        Args:
            data: Report data (``EstimateResult.to_dict()``)
            output_path: Optional path to save the report

        Returns:
            The rendered report, or the path of the written file
        """
        content = self.render(data)
        if output_path:
            path = write_text(content, Path(output_path).with_suffix(self.suffix))
            self.logger.debug("Report written to %s", path)
            return path
        return content

    @classmethod
    def create(cls: Type[T], format: str) -> 'BaseReportExporter':
        """Create an exporter instance for the specified format.

        Raises:
            ValueError: If the format is not supported
        """
        if format == 'json':
            return JSONExporter()
        elif format == 'markdown':
            return TemplateExporter('report.md.j2', '.md')
        elif format == 'text':
            return TemplateExporter('report.txt.j2', '.txt')
        else:
            raise ValueError(f"Unsupported export format: {format}")


class JSONExporter(BaseReportExporter):
    """Exports reports in JSON format."""

    suffix = '.json'

    def render(self, data: ReportData) -> str:
        return json.dumps(data, indent=2, ensure_ascii=False)


class TemplateExporter(BaseReportExporter):
    """Exports reports through a Jinja2 template."""

    def __init__(self, template_name: str, suffix: str):
        super().__init__()
        self.suffix = suffix
        self.env = Environment(
            loader=FileSystemLoader(TEMPLATES_DIR),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
        )
        self.env.filters['hours'] = format_hours
        self.template = self.env.get_template(template_name)

    def render(self, data: ReportData) -> str:
        return self.template.render(**data)


def generate_report(
    data: ReportData,
    output_path: Optional[Union[str, Path]] = None,
    format: str = 'text'
) -> Union[str, Path]:
    """Generate a report in the specified format.

    Args:
        data: Report data to include
        output_path: Path to save the report (optional)
        format: Output format ('text', 'json' or 'markdown')

    Returns:
        The generated report, or the path it was written to
    """
    exporter = BaseReportExporter.create(format)
    return exporter.export(data, output_path)

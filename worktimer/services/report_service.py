"""
Report Generation Service using Jinja2 templates.

Architecture Decision: Template Pattern
Allows users to customize reports without changing code.
"""

import datetime
from pathlib import Path
from typing import Optional
from jinja2 import Environment, FileSystemLoader

from worktimer.services.statistics_service import StatisticsOverview
from worktimer.utils import format_duration, get_resource_path


class ReportService:
    """
    Renders statistics into text reports using Jinja2 templates.
    """

    DEFAULT_TEMPLATE = "summary_report.txt"

    def __init__(self, template_dir: Optional[Path] = None):
        """
        Initialize the report service.

        Args:
            template_dir: Directory containing Jinja2 templates
        """
        if template_dir is None:
            template_dir = get_resource_path("resources/templates")

        self.template_dir = Path(template_dir)

        # Setup Jinja2 environment
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            trim_blocks=True,
            lstrip_blocks=True
        )

        # Add custom filters
        self.env.filters['format_duration'] = format_duration
        self.env.filters['format_date'] = self._format_date

    @staticmethod
    def _format_date(dt: datetime.datetime, fmt: str = "%Y-%m-%d %H:%M:%S") -> str:
        """Format datetime object"""
        return dt.strftime(fmt)

    def render_summary(self, overview: StatisticsOverview,
                       template_name: Optional[str] = None,
                       output_file: Optional[Path] = None) -> str:
        """
        Render the statistics overview.

        Args:
            overview: Figures from StatisticsService.overview()
            template_name: Template file name (defaults to summary_report.txt)
            output_file: Optional file path to save the report

        Returns:
            The rendered report
        """
        template = self.env.get_template(template_name or self.DEFAULT_TEMPLATE)
        content = template.render(stats=overview)

        if output_file:
            output_file.parent.mkdir(parents=True, exist_ok=True)
            with open(output_file, 'w', encoding='utf-8') as f:
                f.write(content)

        return content

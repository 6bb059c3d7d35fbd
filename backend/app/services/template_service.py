# backend/app/services/template_service.py
"""
Template rendering service for Courtside.

Renders the Jinja2 email templates under ``app/templates`` with a shared
context (brand name, frontend URL, year).
"""

from datetime import datetime
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from jinja2 import Environment, FileSystemLoader, TemplateNotFound

from ..core.config import settings
from ..core.constants import BRAND_NAME

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent.parent / "templates"


def currency(value: Any) -> str:
    """Format a number as currency."""
    return f"${float(value):,.2f}"


def format_date(value: Any, format_str: str = "%B %d, %Y") -> str:
    if isinstance(value, str):
        return value
    return value.strftime(format_str)


def format_time(value: Any, format_str: str = "%H:%M") -> str:
    if isinstance(value, str):
        return value
    return value.strftime(format_str)


class TemplateService:
    """
    Jinja2 rendering for outbound email.

    Not a ``BaseService``: it never touches the database.
    """

    def __init__(self, template_dir: Optional[Path] = None):
        self.template_dir = template_dir or TEMPLATE_DIR
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["currency"] = currency
        self.env.filters["format_date"] = format_date
        self.env.filters["format_time"] = format_time
        self.logger = logging.getLogger(self.__class__.__name__)

    def get_common_context(self) -> Dict[str, Any]:
        return {
            "brand_name": BRAND_NAME,
            "current_year": datetime.now().year,
            "frontend_url": settings.frontend_url,
        }

    def render_template(
        self, template_name: str, context: Optional[Dict[str, Any]] = None, **kwargs
    ) -> str:
        """
        Render a template relative to the templates directory.

        Raises:
            TemplateNotFound: If the template doesn't exist
        """
        full_context = self.get_common_context()
        if context:
            full_context.update(context)
        full_context.update(kwargs)
        try:
            template = self.env.get_template(template_name)
        except TemplateNotFound:
            self.logger.error(f"Template not found: {template_name}")
            raise
        return template.render(full_context)


"""
Email template loader and renderer.
Handles Jinja2 templates for marketplace email notifications.
"""

import logging
import re
from typing import Dict, Any
from pathlib import Path
from jinja2 import Environment, FileSystemLoader, TemplateNotFound
from datetime import datetime

from app.config import settings

logger = logging.getLogger(__name__)


class EmailTemplateLoader:
    """Loads and renders email templates using Jinja2."""
    
    def __init__(self, templates_dir: Path = None):
        """Initialize template loader with email templates directory."""
        self.templates_dir = templates_dir or Path(__file__).parent / "templates"
        
        # Create Jinja2 environment
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=True
        )
        
        # Register custom filters
        self._register_filters()
    
    def _register_filters(self):
        """Register custom Jinja2 filters for email templates."""
        
        def format_date(value, format="%b %d, %Y"):
            """Format date value."""
            if isinstance(value, str):
                try:
                    value = datetime.fromisoformat(value.replace("Z", "+00:00"))
                except ValueError:
                    return value
            if isinstance(value, datetime):
                return value.strftime(format)
            return str(value)
        
        def humanize(value):
            """pending_approval -> Pending approval."""
            return str(value).replace("_", " ").capitalize()
        
        self.env.filters["date"] = format_date
        self.env.filters["humanize"] = humanize
    
    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """
        Render email template with context.
        
        Args:
            template_name: Name of template file (e.g., 'application_reviewed.html')
            context: Template context variables
            
        Returns:
            Rendered template content
            
        Raises:
            TemplateNotFound: If the template file does not exist
        """
        # Add default context variables
        enhanced_context = {
            **context,
            "current_year": datetime.now().year,
            "app_name": settings.email_from_name,
            "frontend_url": settings.frontend_url
        }
        
        template = self.env.get_template(template_name)
        rendered = template.render(**enhanced_context)
        logger.debug(f"Successfully rendered template: {template_name}")
        return rendered
    
    def render_pair(self, template_name: str, context: Dict[str, Any]) -> tuple[str, str]:
        """Render the HTML and plain text versions of a template."""
        html_content = self.render_template(f"{template_name}.html", context)
        try:
            text_content = self.render_template(f"{template_name}.txt", context)
        except TemplateNotFound:
            text_content = self._strip_tags(html_content)
        return html_content, text_content
    
    @staticmethod
    def _strip_tags(html_content: str) -> str:
        return re.sub(r'<[^>]+>', '', html_content)
    
    def list_templates(self) -> list[str]:
        """List all available email templates."""
        return sorted(path.name for path in self.templates_dir.glob("*.html"))

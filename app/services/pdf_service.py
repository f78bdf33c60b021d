"""
PDF Service
Renders certificate HTML templates (Jinja2) to PDF (xhtml2pdf)
"""

import asyncio
from io import BytesIO
from typing import Optional

from jinja2 import Environment, FileSystemLoader, TemplateNotFound, select_autoescape
from xhtml2pdf import pisa

from app.config import settings
from app.logging_config import get_logger
from app.services.exceptions import RenderError, RenderTimeoutError
from app.services.template_registry import get_template_dir

logger = get_logger("PDF")


class PdfService:
    """HTML template -> PDF bytes, one document per call"""

    def __init__(self, template_dir: Optional[str] = None, timeout: Optional[float] = None):
        self.environment = Environment(
            loader=FileSystemLoader(str(template_dir or get_template_dir())),
            autoescape=select_autoescape(enabled_extensions=("html", "xml")),
        )
        self.timeout = timeout if timeout is not None else settings.PDF_RENDER_TIMEOUT_SECONDS

    def render_html(self, template_name: str, fields: dict) -> str:
        try:
            template = self.environment.get_template(template_name)
        except TemplateNotFound as e:
            raise RenderError(f"Certificate template not found: {template_name}") from e
        return template.render(**fields)

    @staticmethod
    def html_to_pdf(html_content: str) -> bytes:
        output = BytesIO()
        result = pisa.CreatePDF(src=html_content, dest=output, encoding="utf-8")
        if getattr(result, "err", 0):
            raise RenderError("Failed to generate certificate PDF")
        return output.getvalue()

    async def render(self, template_name: str, fields: dict) -> bytes:
        """
        Render a certificate PDF

        Args:
            template_name: Template filename (e.g. certificate-default.html)
            fields: Values substituted into the template

        Returns:
            PDF bytes

        Raises:
            RenderTimeoutError: Rendering exceeded the configured timeout
            RenderError: Any other rendering failure
        """
        certificate_number = fields.get("certificate_number")
        logger.info("Starting PDF generation", extra={"data": {
            "certificateNumber": certificate_number,
            "template": template_name,
        }})

        try:
            html_content = self.render_html(template_name, fields)
            # A timed-out conversion keeps its worker thread until pisa returns
            pdf_bytes = await asyncio.wait_for(
                asyncio.to_thread(self.html_to_pdf, html_content),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            logger.error("PDF generation timed out", extra={"data": {"certificateNumber": certificate_number}})
            raise RenderTimeoutError("PDF generation timed out. Please try again.") from e
        except RenderError:
            raise
        except Exception as e:
            logger.error("PDF generation failed", extra={"data": {
                "certificateNumber": certificate_number,
                "error": str(e),
            }})
            raise RenderError(f"Failed to generate certificate PDF: {e}") from e

        logger.info("PDF generated", extra={"data": {
            "certificateNumber": certificate_number,
            "size": f"{len(pdf_bytes) / 1024:.2f} KB",
        }})
        return pdf_bytes


pdf_service = PdfService()

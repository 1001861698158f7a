"""PDF exporter: the HTML document printed by a headless browser.

The browser is reached through the narrow ``PDFRenderer`` interface so the
exporter can be exercised with any renderer. ``PlaywrightRenderer`` is the
default and drives headless Chromium.
"""

from __future__ import annotations

import base64
import html
import logging
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from forge_export.export.base import Clock
from forge_export.export.errors import ExportExecutionError
from forge_export.export.html_document import HTMLExporter, style_preset
from forge_export.export.types import ExportOptions, SelectedContent
from forge_export.personas import PersonaRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PageSetup:
    """Print settings passed to the renderer."""

    format: str = "A4"
    margin: str = "0.5in"
    header_template: str = ""
    footer_template: str = ""
    print_background: bool = True

    @property
    def display_header_footer(self) -> bool:
        return bool(self.header_template or self.footer_template)


@runtime_checkable
class PDFRenderer(Protocol):
    """Turns an HTML document into PDF bytes."""

    async def render(self, html: str, page: PageSetup | None = None) -> bytes: ...


class PlaywrightRenderer:
    """Render HTML to PDF with a headless Playwright browser.

    A browser is launched per call and always closed afterwards. Only
    Chromium supports PDF printing in Playwright.

    Args:
        browser: Playwright browser type name.
        timeout_ms: Timeout for loading the document.
    """

    def __init__(self, browser: str = "chromium", timeout_ms: int = 30000) -> None:
        self.browser = browser
        self.timeout_ms = timeout_ms

    async def render(self, html: str, page: PageSetup | None = None) -> bytes:
        try:
            from playwright.async_api import async_playwright
        except ImportError as e:
            msg = "playwright is not installed: pip install playwright && playwright install chromium"
            raise ExportExecutionError(msg) from e

        setup = page or PageSetup()
        margin = setup.margin

        async with async_playwright() as pw:
            browser_type = getattr(pw, self.browser)
            browser = await browser_type.launch(headless=True)
            try:
                pdf_page = await browser.new_page()
                await pdf_page.set_content(html, wait_until="networkidle", timeout=self.timeout_ms)
                logger.debug("Printing %d bytes of HTML with %s", len(html), self.browser)
                return await pdf_page.pdf(
                    format=setup.format,
                    margin={"top": margin, "bottom": margin, "left": margin, "right": margin},
                    print_background=setup.print_background,
                    display_header_footer=setup.display_header_footer,
                    header_template=setup.header_template,
                    footer_template=setup.footer_template,
                )
            finally:
                await browser.close()


class PDFExporter(HTMLExporter):
    """Export selected session content to PDF.

    The result content is the base64 encoding of the PDF bytes.

    Args:
        personas: Registry used to resolve agent display names.
        clock: Returns the current time.
        renderer: HTML to PDF renderer. Defaults to ``PlaywrightRenderer``.
    """

    format = "pdf"
    mime_type = "application/pdf"
    extension = "pdf"
    display_name = "PDF"

    def __init__(
        self,
        personas: PersonaRegistry | None = None,
        clock: Clock | None = None,
        renderer: PDFRenderer | None = None,
    ) -> None:
        super().__init__(personas=personas, clock=clock)
        self.renderer = renderer if renderer is not None else PlaywrightRenderer()

    async def render(self, content: SelectedContent, options: ExportOptions) -> str:
        document = self.render_html(content, options)
        pdf_bytes = await self.renderer.render(document, self.page_setup(content, options))
        return base64.b64encode(pdf_bytes).decode("ascii")

    def page_setup(self, content: SelectedContent, options: ExportOptions) -> PageSetup:
        """Print settings for a preset: margins plus the running header and footer."""
        preset = style_preset(options.style)
        header = (
            f'<div style="width: 100%; font-size: 9px; padding: 5px 15px; '
            f'color: {preset.secondary_color}; border-bottom: 1px solid {preset.header_bg};">'
            f"<span>{html.escape(content.session.project_name)}</span></div>"
        )
        footer = (
            f'<div style="width: 100%; font-size: 9px; padding: 5px 15px; '
            f'color: {preset.secondary_color}; border-top: 1px solid {preset.header_bg}; '
            f'display: flex; justify-content: space-between;">'
            f"<span>{self.label('generated_by', options)}</span>"
            f'<span>{self.label("page", options)} <span class="pageNumber"></span> / '
            f'<span class="totalPages"></span></span></div>'
        )
        return PageSetup(format="A4", margin=preset.margin, header_template=header, footer_template=footer)

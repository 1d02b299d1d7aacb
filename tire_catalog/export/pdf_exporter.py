"""
PDF Catalogue Exporter

Renders the grouped catalogue as an A4 PDF: a heading per category and a
card per tread with its image, SKU table and application models.
"""

import logging
import os
from io import BytesIO
from typing import Iterable, List, Optional
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.platypus import (
    Image,
    KeepTogether,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

from ..common.text_utils import format_cop
from ..models import Group
from .images import ImageFetcher

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"
CATALOG_TITLE = "Catálogo llantas Paytton Tires"

PAGE_MARGIN = 24
IMAGE_BOX = 120
CARD_PADDING = 8
BORDER_COLOR = colors.HexColor("#dddddd")
TABLE_LINE_COLOR = colors.HexColor("#eeeeee")
TABLE_HEAD_BG = colors.HexColor("#f5f5f5")
APPS_COLOR = colors.HexColor("#444444")

# (header, width fraction)
ITEM_COLUMNS = [
    ("SKU", 0.20),
    ("Medida", 0.16),
    ("INV", 0.10),
    ("Precio", 0.18),
    ("Precio + IVA", 0.18),
    ("35% Dcto", 0.18),
]


def _styles():
    base = getSampleStyleSheet()
    return {
        "title": ParagraphStyle("CatalogTitle", parent=base["Title"], fontSize=16,
                                alignment=0, spaceAfter=10),
        "category": ParagraphStyle("Category", parent=base["Heading2"], fontSize=13,
                                   spaceBefore=14, spaceAfter=8),
        "grabado": ParagraphStyle("Grabado", parent=base["Normal"], fontName="Helvetica-Bold",
                                  fontSize=12, leading=15, spaceAfter=6),
        "cell": ParagraphStyle("Cell", parent=base["Normal"], fontSize=9, leading=11),
        "cell_right": ParagraphStyle("CellRight", parent=base["Normal"], fontSize=9,
                                     leading=11, alignment=TA_RIGHT),
        "head": ParagraphStyle("Head", parent=base["Normal"], fontName="Helvetica-Bold",
                               fontSize=9, leading=11),
        "apps": ParagraphStyle("Apps", parent=base["Normal"], fontSize=9, leading=11,
                               textColor=APPS_COLOR, spaceBefore=6),
        "muted": ParagraphStyle("Muted", parent=base["Normal"], fontSize=9,
                                textColor=APPS_COLOR),
    }


class CatalogPDFExporter:
    """
    Exports catalogue groups to PDF.

    Usage:
        exporter = CatalogPDFExporter()
        exporter.export(groups, "output/catalogo.pdf")
        data = exporter.to_bytes(groups)
    """

    def __init__(self, include_images: bool = True, image_fetcher: Optional[ImageFetcher] = None,
                 title: str = CATALOG_TITLE):
        """
        Initialize the exporter.

        Args:
            include_images: Download and draw each group's image
            image_fetcher: Image source (a new ImageFetcher per export if None)
            title: Heading on the first page
        """
        self.include_images = include_images
        self.image_fetcher = image_fetcher
        self.title = title
        self.styles = _styles()
        self.content_width = A4[0] - 2 * PAGE_MARGIN

    def _image_flowable(self, fetcher: Optional[ImageFetcher], url: str):
        data = fetcher.get(url) if fetcher is not None else None
        if data:
            try:
                return Image(BytesIO(data), width=IMAGE_BOX, height=IMAGE_BOX, kind="proportional")
            except (OSError, ValueError) as e:
                logger.warning("Unreadable image %s: %s", url, e)
        return Paragraph("Sin imagen", self.styles["muted"])

    def _items_table(self, group: Group, width: float) -> Table:
        s = self.styles
        rows = [[Paragraph(header, s["head"]) for header, _ in ITEM_COLUMNS]]
        for item in group.items:
            rows.append([
                Paragraph(escape(item.sku), s["cell"]),
                Paragraph(escape(item.medida or "-"), s["cell"]),
                Paragraph(str(item.inventario), s["cell_right"]),
                Paragraph(format_cop(item.precio_sin_iva), s["cell_right"]),
                Paragraph(format_cop(item.precio_con_iva), s["cell_right"]),
                Paragraph(format_cop(item.precio35), s["cell_right"]),
            ])

        table = Table(rows, colWidths=[width * fraction for _, fraction in ITEM_COLUMNS],
                      repeatRows=1)
        table.setStyle(TableStyle([
            ("BACKGROUND", (0, 0), (-1, 0), TABLE_HEAD_BG),
            ("BOX", (0, 0), (-1, -1), 0.5, TABLE_LINE_COLOR),
            ("LINEBELOW", (0, 0), (-1, -1), 0.5, TABLE_LINE_COLOR),
            ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ]))
        return table

    def group_card(self, group: Group, fetcher: Optional[ImageFetcher] = None) -> KeepTogether:
        """
        Build the flowables for one tread.

        The header (image, name, applications) is a boxed table; the SKU
        table sits below it at full width so long groups can break across
        pages.
        """
        s = self.styles
        text_width = self.content_width - IMAGE_BOX - 4 * CARD_PADDING

        info: List = [Paragraph(escape(group.grabado), s["grabado"])]
        if group.apps:
            info.append(Paragraph(f"Aplicaciones: {escape(group.apps)}", s["apps"]))

        if self.include_images:
            header = Table([[self._image_flowable(fetcher, group.imagen), info]],
                           colWidths=[IMAGE_BOX + 2 * CARD_PADDING, text_width + 2 * CARD_PADDING])
        else:
            header = Table([[info]], colWidths=[self.content_width])
        header.setStyle(TableStyle([
            ("BOX", (0, 0), (-1, -1), 1, BORDER_COLOR),
            ("VALIGN", (0, 0), (-1, -1), "TOP"),
            ("LEFTPADDING", (0, 0), (-1, -1), CARD_PADDING),
            ("RIGHTPADDING", (0, 0), (-1, -1), CARD_PADDING),
            ("TOPPADDING", (0, 0), (-1, -1), CARD_PADDING),
            ("BOTTOMPADDING", (0, 0), (-1, -1), CARD_PADDING),
        ]))

        return KeepTogether([
            header,
            self._items_table(group, self.content_width),
            Spacer(1, 12),
        ])

    def build_story(self, groups: Iterable[Group], fetcher: Optional[ImageFetcher] = None) -> List:
        """Flowables for the whole document, categories in group order."""
        story: List = [Paragraph(escape(self.title), self.styles["title"])]
        current_category = None
        for group in groups:
            if group.categoria != current_category:
                current_category = group.categoria
                story.append(Paragraph(escape(current_category), self.styles["category"]))
            story.append(self.group_card(group, fetcher))
        return story

    def write(self, groups: Iterable[Group], target) -> None:
        """
        Render the PDF into a path or binary file object.

        Args:
            groups: Catalogue groups (already sorted)
            target: Output path or writable binary stream
        """
        fetcher = self.image_fetcher
        if self.include_images and fetcher is None:
            fetcher = ImageFetcher()

        doc = SimpleDocTemplate(
            target,
            pagesize=A4,
            leftMargin=PAGE_MARGIN,
            rightMargin=PAGE_MARGIN,
            topMargin=PAGE_MARGIN,
            bottomMargin=PAGE_MARGIN,
            title=self.title,
        )
        try:
            doc.build(self.build_story(groups, fetcher))
        finally:
            if fetcher is not None and self.image_fetcher is None:
                fetcher.session.close()

    def export(self, groups: Iterable[Group], output_path: str) -> None:
        """Write the PDF to a file."""
        os.makedirs(os.path.dirname(output_path) or '.', exist_ok=True)
        self.write(groups, output_path)

    def to_bytes(self, groups: Iterable[Group]) -> bytes:
        """Render the PDF for an HTTP download."""
        buffer = BytesIO()
        self.write(groups, buffer)
        return buffer.getvalue()

"""
XLSX Catalogue Exporter

Writes the grouped catalogue to an Excel workbook: one row per SKU,
black header with yellow text, optional embedded tire images.
"""

import logging
import os
from io import BytesIO
from typing import Dict, Iterable, List, Optional

from openpyxl import Workbook
from openpyxl.drawing.image import Image as XLImage
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from ..models import Group
from .images import ImageFetcher

logger = logging.getLogger(__name__)

SHEET_TITLE = "CATALOGO"
XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# (header, row key, column width)
XLSX_COLUMNS = [
    ("CATEGORÍA", "categoria", 18),
    ("IMAGEN", "imagen", 18),
    ("GRABADO", "grabado", 24),
    ("REF INTERNA", "sku", 18),
    ("MEDIDA", "medida", 18),
    ("INV", "inventario", 8),
    ("PRECIO SIN IVA", "precioCatalogoSinIva", 16),
    ("PRECIO + IVA", "precioCatalogoConIva", 16),
    ("PRECIO 35% DCTO", "precio35", 16),
    ("PRECIO 30% DCTO", "precio30", 16),
    ("PRECIO 25% DCTO", "precio25", 16),
    ("PRECIO 20% DCTO", "precio20", 16),
    ("APLICACIONES", "apps", 60),
]

MONEY_KEYS = {"precioCatalogoSinIva", "precioCatalogoConIva",
              "precio35", "precio30", "precio25", "precio20"}
MONEY_FORMAT = '"$"#,##0'

HEADER_FILL = PatternFill(fill_type="solid", fgColor="FF000000")
HEADER_FONT = Font(bold=True, color="FFFFD400")
HEADER_ALIGNMENT = Alignment(vertical="center", horizontal="center", wrap_text=True)
CELL_ALIGNMENT = Alignment(vertical="top", wrap_text=True)
_THIN = Side(style="thin", color="FF333333")
CELL_BORDER = Border(top=_THIN, left=_THIN, bottom=_THIN, right=_THIN)

HEADER_HEIGHT = 22
ROW_HEIGHT = 70
IMAGE_SIZE = 90
IMAGE_COLUMN = "B"


class CatalogXLSXExporter:
    """
    Exports catalogue groups to an XLSX workbook.

    Usage:
        exporter = CatalogXLSXExporter(embed_images=True)
        exporter.export(groups, "output/catalogo.xlsx")
        data = exporter.to_bytes(groups)
    """

    def __init__(self, embed_images: bool = False, image_fetcher: Optional[ImageFetcher] = None):
        """
        Initialize the exporter.

        Args:
            embed_images: Download each group's image and place it in the IMAGEN column
            image_fetcher: Image source (a new ImageFetcher per export if None)
        """
        self.embed_images = embed_images
        self.image_fetcher = image_fetcher
        self.headers = [header for header, _, _ in XLSX_COLUMNS]

    def group_to_rows(self, group: Group) -> List[Dict]:
        """
        Convert a group into one row dict per item.

        Args:
            group: Catalogue group

        Returns:
            List of row dictionaries keyed like XLSX_COLUMNS
        """
        rows = []
        for item in group.items:
            rows.append({
                "categoria": group.categoria,
                "imagen": group.imagen,
                "grabado": group.grabado,
                "sku": item.sku,
                "medida": item.medida or "",
                "inventario": item.inventario,
                "precioCatalogoSinIva": item.precio_sin_iva,
                "precioCatalogoConIva": item.precio_con_iva,
                "precio35": item.precio35,
                "precio30": item.precio30,
                "precio25": item.precio25,
                "precio20": item.precio20,
                "apps": item.apps or group.apps or "",
            })
        return rows

    def build_workbook(self, groups: Iterable[Group]) -> Workbook:
        """Build the styled workbook in memory."""
        wb = Workbook()
        ws = wb.active
        ws.title = SHEET_TITLE

        ws.append(self.headers)
        ws.row_dimensions[1].height = HEADER_HEIGHT
        for idx, (_, _, width) in enumerate(XLSX_COLUMNS, start=1):
            ws.column_dimensions[get_column_letter(idx)].width = width
            cell = ws.cell(row=1, column=idx)
            cell.fill = HEADER_FILL
            cell.font = HEADER_FONT
            cell.alignment = HEADER_ALIGNMENT
        ws.freeze_panes = "A2"

        fetcher = self.image_fetcher
        if self.embed_images and fetcher is None:
            fetcher = ImageFetcher()

        try:
            row_idx = 2
            for group in groups:
                for row in self.group_to_rows(group):
                    ws.append([row[key] for _, key, _ in XLSX_COLUMNS])
                    ws.row_dimensions[row_idx].height = ROW_HEIGHT

                    for idx, (_, key, _) in enumerate(XLSX_COLUMNS, start=1):
                        cell = ws.cell(row=row_idx, column=idx)
                        cell.alignment = CELL_ALIGNMENT
                        cell.border = CELL_BORDER
                        if key in MONEY_KEYS:
                            cell.number_format = MONEY_FORMAT

                    if fetcher is not None:
                        self._embed_image(ws, fetcher, group.imagen, row_idx)

                    row_idx += 1
        finally:
            if fetcher is not None and self.image_fetcher is None:
                fetcher.session.close()

        logger.info("Workbook built with %d item rows", ws.max_row - 1)
        return wb

    def _embed_image(self, ws, fetcher: ImageFetcher, url: str, row_idx: int) -> None:
        data = fetcher.get(url)
        if not data:
            return
        try:
            image = XLImage(BytesIO(data))
        except (OSError, ValueError) as e:
            logger.warning("Unreadable image %s: %s", url, e)
            return
        image.width = IMAGE_SIZE
        image.height = IMAGE_SIZE
        ws.add_image(image, f"{IMAGE_COLUMN}{row_idx}")

    def export(self, groups: Iterable[Group], output_path: str) -> int:
        """
        Write the workbook to a file.

        Args:
            groups: Catalogue groups
            output_path: Output .xlsx path

        Returns:
            Number of item rows written
        """
        os.makedirs(os.path.dirname(output_path) or '.', exist_ok=True)

        wb = self.build_workbook(groups)
        wb.save(output_path)
        return wb.active.max_row - 1

    def to_bytes(self, groups: Iterable[Group]) -> bytes:
        """Render the workbook for an HTTP download."""
        buffer = BytesIO()
        self.build_workbook(groups).save(buffer)
        return buffer.getvalue()

"""
Catalogue exporters.

Modules:
    images - Image download for embedding
    xlsx_exporter - Excel workbook (openpyxl)
    pdf_exporter - Printable PDF (reportlab)
"""

from .images import ImageFetcher
from .pdf_exporter import CATALOG_TITLE, PDF_CONTENT_TYPE, CatalogPDFExporter
from .xlsx_exporter import XLSX_COLUMNS, XLSX_CONTENT_TYPE, CatalogXLSXExporter

__all__ = [
    'ImageFetcher',
    'CatalogPDFExporter',
    'CatalogXLSXExporter',
    'CATALOG_TITLE',
    'PDF_CONTENT_TYPE',
    'XLSX_COLUMNS',
    'XLSX_CONTENT_TYPE',
]

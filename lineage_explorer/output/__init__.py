"""Output writers and presentation mapping for lineage views."""

from .excel_writer import ExcelWriter
from .html_writer import HtmlWriter
from .presenter import build_flow_elements, build_graph_document, write_json

__all__ = ["ExcelWriter", "HtmlWriter", "build_flow_elements", "build_graph_document", "write_json"]

"""Builders that turn parser output into dependency graphs."""

from .format_converters import FormatConverter
from .text_processor import TextProcessor, chunk_tags, doc_to_graph

__all__ = ["FormatConverter", "TextProcessor", "chunk_tags", "doc_to_graph"]

"""Bulk question import from the PROVIQUIZ text format."""

from app.services.importer.text_parser import ParsedQuestion, ParseReport, parse_text
from app.services.importer.writer import QuestionWriter

__all__ = [
    "ParsedQuestion",
    "ParseReport",
    "parse_text",
    "QuestionWriter",
]

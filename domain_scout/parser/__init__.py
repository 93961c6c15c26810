# File: domain_scout/parser/__init__.py
"""domain_scout.parser: извлечение метаданных из HTML-страниц."""

from domain_scout.parser.html_parser import ParsedPage, parse_html

__all__ = ["ParsedPage", "parse_html"]

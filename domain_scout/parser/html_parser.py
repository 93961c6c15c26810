# === FILE: domain_scout/parser/html_parser.py ===
"""HTML metadata extraction for DomainScout.

The prober only needs two things out of a landing page:

* title — text of the first ``<title>`` element, ``None`` if absent.
* body  — visible text of the first ``<body>`` element, ``None`` if absent.

Markup is accepted as ``str`` or raw ``bytes``; in the latter case
BeautifulSoup sniffs the encoding itself, so undecodable pages still yield
whatever can be recovered.  Markup the parser rejects outright produces an
empty :class:`ParsedPage` instead of an exception.
"""
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Optional, Union

from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup

from domain_scout.logger import logger

__all__: Sequence[str] = ("ParsedPage", "parse_html")

#: elements whose text never shows up on the rendered page
_INVISIBLE = ["script", "style", "noscript", "template"]


@dataclass(frozen=True, slots=True)
class ParsedPage:
    """Lightweight representation of an HTML page."""

    title: Optional[str] = None
    body: Optional[str] = None


def parse_html(markup: Union[str, bytes]) -> ParsedPage:
    """Extract title and body text from *markup*."""
    try:
        soup = BeautifulSoup(markup, "html.parser")
    except ParserRejectedMarkup as exc:
        logger.debug("Markup rejected by parser: %s", exc)
        return ParsedPage()

    title_tag = soup.find("title")
    title = title_tag.get_text(strip=True) if title_tag else None

    body_tag = soup.find("body")
    body: Optional[str] = None
    if body_tag is not None:
        for element in body_tag(_INVISIBLE):
            element.decompose()
        body = " ".join(body_tag.stripped_strings)

    return ParsedPage(title=title, body=body)

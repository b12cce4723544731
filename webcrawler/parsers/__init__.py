"""Parser package exports."""

from .html_parser import html_link_extractor

__all__ = [
    "html_link_extractor",
]

"""Input parsing for fetched article exports."""

from .json_parser import parse_articles_json

__all__ = ["parse_articles_json"]

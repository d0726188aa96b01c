"""Dotenv parsing and merging."""

from .merge import merge, resolve_type
from .parse import parse_env_text
from .typehint import parse_type_hint

__all__ = ["merge", "parse_env_text", "parse_type_hint", "resolve_type"]

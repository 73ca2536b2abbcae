"""
Shared Schema Pieces
====================
camelCase base model and the tier marker attached to every generated
result.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class GenerationSource(str, Enum):
    """Which tier produced a result."""

    REMOTE = "remote"
    HEURISTIC = "heuristic"
    FALLBACK = "fallback"


class CamelModel(BaseModel):
    """Base model serialised with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

"""File description synthesis and persistence."""

from .manager import (
    DESCRIPTION_SCHEMA_VERSION,
    DescribeResult,
    DescriptionManager,
    IndexView,
    render_descriptions,
)
from .models import DescriptionRecord, DescriptionSet
from .synthesizer import describe_file

__all__ = [
    "DESCRIPTION_SCHEMA_VERSION",
    "DescribeResult",
    "DescriptionManager",
    "DescriptionRecord",
    "DescriptionSet",
    "IndexView",
    "describe_file",
    "render_descriptions",
]

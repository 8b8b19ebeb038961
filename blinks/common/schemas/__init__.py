"""
Blink Schemas
"""

from .blink import Blink, BlinkType, generate_blink_id

__all__ = [
    "Blink",
    "BlinkType",
    "generate_blink_id",
]

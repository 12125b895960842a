"""
Interactive link selection.
"""

from .key_selector import KeyHintState, KeySelector, QtKeyReader, make_codes
from .overlap import overlaps_link, pick

__all__ = ["KeyHintState", "KeySelector", "QtKeyReader", "make_codes", "pick", "overlaps_link"]

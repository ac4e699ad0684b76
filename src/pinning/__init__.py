"""Local pin files: .yarnrc.yml, .pinyarn.js and .pinyarn.json."""

from .templates import TemplateBundle
from .writer import PinFile, PinState, PinWriter

__all__ = [
    "TemplateBundle",
    "PinFile",
    "PinState",
    "PinWriter",
]

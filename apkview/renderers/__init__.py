from .base import Renderer
from .jinja_renderer import TEMPLATE_SUFFIX, JinjaRenderer

__all__ = [
    "Renderer",
    "TEMPLATE_SUFFIX",
    "JinjaRenderer",
]

"""Renderers turning the command artifact into generated code."""

from .handler_renderer import to_handler
from .bindings_renderer import to_bindings
from .array_renderer import to_array

RENDERERS = {
    "handler": to_handler,
    "bindings": to_bindings,
    "array": to_array,
}

__all__ = ["to_handler", "to_bindings", "to_array", "RENDERERS"]

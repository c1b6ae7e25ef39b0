"""Render: Report text generation from the parsed records."""

from goaltracker.render.template import TemplateRenderer

__all__ = ["TemplateRenderer"]

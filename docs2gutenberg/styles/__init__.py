"""Style inlining: ``<style>`` rules become ``style`` attributes."""

from .style_inliner import InlinerOptions, apply_styles, inline_all_styles, remove_style_tags

__all__ = ["InlinerOptions", "apply_styles", "inline_all_styles", "remove_style_tags"]

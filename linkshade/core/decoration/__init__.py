"""
Drawing link outlines onto rendered page images.
"""

from .pipeline import DecorationPipeline, PipelineStatus, build_convert_command, list_page_images

__all__ = ["DecorationPipeline", "PipelineStatus", "build_convert_command", "list_page_images"]

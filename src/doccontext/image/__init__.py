"""Rendering of document pages to image files."""

from doccontext.image.imagemagick import ImageMagickOptions, ImageMagickRenderer
from doccontext.image.renderer import Renderer

__all__ = ["ImageMagickOptions", "ImageMagickRenderer", "Renderer"]

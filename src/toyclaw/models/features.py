# src/toyclaw/models/features.py
"""Product features produced by the upstream image analysis."""

from pydantic import BaseModel


class ShapeFeature(BaseModel):
    category: str


class ColorFeature(BaseModel):
    name: str
    hex: str | None = None


class NamedFeature(BaseModel):
    """A material or style entry."""

    name: str


class ExtractedFeatures(BaseModel):
    """Structured features {shape, colors, material, style} of a product image."""

    shape: ShapeFeature
    colors: list[ColorFeature]
    material: list[NamedFeature]
    style: list[NamedFeature]

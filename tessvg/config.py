"""
Configuration for the example pipeline.

Plain dataclasses; the CLI maps its flags onto an ExampleConfig.
"""

from dataclasses import dataclass, field, replace
from typing import Tuple

from .path import ExampleShape
from .tessellate import FillOptions, StrokeOptions


@dataclass
class DocumentStyle:
    """Fixed presentation attributes of generated documents."""
    view_box: Tuple[float, float, float, float] = (0, 0, 90, 90)
    outline_color: str = 'black'     # Stroke color of every triangle node
    outline_width: float = 0.1


@dataclass
class ExampleConfig:
    """Configuration for generating the example SVG files."""
    output_dir: str = 'svg_output'
    shapes: Tuple[ExampleShape, ...] = tuple(ExampleShape)
    stroke_color: str = 'blue'       # Fill of stroke-pass triangles
    fill_color: str = 'red'          # Fill of fill-pass triangles
    stroke_options: StrokeOptions = field(default_factory=StrokeOptions)
    fill_options: FillOptions = field(default_factory=FillOptions)
    style: DocumentStyle = field(default_factory=DocumentStyle)
    keep_going: bool = False         # Skip failed shapes instead of aborting

    def with_tolerance(self, tolerance: float) -> 'ExampleConfig':
        """Copy of this config using the given flattening tolerance for both passes."""
        return replace(
            self,
            stroke_options=replace(self.stroke_options, tolerance=tolerance),
            fill_options=replace(self.fill_options, tolerance=tolerance),
        )

"""
tessvg - Path tessellation to SVG

Builds vector paths (bezier curves, circles, rounded rectangles, polygons),
tessellates their stroke and fill into triangles, and writes the triangles
as SVG path elements.

Key components:
- path: Path events and PathBuilder, example shapes
- tessellate: Fill/stroke tessellation into GeometryBuffers
- svg: Document building, saving and loading
- examples: End-to-end example pipeline
- kernels: Curve flattening and winding numbers

Usage:
    from tessvg import PathBuilder, tessellate_fill, make_document

    builder = PathBuilder()
    builder.add_polygon([(45, 10), (80, 80), (10, 80)])
    geometry = tessellate_fill(builder.build())
    make_document(geometry, 'red').save('polygon.svg')
"""

from .errors import (
    TessvgError,
    PathError,
    TessellationError,
    OutputError,
)

from .path import (
    Path,
    PathBuilder,
    MoveTo,
    LineTo,
    QuadraticTo,
    CubicTo,
    Close,
    Winding,
    Rect,
    BorderRadii,
    ExampleShape,
    build_example_path,
)

from .tessellate import (
    FillRule,
    LineJoin,
    LineCap,
    FillOptions,
    StrokeOptions,
    FillVertex,
    StrokeVertex,
    GeometryBuffers,
    BuffersBuilder,
    position_only,
    tessellate_fill,
    tessellate_stroke,
)

from .config import (
    DocumentStyle,
    ExampleConfig,
)

from .svg import (
    PathData,
    PathNode,
    SvgDocument,
    make_document,
    save_svg,
    read_document,
)

from .examples import (
    stroke_document,
    fill_document,
    render_example,
    make_example,
    make_examples,
)


__all__ = [
    # Errors
    'TessvgError',
    'PathError',
    'TessellationError',
    'OutputError',
    # Path
    'Path',
    'PathBuilder',
    'MoveTo',
    'LineTo',
    'QuadraticTo',
    'CubicTo',
    'Close',
    'Winding',
    'Rect',
    'BorderRadii',
    'ExampleShape',
    'build_example_path',
    # Tessellation
    'FillRule',
    'LineJoin',
    'LineCap',
    'FillOptions',
    'StrokeOptions',
    'FillVertex',
    'StrokeVertex',
    'GeometryBuffers',
    'BuffersBuilder',
    'position_only',
    'tessellate_fill',
    'tessellate_stroke',
    # Config
    'DocumentStyle',
    'ExampleConfig',
    # SVG
    'PathData',
    'PathNode',
    'SvgDocument',
    'make_document',
    'save_svg',
    'read_document',
    # Examples
    'stroke_document',
    'fill_document',
    'render_example',
    'make_example',
    'make_examples',
]


# Version info
__version__ = '0.1.0'

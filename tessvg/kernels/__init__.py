"""
Geometry kernels used by the tessellators.

- flatten: Bezier flattening of path events into polylines
- winding: Winding number computation for fill rule classification
"""

from .flatten import (
    Polyline,
    segment_count,
    eval_quadratic_bezier,
    eval_cubic_bezier,
    flatten_path,
)

from .winding import (
    winding_number_py,
    winding_numbers,
    total_winding_numbers,
)

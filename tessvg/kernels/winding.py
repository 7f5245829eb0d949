"""
Winding number computation for flattened rings.

Used by the fill tessellator to decide which faces of a noded path belong to
the interior under the even-odd or non-zero rule. Edges are tested with a
half-open crossing rule so that a ray through a vertex is counted once.
"""

import torch


def winding_number_py(query_point: tuple, ring: list) -> int:
    """Python reference implementation: winding number of a point w.r.t. a closed ring."""
    pt_x, pt_y = query_point
    winding = 0
    num_points = len(ring)

    for i in range(num_points):
        x0, y0 = ring[i]
        x1, y1 = ring[(i + 1) % num_points]
        is_left = (x1 - x0) * (pt_y - y0) - (pt_x - x0) * (y1 - y0)
        if y0 <= pt_y < y1:
            if is_left > 0:
                winding += 1
        elif y1 <= pt_y < y0:
            if is_left < 0:
                winding -= 1

    return winding


def winding_numbers(query_points: torch.Tensor, ring: torch.Tensor) -> torch.Tensor:
    """
    Vectorized winding numbers of many points against one closed ring.

    Args:
        query_points: [num_queries, 2] points
        ring: [num_points, 2] ring vertices, first point not repeated

    Returns:
        [num_queries] int64 winding numbers
    """
    query_points = query_points.to(torch.float64)
    ring = ring.to(torch.float64)
    if ring.shape[0] < 2:
        return torch.zeros(query_points.shape[0], dtype=torch.int64)

    p0 = ring
    p1 = torch.roll(ring, shifts=-1, dims=0)

    # [num_queries, 1] against [1, num_edges]
    x = query_points[:, 0:1]
    y = query_points[:, 1:2]
    x0, y0 = p0[:, 0].unsqueeze(0), p0[:, 1].unsqueeze(0)
    x1, y1 = p1[:, 0].unsqueeze(0), p1[:, 1].unsqueeze(0)

    is_left = (x1 - x0) * (y - y0) - (x - x0) * (y1 - y0)
    upward = (y0 <= y) & (y1 > y) & (is_left > 0)
    downward = (y1 <= y) & (y0 > y) & (is_left < 0)

    return upward.sum(dim=1) - downward.sum(dim=1)


def total_winding_numbers(query_points: torch.Tensor, rings: list) -> torch.Tensor:
    """Sum of winding numbers over several rings (one per sub-path)."""
    total = torch.zeros(query_points.shape[0], dtype=torch.int64)
    for ring in rings:
        total += winding_numbers(query_points, ring)
    return total

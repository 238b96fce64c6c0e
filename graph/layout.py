"""
layout.py - Node Placement
==========================
Places N nodes inside a width x height viewport.

  circular_layout  - evenly spaced around a circle, with a little radial and
                     angular jitter so the picture doesn't look machine-made
  spatial_layout   - scattered positions with a minimum separation
  relax_layout     - force-directed clean-up for spatial graphs once the
                     edges are known (repulsion between all pairs,
                     attraction along edges, weak pull to the centre)

All randomness comes from the `rng` argument.
"""

import math
import random
from typing import Iterable, List

from graph.config import LAYOUT, NODE_VARIANCE, LayoutConfig, NodeVarianceConfig
from graph.edge import Edge
from graph.node import Node


def placement_variance(count: int, variance: NodeVarianceConfig = NODE_VARIANCE) -> float:
    """Radial jitter in pixels; shrinks as the circle gets crowded."""
    if count <= variance.few_nodes_threshold:
        return variance.few_nodes
    if count <= variance.medium_nodes_threshold:
        return variance.medium_nodes
    if count <= variance.many_nodes_threshold:
        return variance.many_nodes
    return variance.lots_of_nodes


def circle_radius(count: int, width: float, height: float, layout: LayoutConfig = LAYOUT) -> float:
    base = min(width, height) / layout.radius_divisor
    extra = max(0, count - layout.scale_node_threshold) * layout.scale_per_node
    return max(base * (1 + extra), layout.min_radius)


def circular_layout(
    count: int,
    width: float,
    height: float,
    rng: random.Random,
    layout: LayoutConfig = LAYOUT,
) -> List[Node]:
    radius = circle_radius(count, width, height, layout)
    cx, cy = width / 2, height / 2
    jitter = placement_variance(count)
    angle_jitter = math.pi / (layout.angle_base_divisor * max(1.0, count / layout.angle_node_divisor))

    nodes = []
    for i in range(count):
        angle = 2 * math.pi * i / count + rng.uniform(-angle_jitter, angle_jitter)
        r = radius + rng.uniform(-jitter, jitter)
        nodes.append(Node(i, cx + r * math.cos(angle), cy + r * math.sin(angle)))
    return nodes


def spatial_layout(
    count: int,
    width: float,
    height: float,
    rng: random.Random,
    layout: LayoutConfig = LAYOUT,
) -> List[Node]:
    """
    Rejection-sample positions so no two nodes sit closer than
    `min_separation`.  If the viewport is too small to honour that, the
    last attempt is accepted anyway.
    """
    margin = min(layout.spatial_margin, width / 4, height / 4)
    nodes: List[Node] = []
    for i in range(count):
        x = y = 0.0
        for _ in range(layout.placement_attempts):
            x = rng.uniform(margin, width - margin)
            y = rng.uniform(margin, height - margin)
            if all(math.hypot(x - n.x, y - n.y) >= layout.min_separation for n in nodes):
                break
        nodes.append(Node(i, x, y))
    return nodes


def relax_layout(
    nodes: List[Node],
    edges: Iterable[Edge],
    width: float,
    height: float,
    iterations: int = LAYOUT.relax_iterations,
    gravity: float = 0.02,
    layout: LayoutConfig = LAYOUT,
) -> List[Node]:
    """
    Fruchterman-Reingold style relaxation, in place.  Returns `nodes` for
    chaining.  Positions stay inside the spatial margin.
    """
    n = len(nodes)
    if n < 2:
        return nodes

    margin = min(layout.spatial_margin, width / 4, height / 4)
    index = {node.id: i for i, node in enumerate(nodes)}
    links = [(index[e.source], index[e.target]) for e in edges
             if e.source in index and e.target in index and e.source != e.target]

    area = (width - 2 * margin) * (height - 2 * margin)
    k = math.sqrt(max(area, 1.0) / n)
    k_sq = k * k
    temperature = width / 10
    cooling = 0.01 ** (1 / max(iterations, 1))   # ends at ~1% of the start temperature
    cx, cy = width / 2, height / 2

    for _ in range(iterations):
        disp_x = [0.0] * n
        disp_y = [0.0] * n

        # repulsion: f_r = k^2 / d
        for i in range(n):
            for j in range(i + 1, n):
                dx = nodes[i].x - nodes[j].x
                dy = nodes[i].y - nodes[j].y
                dist = math.hypot(dx, dy) or 0.01
                force = k_sq / dist
                fx, fy = dx / dist * force, dy / dist * force
                disp_x[i] += fx
                disp_y[i] += fy
                disp_x[j] -= fx
                disp_y[j] -= fy

        # attraction: f_a = d^2 / k
        for src, tgt in links:
            dx = nodes[src].x - nodes[tgt].x
            dy = nodes[src].y - nodes[tgt].y
            dist = math.hypot(dx, dy) or 0.01
            force = dist * dist / k
            fx, fy = dx / dist * force, dy / dist * force
            disp_x[src] -= fx
            disp_y[src] -= fy
            disp_x[tgt] += fx
            disp_y[tgt] += fy

        for i, node in enumerate(nodes):
            disp_x[i] += gravity * (cx - node.x)
            disp_y[i] += gravity * (cy - node.y)
            length = math.hypot(disp_x[i], disp_y[i])
            if length > 0:
                scale = min(length, temperature) / length
                node.x += disp_x[i] * scale
                node.y += disp_y[i] * scale
            node.x = max(margin, min(width - margin, node.x))
            node.y = max(margin, min(height - margin, node.y))

        temperature *= cooling

    return nodes

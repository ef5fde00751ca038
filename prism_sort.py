# -*- coding: utf-8 -*-
"""
Prism: Weaving the mathematics of color representation
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Perceptual Ordering
===================
Orders an arbitrary set of colors so that neighbours in the result are close
in CIELAB, i.e. a short open path through the colors (a travelling-salesman
problem, solved heuristically):

1. All colors are converted to Lab in one vectorized pass.
2. A minimum spanning tree is built over the all-pairs Lab distances.
3. A depth-first preorder walk of the tree, rooted at the darkest color,
   gives the initial path (at most twice the optimal tour length).
4. Open-path 2-opt moves remove the crossings the tree walk leaves behind.

The result is deterministic for a given input order and is always a
permutation of the input, because it is assembled from an index order.
"""

import logging
from typing import List, Sequence

import numpy as np
from numba import njit
from scipy.sparse.csgraph import depth_first_order, minimum_spanning_tree
from scipy.spatial.distance import pdist, squareform

from prism_color import Color
from prism_perceptual import srgb_to_lab_array
from prism_transfer import ArrayFloat

logger = logging.getLogger(__name__)

__all__ = [
    "sorted_colors",
    "path_length",
]

DEFAULT_MAX_PASSES: int = 50

# Improvements smaller than this are rounding noise and would let the 2-opt
# loop flip equivalent segments forever.
_TWO_OPT_TOL: float = 1e-12

# Added to every edge weight before building the spanning tree.
_MST_SHIFT: float = 1.0


# =============================================================================
# 1. 2-OPT KERNEL
# =============================================================================
# Compiled without fastmath: the acceptance test compares sums of distances
# and must not be reassociated.

@njit(cache=True, fastmath=False)
def _two_opt_kernel(dist: ArrayFloat, path: np.ndarray, max_passes: int) -> float:
    """
    Improves an open path in place by reversing sub-segments.

    Reversing ``path[i..j]`` replaces the edges (p[i-1], p[i]) and
    (p[j], p[j+1]) with (p[i-1], p[j]) and (p[i], p[j+1]); a missing
    neighbour at either end of the path contributes nothing.

    Returns:
        The total length removed from the path.
    """
    n = path.shape[0]
    gain = 0.0
    for _ in range(max_passes):
        improved = False
        for i in range(n - 1):
            for j in range(i + 1, n):
                delta = 0.0
                if i > 0:
                    delta += dist[path[i - 1], path[j]] - dist[path[i - 1], path[i]]
                if j < n - 1:
                    delta += dist[path[i], path[j + 1]] - dist[path[j], path[j + 1]]
                if delta < -_TWO_OPT_TOL:
                    lo = i
                    hi = j
                    while lo < hi:
                        tmp = path[lo]
                        path[lo] = path[hi]
                        path[hi] = tmp
                        lo += 1
                        hi -= 1
                    gain -= delta
                    improved = True
        if not improved:
            break
    return gain


# =============================================================================
# 2. PUBLIC API
# =============================================================================

def _lab_matrix(colors: Sequence[Color]) -> ArrayFloat:
    rgb = np.array([c.values() for c in colors], dtype=np.float64).reshape(-1, 3)
    return srgb_to_lab_array(rgb)


def sorted_colors(colors: Sequence[Color], max_passes: int = DEFAULT_MAX_PASSES) -> List[Color]:
    """
    Returns the colors reordered so that adjacent entries look alike.

    Args:
        colors: Colors to order.  Duplicates are allowed; the input is not
            modified.
        max_passes: Upper bound on full 2-opt sweeps; 0 keeps the plain tree
            walk.

    Returns:
        A new list holding exactly the input colors, starting at the darkest
        one (lowest L*, first occurrence on ties) before 2-opt refinement.
    """
    n = len(colors)
    if n < 2:
        return list(colors)

    lab = _lab_matrix(colors)

    condensed = pdist(lab, metric="euclidean")
    dist = squareform(condensed)

    # csgraph drops near-zero weights as missing edges, which would cut
    # duplicates out of the graph.  A uniform shift keeps every edge and
    # leaves the spanning tree unchanged.
    tree = minimum_spanning_tree(squareform(condensed + _MST_SHIFT))
    tree_length = float(tree.sum()) - _MST_SHIFT * (n - 1)
    start = int(np.argmin(lab[:, 0]))
    order = depth_first_order(tree, start, directed=False, return_predecessors=False)

    path = np.ascontiguousarray(order, dtype=np.int64)
    gain = _two_opt_kernel(np.ascontiguousarray(dist), path, int(max_passes))

    logger.debug(
        "sorted %d colors: tree length %.6f, 2-opt gain %.6f",
        n, tree_length, gain,
    )
    return [colors[i] for i in path]


def path_length(colors: Sequence[Color]) -> float:
    """Sum of the Lab distances between consecutive colors."""
    if len(colors) < 2:
        return 0.0
    lab = _lab_matrix(colors)
    return float(np.linalg.norm(np.diff(lab, axis=0), axis=1).sum())

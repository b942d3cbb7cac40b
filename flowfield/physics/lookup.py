"""
Spatial lookup module for FlowField.

Given a field-space position, find the nearest field point and return its
flow vector. Three search methods are available:

    grid    O(1) index arithmetic on the regular grid (default)
    scan    linear scan over every point, first-encountered wins ties
    kdtree  scipy cKDTree query

Because both supported metrics are separable per axis, 'grid' and 'scan'
select the same point, including for ties. Results can be memoized in a
LookupCache keyed by quantized position.
"""

from dataclasses import dataclass

import numpy as np

from .. import config
from ..errors import FieldConfigurationError

METRICS = ('euclidean', 'manhattan')
METHODS = ('grid', 'scan', 'kdtree')


@dataclass(frozen=True)
class FlowVector:
    """Flow direction and magnitude at a position."""

    u: float
    v: float


@dataclass(frozen=True)
class LookupResult:
    """
    Outcome of a nearest-point query.

    Attributes:
        vector: Flow vector of the matched point
        point: Matched FieldPoint, None for a non-finite query
        index: Row-major index of the matched point, -1 if none
        distance: Distance from the query to the matched point
        cached: True when served from a LookupCache
    """

    vector: FlowVector
    point: object
    index: int
    distance: float
    cached: bool = False


NO_MATCH = LookupResult(FlowVector(float('nan'), float('nan')), None, -1, float('nan'))


def _round_half_up(value):
    return int(np.floor(value + 0.5))


class LookupCache:
    """
    Memo of lookup results keyed by quantized position.

    A hit returns the result computed for the first query that fell into the
    same bucket, so results are exact only up to the quantization step.
    """

    def __init__(self, scale_factor):
        self.resolution = config.cache_resolution(scale_factor)
        self._entries = {}
        self.hits = 0
        self.misses = 0

    def key(self, x, y):
        return (_round_half_up(x * self.resolution), _round_half_up(y * self.resolution))

    def get(self, key):
        result = self._entries.get(key)
        if result is None:
            self.misses += 1
        else:
            self.hits += 1
        return result

    def put(self, key, result):
        self._entries[key] = result

    def clear(self, scale_factor=None):
        """Drop all entries; a new scale factor also changes the resolution."""
        self._entries.clear()
        self.hits = 0
        self.misses = 0
        if scale_factor is not None:
            self.resolution = config.cache_resolution(scale_factor)

    def __len__(self):
        return len(self._entries)

    def __contains__(self, key):
        return key in self._entries


def _check_options(metric, method):
    if metric not in METRICS:
        raise FieldConfigurationError(f"Expected metric to be one of {METRICS}. Got {metric!r}.")
    if method not in METHODS:
        raise FieldConfigurationError(f"Expected lookup method to be one of {METHODS}. Got {method!r}.")


def distance(metric, dx, dy):
    """Distance for coordinate differences under the given metric."""
    if metric == 'manhattan':
        return np.abs(dx) + np.abs(dy)
    return np.hypot(dx, dy)


def scan_nearest_index(field, x, y, metric='euclidean'):
    """Index of the nearest point by scanning every point."""
    distances = distance(metric, field.xs - x, field.ys - y)
    # argmin returns the first occurrence of the minimum
    return int(np.argmin(distances))


def grid_nearest_index(field, x, y):
    """
    Index of the nearest point computed from the grid layout.

    Each axis is rounded to the nearest sample, half-way values going to the
    lower sample, then clipped into the grid.
    """
    step = field.step
    last = field.steps - 1
    j = min(max(int(np.ceil(x / step - 0.5)), 0), last)
    i = min(max(int(np.ceil(y / step - 0.5)), 0), last)
    return i * field.steps + j


def kdtree_nearest_index(field, x, y, metric='euclidean'):
    """Index of the nearest point from the field's KD-tree."""
    p = 1 if metric == 'manhattan' else 2
    _, index = field.kdtree.query((x, y), p=p)
    return int(index)


def nearest(field, x, y, metric=None, method=None, cache=None):
    """
    Flow vector of the field point nearest to (x, y).

    Args:
        field (FlowField): Field to search
        x, y (float): Field-space query position
        metric (str, optional): 'euclidean' or 'manhattan'
        method (str, optional): 'grid', 'scan' or 'kdtree'
        cache (LookupCache, optional): Memo to consult and fill

    Returns:
        LookupResult: The match; a NaN vector and no point when the query
        position is not finite
    """
    if metric is None:
        metric = config.DEFAULT_METRIC
    if method is None:
        method = config.DEFAULT_LOOKUP_METHOD
    _check_options(metric, method)

    if not (np.isfinite(x) and np.isfinite(y)):
        return NO_MATCH

    key = None
    if cache is not None:
        key = cache.key(x, y)
        hit = cache.get(key)
        if hit is not None:
            return hit

    if method == 'grid':
        index = grid_nearest_index(field, x, y)
    elif method == 'kdtree':
        index = kdtree_nearest_index(field, x, y, metric)
    else:
        index = scan_nearest_index(field, x, y, metric)

    point = field.points[index]
    result = LookupResult(
        vector=FlowVector(point.u, point.v),
        point=point,
        index=index,
        distance=float(distance(metric, point.x - x, point.y - y)),
    )

    if cache is not None:
        cache.put(key, LookupResult(result.vector, point, index, result.distance, cached=True))
    return result

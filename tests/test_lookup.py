import math

import numpy as np
import pytest

from flowfield import config
from flowfield.errors import FieldConfigurationError
from flowfield.physics.lookup import (
    METHODS, METRICS, NO_MATCH, FlowVector, LookupCache, grid_nearest_index, nearest,
    scan_nearest_index,
)


@pytest.mark.parametrize("method", METHODS)
@pytest.mark.parametrize("metric", METRICS)
def test_exact_at_sample_points(small_field, method, metric):
    for index, point in enumerate(small_field.points):
        result = nearest(small_field, point.x, point.y, metric=metric, method=method)
        assert result.point == point
        assert result.index == index
        assert result.distance == 0.0
        assert result.vector == FlowVector(point.u, point.v)


@pytest.mark.parametrize("metric", METRICS)
def test_grid_matches_scan(small_field, metric):
    rng = np.random.default_rng(7)
    # Include positions outside the field on every side
    for x, y in rng.uniform(-3.0, 13.0, size=(500, 2)):
        assert grid_nearest_index(small_field, x, y) == scan_nearest_index(small_field, x, y, metric)


@pytest.mark.parametrize("metric", METRICS)
def test_kdtree_matches_scan(small_field, metric):
    rng = np.random.default_rng(11)
    for x, y in rng.uniform(0.0, 10.0, size=(200, 2)):
        by_tree = nearest(small_field, x, y, metric=metric, method='kdtree')
        by_scan = nearest(small_field, x, y, metric=metric, method='scan')
        assert by_tree.point == by_scan.point


def test_ties_go_to_first_point(small_field):
    step = small_field.step
    # Half way between the first two samples on both axes
    x = y = step / 2
    for method in ('scan', 'grid'):
        result = nearest(small_field, x, y, method=method)
        assert result.index == 0


def test_query_outside_field_clamps_to_edge(small_field):
    result = nearest(small_field, 50.0, -50.0, method='grid')
    assert result.point.x == small_field.xs.max()
    assert result.point.y == 0.0


@pytest.mark.parametrize("method", METHODS)
def test_non_finite_query_propagates_nan(small_field, method):
    result = nearest(small_field, float('nan'), 1.0, method=method)
    assert result is NO_MATCH
    assert result.point is None
    assert math.isnan(result.vector.u) and math.isnan(result.vector.v)


def test_unknown_options_are_rejected(small_field):
    with pytest.raises(FieldConfigurationError):
        nearest(small_field, 1.0, 1.0, metric='chebyshev')
    with pytest.raises(FieldConfigurationError):
        nearest(small_field, 1.0, 1.0, method='octree')


@pytest.mark.parametrize("scale, expected", [(72, 50), (80, 50), (79.9, 50), (160, 90), (33, 30)])
def test_cache_resolution(scale, expected):
    assert config.cache_resolution(scale) == expected


def test_cache_hit_returns_fresh_result(small_field):
    cache = LookupCache(80.0)
    first = nearest(small_field, 2.5, 3.75, cache=cache)
    assert not first.cached
    assert cache.misses == 1 and len(cache) == 1

    second = nearest(small_field, 2.5, 3.75, cache=cache)
    assert second.cached
    assert cache.hits == 1
    assert second.vector == first.vector
    assert second.point == first.point


def test_cache_quantizes_nearby_queries(small_field):
    cache = LookupCache(80.0)
    assert cache.resolution == 50
    nearest(small_field, 1.0, 1.0, cache=cache)
    # 1.001 * 50 rounds to the same key as 1.0 * 50
    result = nearest(small_field, 1.001, 1.0, cache=cache)
    assert result.cached
    assert cache.key(1.0, 1.0) == cache.key(1.001, 1.0) == (50, 50)


def test_non_finite_queries_are_not_cached(small_field):
    cache = LookupCache(80.0)
    nearest(small_field, float('inf'), 0.0, cache=cache)
    assert len(cache) == 0


def test_cache_clear_with_new_scale(small_field):
    cache = LookupCache(80.0)
    nearest(small_field, 4.0, 4.0, cache=cache)
    nearest(small_field, 4.0, 4.0, cache=cache)
    cache.clear(160.0)
    assert len(cache) == 0
    assert cache.hits == 0 and cache.misses == 0
    assert cache.resolution == 90

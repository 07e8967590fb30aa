"""Tests for frontal + oblique view fusion.

The profile label compares the oblique value with the frontal one and is a
heuristic; those tests are marked best_effort.
"""

import pytest

from reading.errors import DegenerateMetric
from reading.fusion import fuse, profile_labels
from reading.metrics import MetricSet

from helpers import metric_set


class TestFuse:
  def test_depth_from_diagonal(self):
    front = metric_set(bridge_projection=0.20, eye_aspect=3.0)
    diag = metric_set(bridge_projection=0.30, eye_aspect=2.0)
    fused = fuse(front, diag)
    assert fused['bridge_projection'] == 0.30
    assert fused['eye_aspect'] == 3.0

  def test_frontal_without_depth(self):
    front = MetricSet({'eye_aspect': 3.0}, {'bridge_projection': DegenerateMetric('bridge_projection', 'no depth')})
    fused = fuse(front, metric_set(bridge_projection=0.3))
    assert fused['bridge_projection'] == 0.3
    assert 'bridge_projection' not in fused.degenerate

  def test_diagonal_without_depth_keeps_frontal(self):
    diag = MetricSet({}, {'bridge_projection': DegenerateMetric('bridge_projection', 'no depth')})
    assert fuse(metric_set(bridge_projection=0.2), diag)['bridge_projection'] == 0.2


@pytest.mark.best_effort
class TestProfileLabel:
  def test_higher_in_profile(self):
    labels = profile_labels(metric_set(bridge_projection=0.20), metric_set(bridge_projection=0.26))
    assert [t.key for t in labels] == ['profile.profile_bridge']
    assert labels[0].score == pytest.approx(0.06)

  def test_view_order_matters(self):
    assert profile_labels(metric_set(bridge_projection=0.26), metric_set(bridge_projection=0.20)) == ()

  def test_equal_views(self):
    assert profile_labels(metric_set(bridge_projection=0.2), metric_set(bridge_projection=0.2)) == ()

  def test_missing_view_value(self):
    assert profile_labels(metric_set(), metric_set(bridge_projection=0.3)) == ()

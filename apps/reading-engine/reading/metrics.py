"""Geometric ratios over one detected face.

Every length is measured with the aspect-corrected distance of
:func:`reading.frame.aspect_distance` and divided by the reference
distance D, so values do not depend on image resolution or pixel aspect.
"""
import logging
import math
from collections.abc import Mapping
from functools import cached_property

import numpy as np

from reading.errors import DegenerateMetric
from reading.frame import aspect_distance
from reading import landmarks as lm

logger = logging.getLogger(__name__)

REQUIRED = (
  lm.RIGHT_EYE_OUTER, lm.RIGHT_EYE_INNER, lm.LEFT_EYE_INNER, lm.LEFT_EYE_OUTER,
  lm.RIGHT_LID_UPPER, lm.RIGHT_LID_LOWER, lm.LEFT_LID_UPPER, lm.LEFT_LID_LOWER,
  lm.RIGHT_BROW, lm.LEFT_BROW,
  lm.NOSE_TOP, lm.NOSE_MID, lm.NOSE_TIP, lm.NOSE_RIGHT, lm.NOSE_LEFT,
  lm.MOUTH_RIGHT, lm.MOUTH_LEFT, lm.LIP_UPPER, lm.LIP_LOWER,
  lm.FOREHEAD_TOP, lm.GLABELLA, lm.CHIN,
  lm.CHEEK_RIGHT, lm.CHEEK_LEFT, lm.JAW_RIGHT, lm.JAW_LEFT,
)


class MetricSet(Mapping):
  """Read-only metric name -> value mapping.

  Degenerate metrics are kept apart in ``degenerate``; indexing one of them
  re-raises its :class:`DegenerateMetric`.
  """

  def __init__(self, values, degenerate=None):
    self._values = dict(values)
    self._degenerate = dict(degenerate or {})

  @property
  def degenerate(self):
    return dict(self._degenerate)

  def __getitem__(self, name):
    if name in self._degenerate:
      raise self._degenerate[name]
    return self._values[name]

  def get(self, name, default=None):
    return self._values.get(name, default)

  def __contains__(self, name):
    return name in self._values

  def __iter__(self):
    return iter(self._values)

  def __len__(self):
    return len(self._values)

  def __repr__(self):
    return 'MetricSet(%r, degenerate=%r)' % (self._values, sorted(self._degenerate))

  def replace(self, values=None, degenerate=None):
    """Copy with some values swapped in; a name lands in exactly one side."""
    vals = dict(self._values)
    degs = dict(self._degenerate)
    for k, v in (values or {}).items():
      vals[k] = v
      degs.pop(k, None)
    for k, e in (degenerate or {}).items():
      degs[k] = e
      vals.pop(k, None)
    return MetricSet(vals, degs)


def _div(name, num, den):
  if den == 0 or not math.isfinite(den):
    raise DegenerateMetric(name)
  return num / den


class _Geometry:
  def __init__(self, detection, frame):
    self.det = detection
    self.D = frame.distance
    self.ar = frame.aspect_ratio

  def p(self, i):
    return self.det.point(i)

  def d(self, i, j):
    return aspect_distance(self.p(i), self.p(j), self.ar)

  def tilt(self, inner, outer, mirrored):
    # image y grows downward: an outer corner above the inner one gives a positive tilt
    a, b = self.p(inner), self.p(outer)
    run = (a.x - b.x) if not mirrored else (b.x - a.x)
    return float(np.degrees(np.arctan2(a.y - b.y, run * self.ar)))

  @cached_property
  def eye_heights(self):
    # vertical lid gap; x offsets between the lid points are not counted
    return (abs(self.p(lm.RIGHT_LID_LOWER).y - self.p(lm.RIGHT_LID_UPPER).y),
            abs(self.p(lm.LEFT_LID_LOWER).y - self.p(lm.LEFT_LID_UPPER).y))

  @cached_property
  def eye_widths(self):
    return (self.d(lm.RIGHT_EYE_OUTER, lm.RIGHT_EYE_INNER), self.d(lm.LEFT_EYE_INNER, lm.LEFT_EYE_OUTER))

  @cached_property
  def eye_height(self):
    return float(np.mean(self.eye_heights))

  def sclera(self, name, upper_side):
    """White shown above (or below) the iris centre, as a share of the lid gap."""
    out = []
    for centre, upper, lower, h in (
      (lm.RIGHT_IRIS, lm.RIGHT_LID_UPPER, lm.RIGHT_LID_LOWER, self.eye_heights[0]),
      (lm.LEFT_IRIS, lm.LEFT_LID_UPPER, lm.LEFT_LID_LOWER, self.eye_heights[1]),
    ):
      if not self.det.has(centre):
        raise DegenerateMetric(name, 'no iris landmarks')
      iris_y = self.p(centre).y
      gap = iris_y - self.p(upper).y if upper_side else self.p(lower).y - iris_y
      out.append(_div(name, max(0.0, gap), h))
    return float(np.mean(out))

  def depth(self, name, i):
    z = self.p(i).z
    if z is None:
      raise DegenerateMetric(name, 'no depth')
    return z


# each entry computes one metric; order is the report order
def _eye_aspect(g):
  return _div('eye_aspect', float(np.mean(g.eye_widths)), g.eye_height)


def _sclera_upper(g):
  return g.sclera('sclera_upper', True)


def _sclera_lower(g):
  return g.sclera('sclera_lower', False)


def _sclera_balance(g):
  return g.sclera('sclera_balance', False) - g.sclera('sclera_balance', True)


def _sclera_max(g):
  return max(g.sclera('sclera_max', True), g.sclera('sclera_max', False))


def _eye_tilt(g):
  right = g.tilt(lm.RIGHT_EYE_INNER, lm.RIGHT_EYE_OUTER, False)
  left = g.tilt(lm.LEFT_EYE_INNER, lm.LEFT_EYE_OUTER, True)
  return (right + left) / 2.0


def _head_roll(g):
  a, b = g.p(lm.RIGHT_EYE_OUTER), g.p(lm.LEFT_EYE_OUTER)
  return float(np.degrees(-np.arctan2(b.y - a.y, (b.x - a.x) * g.ar)))


def _brow_height_ratio(g):
  brow = (g.d(lm.RIGHT_BROW, lm.RIGHT_EYE_OUTER) + g.d(lm.LEFT_BROW, lm.LEFT_EYE_OUTER)) / 2.0
  return brow / g.D


def _bridge_projection(g):
  name = 'bridge_projection'
  dz = abs(g.depth(name, lm.NOSE_TIP) - g.depth(name, lm.NOSE_TOP))
  # z is scaled like x, so compare against D expressed in width units
  return _div(name, dz, g.D / g.ar)


def _bridge_deviation(g):
  name = 'bridge_deviation'
  a, b, m = g.p(lm.NOSE_TOP), g.p(lm.NOSE_TIP), g.p(lm.NOSE_MID)
  za, zb, zm = g.depth(name, lm.NOSE_TOP), g.depth(name, lm.NOSE_TIP), g.depth(name, lm.NOSE_MID)
  ux, uy = (b.x - a.x) * g.ar, b.y - a.y
  t = _div(name, (m.x - a.x) * g.ar * ux + (m.y - a.y) * uy, ux * ux + uy * uy)
  expected = za + t * (zb - za)
  # more negative z is closer to the camera
  return _div(name, expected - zm, g.D / g.ar)


def _mouth_corner_tilt(g):
  mid_y = (g.p(lm.LIP_UPPER).y + g.p(lm.LIP_LOWER).y) / 2.0
  corner_y = (g.p(lm.MOUTH_RIGHT).y + g.p(lm.MOUTH_LEFT).y) / 2.0
  return _div('mouth_corner_tilt', mid_y - corner_y, g.d(lm.MOUTH_RIGHT, lm.MOUTH_LEFT))


def _eye_asymmetry(g):
  hr, hl = g.eye_heights
  return _div('eye_asymmetry', abs(hr - hl), (hr + hl) / 2.0)


def _mouth_asymmetry(g):
  return abs(g.p(lm.MOUTH_RIGHT).y - g.p(lm.MOUTH_LEFT).y) / g.D


_METRICS = (
  ('reference_distance', lambda g: g.D),
  ('aspect_ratio', lambda g: g.ar),
  ('eye_height', lambda g: g.eye_height),
  ('eye_width', lambda g: float(np.mean(g.eye_widths))),
  ('eye_aspect', _eye_aspect),
  ('eye_height_ratio', lambda g: g.eye_height / g.D),
  ('sclera_upper', _sclera_upper),
  ('sclera_lower', _sclera_lower),
  ('sclera_balance', _sclera_balance),
  ('sclera_max', _sclera_max),
  ('eye_tilt', _eye_tilt),
  ('head_roll', _head_roll),
  ('brow_height_ratio', _brow_height_ratio),
  ('nose_length_ratio', lambda g: g.d(lm.NOSE_TOP, lm.NOSE_TIP) / g.D),
  ('nose_width_ratio', lambda g: g.d(lm.NOSE_RIGHT, lm.NOSE_LEFT) / g.D),
  ('bridge_projection', _bridge_projection),
  ('bridge_deviation', _bridge_deviation),
  ('mouth_width_ratio', lambda g: g.d(lm.MOUTH_RIGHT, lm.MOUTH_LEFT) / g.D),
  ('mouth_corner_tilt', _mouth_corner_tilt),
  ('forehead_height_ratio', lambda g: g.d(lm.FOREHEAD_TOP, lm.GLABELLA) / g.D),
  ('jaw_width_ratio', lambda g: g.d(lm.JAW_RIGHT, lm.JAW_LEFT) / g.D),
  ('cheek_width_ratio', lambda g: g.d(lm.CHEEK_RIGHT, lm.CHEEK_LEFT) / g.D),
  ('face_height_ratio', lambda g: g.d(lm.FOREHEAD_TOP, lm.CHIN) / g.D),
  ('jaw_cheek_ratio', lambda g: _div('jaw_cheek_ratio', g.d(lm.JAW_RIGHT, lm.JAW_LEFT), g.d(lm.CHEEK_RIGHT, lm.CHEEK_LEFT))),
  ('width_height_ratio', lambda g: _div('width_height_ratio', g.d(lm.CHEEK_RIGHT, lm.CHEEK_LEFT), g.d(lm.FOREHEAD_TOP, lm.CHIN))),
  ('fullness_ratio', lambda g: _div('fullness_ratio', g.d(lm.CHEEK_RIGHT, lm.CHEEK_LEFT), g.d(lm.JAW_RIGHT, lm.JAW_LEFT))),
  ('eye_asymmetry', _eye_asymmetry),
  ('mouth_asymmetry', _mouth_asymmetry),
)

METRIC_NAMES = tuple(name for name, _ in _METRICS)


def extract_metrics(detection, frame):
  detection.require(*REQUIRED)
  g = _Geometry(detection, frame)
  values, degenerate = {}, {}
  for name, fn in _METRICS:
    try:
      v = float(fn(g))
      if not math.isfinite(v):
        raise DegenerateMetric(name, 'non-finite value')
      values[name] = v
    except DegenerateMetric as e:
      # keep the error under the metric being computed
      if e.metric != name:
        e = DegenerateMetric(name, e.reason)
      logger.warning('degenerate metric %s (%s)', name, e.reason)
      degenerate[name] = e
  return MetricSet(values, degenerate)

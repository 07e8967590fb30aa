"""Rule records and the two shipped rule books.

A rule scores one label on one axis from one or more metric terms. In soft
mode a term is a clipped linear ramp, in hard mode an inclusive cut-off, so
the same tables describe both classification styles.
"""
import math
from collections.abc import Mapping
from dataclasses import dataclass, replace

from reading.errors import ConfigurationError

SOFT, HARD = 'soft', 'hard'
MODES = (SOFT, HARD)


def clip(v):
  return min(1.0, max(0.0, v))


@dataclass(frozen=True)
class Term:
  metric: str
  bound: float
  span: float = None
  falling: bool = False
  absolute: bool = False

  def score(self, value, mode=SOFT):
    v = abs(value) if self.absolute else value
    if mode == HARD:
      hit = v <= self.bound if self.falling else v >= self.bound
      return 1.0 if hit else 0.0
    if self.falling:
      return clip((self.bound - v) / self.span)
    return clip((v - self.bound) / self.span)


@dataclass(frozen=True)
class Rule:
  axis: str
  label: str
  terms: tuple
  weights: tuple = None    # None: product of terms, else weighted sum
  min_score: float = 0.0   # exclusive axes: winner must score above this
  priority: bool = False

  @property
  def key(self):
    return '%s.%s' % (self.axis, self.label)

  @property
  def metrics(self):
    return tuple(t.metric for t in self.terms)

  def score(self, metrics, mode=SOFT):
    parts = [t.score(metrics[t.metric], mode) for t in self.terms]
    if self.weights is None:
      return float(math.prod(parts))
    return float(sum(w * s for w, s in zip(self.weights, parts)))


@dataclass(frozen=True)
class Axis:
  name: str
  exclusive: bool = True
  fallback: str = None
  priority_floor: float = None


AXES = (
  Axis('face_shape', fallback='oval'),
  Axis('eye', fallback='round', priority_floor=0.05),
  Axis('nose_bridge', fallback='low'),
  Axis('nose', exclusive=False),
  Axis('bridge_line', exclusive=False),
  Axis('mouth', fallback='small'),
  Axis('mouth_corners', exclusive=False),
  Axis('build'),
  Axis('jaw', exclusive=False),
  Axis('forehead', exclusive=False),
  Axis('symmetry', exclusive=False),
)


def _t(metric, bound, span=None, falling=False, absolute=False):
  return Term(metric, bound, span, falling, absolute)


SOFT_RULES = (
  Rule('face_shape', 'square', (_t('jaw_cheek_ratio', 0.96, 0.08), _t('width_height_ratio', 0.70, 0.10)),
       weights=(0.7, 0.3), min_score=0.5),
  Rule('face_shape', 'round', (_t('width_height_ratio', 0.76, 0.10), _t('jaw_cheek_ratio', 0.96, 0.10, falling=True)),
       weights=(0.6, 0.4), min_score=0.5),
  Rule('face_shape', 'heart', (_t('jaw_cheek_ratio', 0.84, 0.08, falling=True), _t('forehead_height_ratio', 1.30, 0.30)),
       weights=(0.6, 0.4), min_score=0.5),
  Rule('face_shape', 'oblong', (_t('width_height_ratio', 0.66, 0.08, falling=True),), min_score=0.5),

  Rule('eye', 'lower_sanpaku', (_t('sclera_balance', 0.01, 0.08), _t('sclera_lower', 0.08, 0.05)), priority=True),
  Rule('eye', 'upper_sanpaku', (_t('sclera_balance', -0.01, 0.08, falling=True), _t('sclera_upper', 0.08, 0.05)),
       priority=True),
  # on a tie round beats narrow and phoenix, narrow beats phoenix
  Rule('eye', 'round', (_t('eye_aspect', 2.7, 0.8, falling=True), _t('eye_height_ratio', 0.22, 0.12),
                        _t('eye_tilt', 14.0, 8.0, falling=True, absolute=True))),
  Rule('eye', 'narrow', (_t('eye_aspect', 3.1, 0.8), _t('eye_height_ratio', 0.31, 0.08, falling=True))),
  Rule('eye', 'phoenix', (_t('eye_aspect', 2.7, 0.8), _t('eye_tilt', 2.0, 8.0), _t('sclera_max', 0.20, 0.10, falling=True),
                          _t('eye_height_ratio', 0.18, 0.10))),

  Rule('nose_bridge', 'low', (_t('bridge_projection', 0.22, 0.08, falling=True),)),
  Rule('nose_bridge', 'high', (_t('bridge_projection', 0.24, 0.10),)),

  Rule('nose', 'long', (_t('nose_length_ratio', 1.45, 0.20),)),
  Rule('nose', 'broad', (_t('nose_width_ratio', 1.10, 0.20),)),

  Rule('bridge_line', 'aquiline', (_t('bridge_deviation', 0.02, 0.04),)),
  Rule('bridge_line', 'concave', (_t('bridge_deviation', -0.02, 0.04, falling=True),)),

  Rule('mouth', 'small', (_t('mouth_width_ratio', 1.50, 0.20, falling=True),)),
  Rule('mouth', 'wide', (_t('mouth_width_ratio', 1.50, 0.20),)),

  Rule('mouth_corners', 'upturned', (_t('mouth_corner_tilt', 0.02, 0.04),)),
  Rule('mouth_corners', 'downturned', (_t('mouth_corner_tilt', -0.02, 0.04, falling=True),)),

  Rule('build', 'bony', (_t('fullness_ratio', 1.10, 0.10),)),
  Rule('build', 'balanced', (_t('fullness_ratio', 1.05, 0.05), _t('fullness_ratio', 1.20, 0.05, falling=True))),
  Rule('build', 'fleshy', (_t('fullness_ratio', 1.10, 0.10, falling=True),)),

  Rule('jaw', 'broad', (_t('jaw_width_ratio', 3.40, 0.30),)),
  Rule('forehead', 'high', (_t('forehead_height_ratio', 1.40, 0.30),)),

  Rule('symmetry', 'uneven_eyes', (_t('eye_asymmetry', 0.10, 0.10),)),
  Rule('symmetry', 'uneven_mouth', (_t('mouth_asymmetry', 0.04, 0.04),)),
)

HARD_RULES = (
  Rule('face_shape', 'square', (_t('jaw_cheek_ratio', 0.98), _t('width_height_ratio', 0.70)),
       weights=(0.7, 0.3), min_score=0.5),
  Rule('face_shape', 'round', (_t('width_height_ratio', 0.78), _t('jaw_cheek_ratio', 0.90, falling=True)),
       weights=(0.6, 0.4), min_score=0.5),
  Rule('face_shape', 'heart', (_t('jaw_cheek_ratio', 0.82, falling=True), _t('forehead_height_ratio', 1.45)),
       weights=(0.6, 0.4), min_score=0.5),
  Rule('face_shape', 'oblong', (_t('width_height_ratio', 0.64, falling=True),), min_score=0.5),

  Rule('eye', 'lower_sanpaku', (_t('sclera_balance', 0.18), _t('sclera_lower', 0.28)), priority=True),
  Rule('eye', 'upper_sanpaku', (_t('sclera_balance', -0.18, falling=True), _t('sclera_upper', 0.28)), priority=True),
  Rule('eye', 'round', (_t('eye_aspect', 2.5, falling=True), _t('eye_height_ratio', 0.30))),
  Rule('eye', 'narrow', (_t('eye_aspect', 3.3), _t('eye_height_ratio', 0.27, falling=True))),
  Rule('eye', 'phoenix', (_t('eye_aspect', 3.0), _t('eye_tilt', 5.0), _t('eye_height_ratio', 0.24))),

  Rule('nose_bridge', 'low', (_t('bridge_projection', 0.22, falling=True),)),
  Rule('nose_bridge', 'high', (_t('bridge_projection', 0.24),)),

  Rule('nose', 'long', (_t('nose_length_ratio', 1.55),)),
  Rule('nose', 'broad', (_t('nose_width_ratio', 1.20),)),

  Rule('bridge_line', 'aquiline', (_t('bridge_deviation', 0.04),)),
  Rule('bridge_line', 'concave', (_t('bridge_deviation', -0.04, falling=True),)),

  Rule('mouth', 'small', (_t('mouth_width_ratio', 1.60, falling=True),)),
  Rule('mouth', 'wide', (_t('mouth_width_ratio', 1.60),)),

  Rule('mouth_corners', 'upturned', (_t('mouth_corner_tilt', 0.04),)),
  Rule('mouth_corners', 'downturned', (_t('mouth_corner_tilt', -0.04, falling=True),)),

  # bands meet at 1.05 and 1.15; the upper band takes the shared edge
  Rule('build', 'bony', (_t('fullness_ratio', 1.15),)),
  Rule('build', 'balanced', (_t('fullness_ratio', 1.05), _t('fullness_ratio', 1.15, falling=True))),
  Rule('build', 'fleshy', (_t('fullness_ratio', 1.05, falling=True),)),

  Rule('jaw', 'broad', (_t('jaw_width_ratio', 3.60),)),
  Rule('forehead', 'high', (_t('forehead_height_ratio', 1.60),)),

  Rule('symmetry', 'uneven_eyes', (_t('eye_asymmetry', 0.15),)),
  Rule('symmetry', 'uneven_mouth', (_t('mouth_asymmetry', 0.06),)),
)

RULE_BOOKS = {SOFT: SOFT_RULES, HARD: HARD_RULES}


def validate_rules(rules, mode):
  axes = {a.name for a in AXES}
  for r in rules:
    if r.axis not in axes:
      raise ConfigurationError('%s: unknown axis' % r.key)
    if not r.terms:
      raise ConfigurationError('%s: rule has no terms' % r.key)
    if not 0.0 <= r.min_score <= 1.0:
      raise ConfigurationError('%s: min_score %r outside [0, 1]' % (r.key, r.min_score))
    if r.weights is not None:
      if len(r.weights) != len(r.terms):
        raise ConfigurationError('%s: %d weights for %d terms' % (r.key, len(r.weights), len(r.terms)))
      if any(w < 0 for w in r.weights):
        raise ConfigurationError('%s: negative weight' % r.key)
      if sum(r.weights) > 1.0 + 1e-9:
        raise ConfigurationError('%s: weights sum above 1' % r.key)
    for t in r.terms:
      if not isinstance(t.bound, (int, float)) or not math.isfinite(t.bound):
        raise ConfigurationError('%s: bound for %s must be a finite number' % (r.key, t.metric))
      if mode == SOFT and (t.span is None or not t.span > 0):
        raise ConfigurationError('%s: clip span for %s must be positive, got %r' % (r.key, t.metric, t.span))
  return rules


def _override_rule(rule, spec):
  spec = dict(spec)
  changes = {}
  if 'weights' in spec:
    w = spec.pop('weights')
    changes['weights'] = None if w is None else tuple(float(x) for x in w)
  if 'min_score' in spec:
    changes['min_score'] = float(spec.pop('min_score'))
  terms = list(rule.terms)
  for metric, fields in spec.items():
    idx = [i for i, t in enumerate(terms) if t.metric == metric]
    if not idx:
      raise ConfigurationError('%s: no term on metric %r' % (rule.key, metric))
    if not isinstance(fields, Mapping):
      raise ConfigurationError('%s.%s: expected an object of term fields' % (rule.key, metric))
    unknown = set(fields) - {'bound', 'span'}
    if unknown:
      raise ConfigurationError('%s.%s: unknown term field(s) %s' % (rule.key, metric, ', '.join(sorted(unknown))))
    # a metric may appear twice (band rules); overrides hit every occurrence
    for i in idx:
      terms[i] = replace(terms[i], **{k: float(v) for k, v in fields.items()})
  if terms != list(rule.terms):
    changes['terms'] = tuple(terms)
  return replace(rule, **changes) if changes else rule


def apply_overrides(rules, overrides):
  """Return a copy of ``rules`` with per-rule constants replaced.

  ``overrides`` maps ``'axis.label'`` to ``{metric: {'bound', 'span'},
  'weights': [...], 'min_score': x}``.
  """
  if not overrides:
    return tuple(rules)
  by_key = {r.key: r for r in rules}
  unknown = set(overrides) - set(by_key)
  if unknown:
    raise ConfigurationError('unknown rule(s): %s' % ', '.join(sorted(unknown)))
  try:
    return tuple(_override_rule(r, overrides[r.key]) if r.key in overrides else r for r in rules)
  except (TypeError, ValueError) as e:
    if isinstance(e, ConfigurationError):
      raise
    raise ConfigurationError('bad rule override: %s' % e) from e

import logging
from dataclasses import dataclass, field

from reading.config import EngineConfig
from reading.rules import AXES

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TraitLabel:
  axis: str
  label: str
  rule: str     # key of the rule that produced it, or '<axis>.fallback'
  score: float

  @property
  def key(self):
    return '%s.%s' % (self.axis, self.label)


@dataclass(frozen=True)
class Classification:
  face_shape: TraitLabel
  traits: tuple
  scores: dict = field(default_factory=dict)

  @property
  def labels(self):
    return tuple(t.key for t in self.traits)


def _best(scored):
  # first declared wins ties
  best = None
  for s, r in scored:
    if best is None or s > best[0]:
      best = (s, r)
  return best


def _pick(axis, rules, metrics, mode, scores):
  if axis.priority_floor is not None:
    prio = []
    for r in rules:
      if r.priority:
        s = r.score(metrics, mode)
        scores[r.key] = s
        prio.append((s, r))
    hits = [(s, r) for s, r in prio if s >= axis.priority_floor]
    if hits:
      s, r = _best(hits)
      return TraitLabel(axis.name, r.label, r.key, s)
    rules = [r for r in rules if not r.priority]

  scored = []
  for r in rules:
    s = r.score(metrics, mode)
    scores[r.key] = s
    scored.append((s, r))
  best = _best(scored)
  if best is not None and best[0] > best[1].min_score:
    return TraitLabel(axis.name, best[1].label, best[1].key, best[0])
  # nothing measurable on this axis: no fallback either
  if axis.fallback is not None and best is not None:
    return TraitLabel(axis.name, axis.fallback, '%s.fallback' % axis.name, best[0])
  return None


def classify(metrics, config=None):
  """Map a MetricSet to a face shape, ordered trait labels and raw scores.

  Pure function of ``metrics`` and ``config``. Rules whose metrics are
  missing or degenerate are skipped without affecting the rest.
  """
  cfg = config or EngineConfig()
  rules = cfg.rules()
  scores = {}
  traits = []
  for axis in AXES:
    usable = []
    for r in rules:
      if r.axis != axis.name:
        continue
      if all(m in metrics for m in r.metrics):
        usable.append(r)
      else:
        logger.debug('skip %s: metric unavailable', r.key)
    if axis.exclusive:
      t = _pick(axis, usable, metrics, cfg.mode, scores)
      if t is not None:
        traits.append(t)
    else:
      for r in usable:
        s = r.score(metrics, cfg.mode)
        scores[r.key] = s
        if s >= cfg.activation:
          traits.append(TraitLabel(axis.name, r.label, r.key, s))

  shape = next((t for t in traits if t.axis == 'face_shape'), None)
  if shape is not None:
    traits = [shape] + [t for t in traits if t is not shape]
  logger.debug('classified (%s): %s', cfg.mode, ', '.join(t.key for t in traits))
  return Classification(face_shape=shape, traits=tuple(traits), scores=scores)

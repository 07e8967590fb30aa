import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from pathlib import Path
from types import MappingProxyType

from reading.errors import ConfigurationError
from reading.rules import MODES, SOFT, RULE_BOOKS, apply_overrides, validate_rules

logger = logging.getLogger(__name__)


def _freeze(v):
  # read-only copy of nested override objects
  if isinstance(v, Mapping):
    return MappingProxyType({k: _freeze(x) for k, x in v.items()})
  if isinstance(v, (list, tuple)):
    return tuple(_freeze(x) for x in v)
  return v


@dataclass(frozen=True)
class ProfileConfig:
  """Apparent age/sex heuristic used when no age model result is available."""

  age_base: float = 25.0
  face_height_pivot: float = 3.1    # face height / D
  face_height_gain: float = 25.0
  eye_open_pivot: float = 0.3       # eye height / eye width
  eye_open_gain: float = 60.0
  age_min: int = 15
  age_max: int = 85
  brow_weight: float = 0.3
  jaw_weight: float = 0.7
  male_cutoff: float = 1.2

  def __post_init__(self):
    if self.age_min > self.age_max:
      raise ConfigurationError('profile.age_min above profile.age_max')
    if self.brow_weight < 0 or self.jaw_weight < 0:
      raise ConfigurationError('profile weights must be non-negative')


@dataclass(frozen=True)
class FusionConfig:
  """Frontal + oblique view fusion."""

  depth_metrics: tuple = ('bridge_projection', 'bridge_deviation')
  profile_metric: str = 'bridge_projection'
  profile_label: str = 'profile_bridge'
  margin: float = 0.0

  def __post_init__(self):
    object.__setattr__(self, 'depth_metrics', tuple(self.depth_metrics))
    if self.margin < 0:
      raise ConfigurationError('fusion.margin must be non-negative')


@dataclass(frozen=True)
class EngineConfig:
  mode: str = SOFT
  activation: float = 0.5       # independent axes emit a label at or above this score
  overrides: dict = field(default_factory=dict)
  profile: ProfileConfig = field(default_factory=ProfileConfig)
  fusion: FusionConfig = field(default_factory=FusionConfig)

  def __post_init__(self):
    if self.mode not in MODES:
      raise ConfigurationError('mode must be one of %s, got %r' % (', '.join(MODES), self.mode))
    if not 0.0 <= self.activation <= 1.0:
      raise ConfigurationError('activation %r outside [0, 1]' % (self.activation,))
    if not isinstance(self.overrides, Mapping):
      raise ConfigurationError('overrides must be an object keyed by rule, got %s' % type(self.overrides).__name__)
    object.__setattr__(self, 'overrides', _freeze(self.overrides))
    # fail on construction rather than on first classify
    self.rules()

  def rules(self):
    return validate_rules(apply_overrides(RULE_BOOKS[self.mode], self.overrides), self.mode)

  @classmethod
  def from_dict(cls, d):
    d = dict(d or {})
    known = {f.name for f in fields(cls)}
    unknown = set(d) - known
    if unknown:
      raise ConfigurationError('unknown config key(s): %s' % ', '.join(sorted(unknown)))
    try:
      if 'profile' in d:
        d['profile'] = ProfileConfig(**d['profile'])
      if 'fusion' in d:
        d['fusion'] = FusionConfig(**d['fusion'])
      return cls(**d)
    except TypeError as e:
      raise ConfigurationError(str(e)) from e


def load_config(path):
  path = Path(path)
  try:
    raw = json.loads(path.read_text())
  except (OSError, json.JSONDecodeError) as e:
    raise ConfigurationError('cannot read config %s: %s' % (path, e)) from e
  cfg = EngineConfig.from_dict(raw)
  logger.info('loaded %s-mode config from %s (%d rule overrides)', cfg.mode, path, len(cfg.overrides))
  return cfg

from dataclasses import dataclass

from reading.config import ProfileConfig


@dataclass(frozen=True)
class ApparentProfile:
  age: int = None
  sex: str = None


def apparent_profile(metrics, config=None):
  """Coarse age/sex guess from face height, eye openness, brow height and jaw width.

  Only meant as a stand-in when no age/sex model result is available. Either
  field is None when its metrics are unavailable.
  """
  cfg = config or ProfileConfig()
  age = None
  if 'face_height_ratio' in metrics and metrics.get('eye_aspect'):
    eye_open = 1.0 / metrics['eye_aspect']
    raw = (cfg.age_base
           + (metrics['face_height_ratio'] - cfg.face_height_pivot) * cfg.face_height_gain
           + (cfg.eye_open_pivot - eye_open) * cfg.eye_open_gain)
    age = int(max(cfg.age_min, min(cfg.age_max, round(raw))))
  sex = None
  if 'brow_height_ratio' in metrics and 'jaw_width_ratio' in metrics:
    s = metrics['brow_height_ratio'] * cfg.brow_weight + metrics['jaw_width_ratio'] * cfg.jaw_weight
    sex = 'male' if s > cfg.male_cutoff else 'female'
  return ApparentProfile(age=age, sex=sex)

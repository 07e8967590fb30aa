import math
from dataclasses import dataclass

from reading.errors import MissingLandmark, ConfigurationError
from reading.landmarks import RIGHT_EYE_INNER, LEFT_EYE_INNER


@dataclass(frozen=True)
class ReferenceFrame:
  distance: float      # D, inner-eye-corner distance in aspect-corrected units
  aspect_ratio: float  # ar = width / height
  width: float
  height: float


def aspect_distance(a, b, ar=1.0):
  # landmark x and y are fractions of width and height; rescale x before measuring
  return math.hypot((b.x - a.x) * ar, b.y - a.y)


def reference_frame(detection, width, height):
  if not (width > 0 and height > 0):
    raise ConfigurationError('image size must be positive, got %sx%s' % (width, height))
  ar = float(width) / float(height)
  detection.require(RIGHT_EYE_INNER, LEFT_EYE_INNER)
  D = aspect_distance(detection.point(RIGHT_EYE_INNER), detection.point(LEFT_EYE_INNER), ar)
  if not (D > 0 and math.isfinite(D)):
    raise MissingLandmark((RIGHT_EYE_INNER, LEFT_EYE_INNER), 'inner eye corners coincide, no reference distance')
  return ReferenceFrame(distance=D, aspect_ratio=ar, width=float(width), height=float(height))

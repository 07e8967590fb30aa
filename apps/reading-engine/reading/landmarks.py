from collections import namedtuple
from dataclasses import dataclass

from reading.errors import NoFaceDetected, MissingLandmark, ConfigurationError

# MediaPipe face mesh indices (478 points with refined iris)
RIGHT_EYE_OUTER, RIGHT_EYE_INNER = 33, 133
LEFT_EYE_INNER, LEFT_EYE_OUTER = 362, 263
RIGHT_LID_UPPER, RIGHT_LID_LOWER = 159, 145
LEFT_LID_UPPER, LEFT_LID_LOWER = 386, 374
RIGHT_IRIS, LEFT_IRIS = 468, 473
RIGHT_IRIS_RIM = (469, 470, 471, 472)
LEFT_IRIS_RIM = (474, 475, 476, 477)
RIGHT_BROW, LEFT_BROW = 105, 334

NOSE_TOP, NOSE_MID, NOSE_TIP = 168, 197, 1
NOSE_RIGHT, NOSE_LEFT = 49, 279

MOUTH_RIGHT, MOUTH_LEFT = 61, 291
LIP_UPPER, LIP_LOWER = 13, 14

FOREHEAD_TOP, GLABELLA, CHIN = 10, 9, 152
CHEEK_RIGHT, CHEEK_LEFT = 234, 454
JAW_RIGHT, JAW_LEFT = 172, 397

MESH_SIZE = 478

Point = namedtuple('Point', ['x', 'y', 'z'])


def _point(raw):
  if raw is None:
    return None
  if isinstance(raw, dict):
    if 'x' not in raw or 'y' not in raw:
      return None
    z = raw.get('z')
    return Point(float(raw['x']), float(raw['y']), None if z is None else float(z))
  vals = list(raw)
  if len(vals) < 2:
    return None
  z = float(vals[2]) if len(vals) > 2 and vals[2] is not None else None
  return Point(float(vals[0]), float(vals[1]), z)


@dataclass(frozen=True)
class Detection:
  """One detected face: ordered landmark points in [0,1] image-relative units.

  Entries may be None where the detector produced nothing for that index.
  """
  points: tuple

  @classmethod
  def from_points(cls, raw_points):
    return cls(tuple(_point(p) for p in raw_points))

  def __len__(self):
    return len(self.points)

  def point(self, i):
    if i < 0 or i >= len(self.points) or self.points[i] is None:
      raise MissingLandmark(i)
    return self.points[i]

  def has(self, i):
    return 0 <= i < len(self.points) and self.points[i] is not None

  def require(self, *indices):
    missing = [i for i in indices if not self.has(i)]
    if missing:
      raise MissingLandmark(missing)

  @property
  def has_depth(self):
    return any(p is not None and p.z is not None for p in self.points)


def detection_from_payload(p):
  """Build a Detection from a landmark payload.

  Accepts the single-face form ``{'landmarks': [...]}`` and the detector's
  multi-candidate form ``{'faceLandmarks': [[...], ...]}``; only the first
  candidate is used.
  """
  if p is None:
    raise NoFaceDetected()
  if 'faceLandmarks' in p:
    faces = p.get('faceLandmarks') or []
    lms = faces[0] if faces else None
  else:
    lms = p.get('landmarks')
  if not lms:
    raise NoFaceDetected()
  return Detection.from_points(lms)


def image_size_from_payload(p):
  # 'image': {'width','height'} or the stream form 'video': {'w','h'}
  img = p.get('image') or {}
  video = p.get('video') or {}
  w = img.get('width', video.get('w'))
  h = img.get('height', video.get('h'))
  if w is None or h is None:
    raise ConfigurationError('payload carries no image size')
  return float(w), float(h)

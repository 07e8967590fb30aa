"""Synthetic landmark faces for tests."""

import math

from reading import landmarks as lm
from reading.metrics import MetricSet


def make_face(D=0.10, eye_w=0.09, eye_h=0.03, tilt=3.0, iris_r=None, iris_dy=0.0,
              cheek_w=0.44, jaw_w=0.37, corner_lift=0.0, mouth_w=0.16, bridge_bump=0.0,
              depth=True, sx=1.0):
  """Synthetic 478-point face in a square image; unused indices are None.

  ``sx`` scales x (and z) to draw the same face into a wider image.
  """
  pts = [None] * lm.MESH_SIZE
  eye_y = 0.40

  def put(i, x, y, z=0.0):
    pts[i] = {'x': x * sx, 'y': y, 'z': z * sx} if depth else {'x': x * sx, 'y': y}

  t = math.radians(tilt)
  r_in, l_in = 0.5 - D / 2, 0.5 + D / 2
  put(lm.RIGHT_EYE_INNER, r_in, eye_y)
  put(lm.LEFT_EYE_INNER, l_in, eye_y)
  put(lm.RIGHT_EYE_OUTER, r_in - eye_w * math.cos(t), eye_y - eye_w * math.sin(t))
  put(lm.LEFT_EYE_OUTER, l_in + eye_w * math.cos(t), eye_y - eye_w * math.sin(t))

  r = eye_h / 2 if iris_r is None else iris_r
  for inner, sign, upper, lower, iris, rim in (
    (r_in, -1, lm.RIGHT_LID_UPPER, lm.RIGHT_LID_LOWER, lm.RIGHT_IRIS, lm.RIGHT_IRIS_RIM),
    (l_in, 1, lm.LEFT_LID_UPPER, lm.LEFT_LID_LOWER, lm.LEFT_IRIS, lm.LEFT_IRIS_RIM),
  ):
    cx = inner + sign * eye_w / 2 * math.cos(t)
    cy = eye_y - eye_w / 2 * math.sin(t)
    put(upper, cx, cy - eye_h / 2)
    put(lower, cx, cy + eye_h / 2)
    iy = cy + iris_dy
    put(iris, cx, iy)
    for i, (dx, dy) in zip(rim, ((r, 0), (0, -r), (-r, 0), (0, r))):
      put(i, cx + dx, iy + dy)

  put(lm.RIGHT_BROW, r_in - eye_w + 0.01, eye_y - 0.05)
  put(lm.LEFT_BROW, l_in + eye_w - 0.01, eye_y - 0.05)

  top_z, tip_z = -0.02, -0.045
  put(lm.NOSE_TOP, 0.5, 0.40, top_z)
  put(lm.NOSE_TIP, 0.5, 0.55, tip_z)
  on_line = top_z + (0.05 / 0.15) * (tip_z - top_z)
  put(lm.NOSE_MID, 0.5, 0.45, on_line - bridge_bump * D)
  put(lm.NOSE_RIGHT, 0.445, 0.54)
  put(lm.NOSE_LEFT, 0.555, 0.54)

  corner_y = 0.65 - corner_lift * mouth_w
  put(lm.MOUTH_RIGHT, 0.5 - mouth_w / 2, corner_y)
  put(lm.MOUTH_LEFT, 0.5 + mouth_w / 2, corner_y)
  put(lm.LIP_UPPER, 0.5, 0.64)
  put(lm.LIP_LOWER, 0.5, 0.66)

  put(lm.FOREHEAD_TOP, 0.5, 0.22)
  put(lm.GLABELLA, 0.5, 0.36)
  put(lm.CHIN, 0.5, 0.80)
  put(lm.CHEEK_RIGHT, 0.5 - cheek_w / 2, 0.45)
  put(lm.CHEEK_LEFT, 0.5 + cheek_w / 2, 0.45)
  put(lm.JAW_RIGHT, 0.5 - jaw_w / 2, 0.68)
  put(lm.JAW_LEFT, 0.5 + jaw_w / 2, 0.68)
  return pts


def make_payload(w=1000, h=1000, **kw):
  return {'landmarks': make_face(**kw), 'video': {'w': w, 'h': h}}


def metric_set(**values):
  return MetricSet(values)

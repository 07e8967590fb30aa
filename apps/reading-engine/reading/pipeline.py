import logging

from reading.classify import classify
from reading.config import EngineConfig
from reading.frame import reference_frame
from reading.fusion import fuse, profile_labels
from reading.landmarks import detection_from_payload, image_size_from_payload
from reading.metrics import extract_metrics
from reading.profile import apparent_profile
from reading.report import build_report

logger = logging.getLogger(__name__)


def measure(payload, size=None):
  det = detection_from_payload(payload)
  w, h = size if size is not None else image_size_from_payload(payload)
  frame = reference_frame(det, w, h)
  return extract_metrics(det, frame)


def analyze(payload, config=None, size=None):
  cfg = config or EngineConfig()
  metrics = measure(payload, size)
  result = classify(metrics, cfg)
  logger.info('face shape %s, %d traits', result.face_shape.label if result.face_shape else None, len(result.traits))
  return build_report(metrics, result, apparent_profile(metrics, cfg.profile))


def analyze_pair(front, diag, config=None, front_size=None, diag_size=None):
  """Frontal photo for the classification, oblique photo for depth."""
  cfg = config or EngineConfig()
  fm = measure(front, front_size)
  dm = measure(diag, diag_size)
  fused = fuse(fm, dm, cfg)
  result = classify(fused, cfg)
  extra = profile_labels(fm, dm, cfg)
  logger.info('face shape %s, %d traits (+%d from profile view)',
              result.face_shape.label if result.face_shape else None, len(result.traits), len(extra))
  return build_report(fused, result, apparent_profile(fused, cfg.profile), extra)

from reading.errors import (
  FaceReadingError, NoFaceDetected, MissingLandmark, DegenerateMetric, ConfigurationError
)
from reading.landmarks import Detection, detection_from_payload, image_size_from_payload
from reading.frame import ReferenceFrame, aspect_distance, reference_frame
from reading.metrics import MetricSet, extract_metrics
from reading.rules import clip, Term, Rule, Axis
from reading.config import EngineConfig, ProfileConfig, FusionConfig, load_config
from reading.classify import TraitLabel, Classification, classify
from reading.pipeline import analyze, analyze_pair

__all__ = [
  'FaceReadingError', 'NoFaceDetected', 'MissingLandmark', 'DegenerateMetric', 'ConfigurationError',
  'Detection', 'detection_from_payload', 'image_size_from_payload',
  'ReferenceFrame', 'aspect_distance', 'reference_frame',
  'MetricSet', 'extract_metrics',
  'clip', 'Term', 'Rule', 'Axis',
  'EngineConfig', 'ProfileConfig', 'FusionConfig', 'load_config',
  'TraitLabel', 'Classification', 'classify',
  'analyze', 'analyze_pair',
]

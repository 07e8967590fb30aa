class FaceReadingError(Exception):
  pass


class NoFaceDetected(FaceReadingError):
  def __init__(self, msg='no face detected'):
    super().__init__(msg)


class MissingLandmark(FaceReadingError):
  def __init__(self, indices, msg=None):
    if isinstance(indices, int):
      indices = (indices,)
    self.indices = tuple(indices)
    super().__init__(msg or 'missing landmark(s): %s' % ', '.join(str(i) for i in self.indices))


class DegenerateMetric(FaceReadingError):
  # raised per metric when its denominator collapses; never aborts extraction
  def __init__(self, metric, reason='zero denominator'):
    self.metric = metric
    self.reason = reason
    super().__init__('%s: %s' % (metric, reason))


class ConfigurationError(FaceReadingError, ValueError):
  pass

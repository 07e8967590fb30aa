"""Frontal + oblique (diagonal) view fusion.

Depth is better resolved from an oblique photo, so depth metrics are taken
from that view. The corrective profile label is a heuristic: it compares
the oblique value against the frontal one and is not symmetric in the
order of the two views.
"""
import logging

from reading.classify import TraitLabel
from reading.config import EngineConfig

logger = logging.getLogger(__name__)


def fuse(frontal, diagonal, config=None):
  cfg = (config or EngineConfig()).fusion
  taken = {}
  for name in cfg.depth_metrics:
    if name in diagonal:
      taken[name] = diagonal[name]
    else:
      logger.debug('diagonal view has no %s, keeping frontal value', name)
  return frontal.replace(values=taken)


def profile_labels(frontal, diagonal, config=None):
  cfg = (config or EngineConfig()).fusion
  name = cfg.profile_metric
  if name not in frontal or name not in diagonal:
    return ()
  gain = diagonal[name] - frontal[name]
  if gain > cfg.margin:
    return (TraitLabel('profile', cfg.profile_label, 'fusion.%s' % name, gain),)
  return ()

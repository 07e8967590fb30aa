import argparse
import json
import logging
import sys
from dataclasses import replace

import cv2

from reading.config import EngineConfig, load_config
from reading.errors import FaceReadingError, ConfigurationError
from reading.pipeline import analyze, analyze_pair

logger = logging.getLogger('reading')


def image_size(path):
  img = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
  if img is None:
    raise ConfigurationError('cannot read image %s' % path)
  h, w = img.shape[:2]
  return float(w), float(h)


def _load_payload(path):
  try:
    with open(path) as f:
      return json.load(f)
  except (OSError, json.JSONDecodeError) as e:
    raise ConfigurationError('cannot read landmarks %s: %s' % (path, e)) from e


def build_parser():
  ap = argparse.ArgumentParser(prog='face-reading', description='Face reading from detected landmarks')
  ap.add_argument('front', help='landmark JSON of the frontal photo')
  ap.add_argument('--diag', help='landmark JSON of an oblique photo (depth metrics)')
  ap.add_argument('--image', help='frontal photo, read for its pixel size')
  ap.add_argument('--diag-image', help='oblique photo, read for its pixel size')
  ap.add_argument('--mode', choices=('soft', 'hard'), help='classification style (overrides config)')
  ap.add_argument('--config', help='JSON engine config with rule overrides')
  ap.add_argument('-v', '--verbose', action='store_true')
  return ap


def run(args):
  cfg = load_config(args.config) if args.config else EngineConfig()
  if args.mode and args.mode != cfg.mode:
    cfg = replace(cfg, mode=args.mode)
  front = _load_payload(args.front)
  front_size = image_size(args.image) if args.image else None
  if args.diag:
    diag = _load_payload(args.diag)
    diag_size = image_size(args.diag_image) if args.diag_image else None
    return analyze_pair(front, diag, cfg, front_size=front_size, diag_size=diag_size)
  return analyze(front, cfg, size=front_size)


def main(argv=None):
  args = build_parser().parse_args(argv)
  logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                      format='%(asctime)s %(levelname)s %(name)s: %(message)s')
  try:
    report = run(args)
  except FaceReadingError as e:
    logger.error('%s: %s', type(e).__name__, e)
    return 1
  print(json.dumps(report, indent=2, ensure_ascii=False))
  return 0


if __name__ == '__main__':
  sys.exit(main())

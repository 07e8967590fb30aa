READINGS = {
  'face_shape.square': 'Square face: steady will and strong drive',
  'face_shape.round': 'Round face: sociable and good-natured',
  'face_shape.heart': 'Heart-shaped face: quick wit, sharp intuition',
  'face_shape.oblong': 'Long face: patient and principled',
  'face_shape.oval': 'Oval face: balanced temperament',
  'eye.lower_sanpaku': 'Lower-white eyes: cool-headed, with great ambition',
  'eye.upper_sanpaku': 'Upper-white eyes: tenacious and stubborn',
  'eye.phoenix': 'Phoenix eyes: refined, with a talent for leadership',
  'eye.narrow': 'Narrow eyes: meticulous and careful',
  'eye.round': 'Round eyes: warm and honest',
  'nose_bridge.high': 'Straight, high nose bridge',
  'nose_bridge.low': 'Low nose bridge',
  'nose.long': 'Long nose: dignified, keeps to principles',
  'nose.broad': 'Broad nose: strong in gathering wealth',
  'bridge_line.aquiline': 'Arched bridge line',
  'bridge_line.concave': 'Concave bridge line',
  'mouth.wide': 'Large mouth',
  'mouth.small': 'Small mouth',
  'mouth_corners.upturned': 'Upturned mouth corners: cheerful outlook',
  'mouth_corners.downturned': 'Downturned mouth corners: serious, reserved',
  'build.fleshy': 'Full-fleshed face, overflowing with fortune',
  'build.balanced': 'Flesh and bone in harmony, a noble face',
  'build.bony': 'Clear bone structure and high spirit',
  'jaw.broad': 'Broad jaw: perseverance in later years',
  'forehead.high': 'High forehead: early fortune',
  'symmetry.uneven_eyes': 'Uneven eye openings',
  'symmetry.uneven_mouth': 'Uneven mouth corners',
  'profile.profile_bridge': 'Bridge stands higher in profile than it looks from the front',
}


def _label(t):
  return {
    'axis': t.axis,
    'label': t.label,
    'score': round(t.score, 3),
    'reading': READINGS.get(t.key),
  }


def build_report(metrics, classification, profile=None, extra=()):
  traits = list(classification.traits) + list(extra)
  shape = classification.face_shape
  return {
    'face_shape': _label(shape) if shape is not None else None,
    'traits': [_label(t) for t in traits],
    'metrics': {k: round(v, 4) for k, v in metrics.items()},
    'degenerate': {k: e.reason for k, e in metrics.degenerate.items()},
    'scores': {k: round(v, 3) for k, v in classification.scores.items()},
    'profile': {'age': profile.age, 'sex': profile.sex} if profile is not None else None,
  }

"""End-to-end tests: payload -> report, and the command line."""

import json

import cv2
import numpy as np
import pytest

from main import main
from reading import analyze, analyze_pair
from reading.config import EngineConfig
from reading.errors import ConfigurationError, MissingLandmark, NoFaceDetected
from reading.pipeline import measure

from helpers import make_payload


def _labels(report):
  return ['%s.%s' % (t['axis'], t['label']) for t in report['traits']]


class TestAnalyze:
  def test_default_face(self, payload):
    rep = analyze(payload)
    assert rep['face_shape']['label'] == 'oval'
    labels = _labels(rep)
    assert labels[0] == 'face_shape.oval'
    for key in ('eye.round', 'nose_bridge.high', 'mouth.wide', 'build.bony', 'jaw.broad'):
      assert key in labels
    assert rep['metrics']['bridge_projection'] == pytest.approx(0.25)

  def test_hard_mode(self, payload):
    rep = analyze(payload, EngineConfig(mode='hard'))
    assert rep['face_shape']['label'] == 'oval'
    eye = [t for t in rep['traits'] if t['axis'] == 'eye']
    assert [t['label'] for t in eye] == ['round']
    assert rep['scores']['eye.phoenix'] == 0.0

  def test_long_eyes_read_narrow(self):
    rep = analyze(make_payload(D=0.25, eye_w=0.16, eye_h=0.05, tilt=4.0))
    assert 'eye.narrow' in _labels(rep)
    assert rep['scores']['eye.narrow'] > rep['scores']['eye.phoenix']

  def test_explicit_size_wins(self, payload):
    m = measure(payload, size=(640, 480))
    assert m['aspect_ratio'] == pytest.approx(640 / 480)

  def test_no_face(self):
    with pytest.raises(NoFaceDetected):
      analyze({'faceLandmarks': [], 'video': {'w': 10, 'h': 10}})

  def test_missing_landmark(self, payload):
    payload['landmarks'][152] = None
    with pytest.raises(MissingLandmark):
      analyze(payload)

  def test_no_size(self, face):
    with pytest.raises(ConfigurationError):
      analyze({'landmarks': face})


class TestAnalyzePair:
  def test_depth_from_oblique_view(self, payload):
    rep = analyze_pair(payload, make_payload(D=0.08))
    assert rep['metrics']['bridge_projection'] == pytest.approx(0.3125)
    assert _labels(rep)[-1] == 'profile.profile_bridge'

  def test_frontal_without_depth(self):
    rep = analyze_pair(make_payload(depth=False), make_payload())
    assert rep['metrics']['bridge_projection'] == pytest.approx(0.25)
    assert 'bridge_projection' not in rep['degenerate']
    assert 'nose_bridge.high' in _labels(rep)


def _write(path, obj):
  path.write_text(json.dumps(obj))
  return str(path)


class TestCommandLine:
  def test_prints_report(self, tmp_path, capsys, payload):
    front = _write(tmp_path / 'front.json', payload)
    assert main([front]) == 0
    rep = json.loads(capsys.readouterr().out)
    assert rep['face_shape']['label'] == 'oval'

  def test_pair_and_mode(self, tmp_path, capsys, payload):
    front = _write(tmp_path / 'front.json', payload)
    diag = _write(tmp_path / 'diag.json', make_payload(D=0.08))
    assert main([front, '--diag', diag, '--mode', 'hard']) == 0
    rep = json.loads(capsys.readouterr().out)
    assert 'profile.profile_bridge' in _labels(rep)

  def test_config_file(self, tmp_path, capsys, payload):
    front = _write(tmp_path / 'front.json', payload)
    cfg = _write(tmp_path / 'engine.json', {'overrides': {'face_shape.round': {'min_score': 0.3}}})
    assert main([front, '--config', cfg]) == 0
    assert json.loads(capsys.readouterr().out)['face_shape']['label'] == 'round'

  def test_image_size(self, tmp_path, capsys, payload):
    img = tmp_path / 'front.png'
    cv2.imwrite(str(img), np.zeros((480, 640, 3), np.uint8))
    front = _write(tmp_path / 'front.json', payload)
    assert main([front, '--image', str(img)]) == 0
    rep = json.loads(capsys.readouterr().out)
    assert rep['metrics']['aspect_ratio'] == pytest.approx(640 / 480, abs=1e-4)

  @pytest.mark.parametrize('body', [{'faceLandmarks': []}, 'not json'])
  def test_failures_exit_1(self, tmp_path, capsys, body):
    path = tmp_path / 'front.json'
    path.write_text(body if isinstance(body, str) else json.dumps(body))
    assert main([str(path)]) == 1
    assert capsys.readouterr().out == ''

  def test_unreadable_image(self, tmp_path, payload):
    front = _write(tmp_path / 'front.json', payload)
    assert main([front, '--image', str(tmp_path / 'missing.png')]) == 1

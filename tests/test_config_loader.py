import logging
from pathlib import Path
import textwrap

from lfm.config import apply_log_level, load_config, load_typed_config, deep_merge, coerce_scalar


def test_deep_merge_simple():
    a = {'a': 1, 'b': {'x': 1, 'y': 2}}
    b = {'b': {'y': 99, 'z': 5}, 'c': 3}
    merged = deep_merge(a, b)
    assert merged['a'] == 1
    assert merged['b']['x'] == 1
    assert merged['b']['y'] == 99
    assert merged['b']['z'] == 5
    assert merged['c'] == 3
    # inputs untouched
    assert a['b'] == {'x': 1, 'y': 2}


def test_coerce_scalar():
    assert coerce_scalar('true') is True
    assert coerce_scalar('No') is False
    assert coerce_scalar('10') == 10
    assert coerce_scalar('-3') == -3
    assert isinstance(coerce_scalar('0.45'), float)
    assert coerce_scalar('none') is None
    assert coerce_scalar('[[24, 1.0], [72, 0.5]]') == [[24, 1.0], [72, 0.5]]
    assert coerce_scalar('[not json') == '[not json'
    assert coerce_scalar('INFO') == 'INFO'


def test_defaults():
    cfg = load_config()
    assert cfg['matching']['min_cross_enterprise_score'] == 0.40
    assert cfg['matching']['max_candidates_per_item'] is None
    assert cfg['reporting']['top_matches'] == 10
    assert cfg['scoring'] == {}


def test_defaults_not_shared_between_calls():
    cfg = load_config()
    cfg['matching']['progress_interval'] = 1
    assert load_config()['matching']['progress_interval'] == 100


def test_env_override(monkeypatch):
    monkeypatch.setenv('LFM__MATCHING__MIN_CROSS_ENTERPRISE_SCORE', '0.45')
    monkeypatch.setenv('LFM__REPORTING__PROGRESS_ENABLED', 'false')
    monkeypatch.setenv('LFM__LOG_LEVEL', 'DEBUG')
    cfg = load_config()
    assert abs(cfg['matching']['min_cross_enterprise_score'] - 0.45) < 1e-9
    assert cfg['reporting']['progress_enabled'] is False
    assert cfg['log_level'] == 'DEBUG'


def test_overrides_win_over_env(monkeypatch):
    monkeypatch.setenv('LFM__REPORTING__TOP_MATCHES', '25')
    cfg = load_config(overrides={'reporting': {'top_matches': 3}})
    assert cfg['reporting']['top_matches'] == 3
    assert cfg['reporting']['system_sample_size'] == 50


def test_load_config_dotenv_and_env(tmp_path: Path, monkeypatch):
    """Test that .env file is loaded and environment variables override it."""
    env_file = tmp_path / '.env'
    env_file.write_text(textwrap.dedent('''\
    # scoring tweaks
    LFM__SCORING__WEIGHT_TITLE=0.30
    LFM__SCORING__WEIGHT_CATEGORY=0.25  # moved from title
    LFM__REPORTING__TOP_MATCHES="5"
    OTHER_TOOL__SETTING=ignored
    '''), encoding='utf-8')
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv('LFM_ENABLE_DOTENV', '1')
    # env override
    monkeypatch.setenv('LFM__REPORTING__TOP_MATCHES', '7')
    cfg = load_config()
    assert cfg['scoring'] == {'weight_title': 0.30, 'weight_category': 0.25}
    assert cfg['reporting']['top_matches'] == 7
    assert 'other_tool' not in cfg


def test_dotenv_skipped_during_tests(tmp_path: Path, monkeypatch):
    (tmp_path / '.env').write_text('LFM__REPORTING__TOP_MATCHES=5\n', encoding='utf-8')
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv('LFM_ENABLE_DOTENV', raising=False)
    assert load_config()['reporting']['top_matches'] == 10


def test_explicit_dotenv_path(tmp_path: Path, monkeypatch):
    env_file = tmp_path / 'matcher.env'
    env_file.write_text('LFM__MATCHING__PROGRESS_INTERVAL=10\n', encoding='utf-8')
    monkeypatch.setenv('LFM_ENABLE_DOTENV', '1')
    assert load_config(dotenv_path=env_file)['matching']['progress_interval'] == 10


def test_load_typed_config(monkeypatch):
    monkeypatch.setenv('LFM__SCORING__WEIGHT_TITLE', '0.30')
    monkeypatch.setenv('LFM__SCORING__WEIGHT_CATEGORY', '0.25')
    cfg = load_typed_config()
    scoring = cfg.scoring_config()
    assert scoring.weight_title == 0.30
    assert scoring.weight_category == 0.25
    assert cfg.matching.default_min_score == 0.30


def test_load_config_leaves_root_logging_alone(monkeypatch):
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    monkeypatch.setenv('LFM__LOG_LEVEL', 'WARNING')
    load_config()
    assert root.handlers == handlers
    assert root.level == level
    assert logging.getLogger('lfm').level == logging.WARNING


def test_apply_log_level_unknown_name_falls_back_to_info():
    assert apply_log_level('chatty') == logging.INFO
    assert logging.getLogger('lfm').level == logging.INFO


def test_apply_log_level_configures_root_on_request(monkeypatch):
    calls = []
    monkeypatch.setattr(logging, 'basicConfig', lambda **kw: calls.append(kw))
    load_config(overrides={'log_level': 'debug'}, configure_logging=True)
    assert calls == [{'level': logging.DEBUG, 'format': '%(message)s', 'force': True}]

import pytest

from distmesh import ConfigurationError, DistMeshConfig, RelaxationStats
from distmesh.core import constants
from distmesh.core.stats import format_stats_table


def test_defaults_match_constants():
    cfg = DistMeshConfig()
    assert cfg.max_steps == 10000
    assert cfg.retriangulation_threshold == 0.1
    assert cfg.geometry_evaluation_threshold == 1e-3
    assert cfg.points_movement_threshold == 1e-3
    assert cfg.delta_t == 0.2
    assert cfg.precision == 1e-3
    assert cfg.seed == constants.DEFAULT_SEED


def test_length_bias():
    assert constants.length_bias(2) == pytest.approx(1.2)
    assert constants.length_bias(3) == pytest.approx(1.1)


def test_from_options_accepts_aliases():
    cfg = DistMeshConfig.from_options(maxSteps=50, deltaT=0.1, seed=None)
    assert cfg.max_steps == 50 and cfg.delta_t == 0.1 and cfg.seed is None


def test_from_options_keeps_base():
    base = DistMeshConfig(max_steps=7)
    cfg = DistMeshConfig.from_options(base, precision=0.0)
    assert cfg.max_steps == 7 and cfg.precision == 0.0
    assert base.precision == 1e-3


def test_unknown_option_rejected():
    with pytest.raises(ConfigurationError, match="not recognized"):
        DistMeshConfig.from_options(maxIterations=5)


@pytest.mark.parametrize("changes", [
    {'max_steps': 0},
    {'max_steps': 2.5},
    {'max_steps': float('inf')},
    {'max_steps': 'ten'},
    {'max_steps': None},
    {'delta_t': 0.0},
    {'retriangulation_threshold': -1.0},
    {'precision': -1e-3},
    {'log_every': -1},
])
def test_invalid_values_rejected(changes):
    with pytest.raises(ConfigurationError):
        DistMeshConfig().replace(**changes)


def test_configuration_error_is_value_error():
    with pytest.raises(ValueError):
        DistMeshConfig(max_steps=-3).validate()


def test_option_names_cover_fields_and_aliases():
    names = DistMeshConfig.option_names()
    assert 'max_steps' in names and 'maxSteps' in names
    assert set(DistMeshConfig().to_dict()) <= set(names)


def test_stats_table():
    stats = RelaxationStats(steps=4, retriangulations=2, time_total=0.5)
    assert stats.to_dict()['time_per_step'] == pytest.approx(0.125)
    table = format_stats_table(stats)
    lines = table.splitlines()
    assert lines[0].split() == ['stat', 'value']
    assert any(line.split() == ['steps', '4'] for line in lines)
    assert format_stats_table({}) == "<no stats>"

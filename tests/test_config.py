"""Tests for PlotConfig."""

import pytest

from graphgg.config import PlotConfig


def test_defaults():
    config = PlotConfig()
    assert config.layout == "fr"
    assert config.seed == 42
    assert (config.width, config.height) == (1200, 800)
    assert not config.dark_mode


def test_from_env():
    config = PlotConfig.from_env({
        "GRAPHGG_LAYOUT": "Circle",
        "GRAPHGG_SEED": "7",
        "GRAPHGG_WIDTH": "640",
        "GRAPHGG_HEIGHT": "480",
        "GRAPHGG_DARK_MODE": "yes",
    })
    assert config.layout == "circle"
    assert config.seed == 7
    assert (config.width, config.height) == (640, 480)
    assert config.dark_mode


def test_from_env_ignores_empty_values():
    config = PlotConfig.from_env({"GRAPHGG_LAYOUT": "", "GRAPHGG_DARK_MODE": "off"})
    assert config.layout == "fr"
    assert not config.dark_mode


def test_seed_can_be_disabled():
    assert PlotConfig.from_env({"GRAPHGG_SEED": "none"}).seed is None


def test_size_must_be_positive():
    with pytest.raises(ValueError, match="must be positive"):
        PlotConfig(width=0)


def test_layout_params():
    assert PlotConfig(layout="spring", seed=3).layout_params() == {"seed": 3}
    assert PlotConfig(layout="circle", seed=3).layout_params() == {}
    assert PlotConfig(layout="fr", seed=None).layout_params() == {}


def test_config_is_frozen():
    config = PlotConfig()
    with pytest.raises(AttributeError):
        config.layout = "circle"

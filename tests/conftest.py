"""
Pytest fixtures for Imposter game tests.
"""

import random

import pytest

from imposter.core import (
    GameConfiguration, ManualScheduler, PlayerRecord, RoundEngine, SessionController,
)
from imposter.options import OptionsResult
from imposter.web import EventEmitter


SAMPLE_OPTIONS = {
    "location": ["Beach", "Library", "Airport"],
    "movies": ["Jaws", "Alien"],
    "games": [],
}


class RecordingListener:
    """Collects emitted events for assertions."""

    def __init__(self):
        self.events = []

    def __call__(self, event_type, data):
        self.events.append((event_type, data))

    def of_type(self, event_type):
        return [data for kind, data in self.events if kind == event_type]


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def sample_options():
    return {k: list(v) for k, v in SAMPLE_OPTIONS.items()}


@pytest.fixture
def five_player_config():
    return GameConfiguration(category="location", player_count=5, imposter_count=1)


@pytest.fixture
def listener():
    return RecordingListener()


@pytest.fixture
def event_emitter(listener):
    emitter = EventEmitter()
    emitter.register_listener(listener)
    return emitter


@pytest.fixture
def controller(event_emitter, scheduler, rng, sample_options):
    """Session controller with options already resolved."""
    ctrl = SessionController(event_emitter=event_emitter, scheduler=scheduler, rng=rng)
    ctrl.options_loaded(OptionsResult(options=sample_options))
    return ctrl


def make_roster(imposters, player_count=5):
    return [
        PlayerRecord(index=i, name=f"P{i + 1}", is_imposter=i in imposters)
        for i in range(player_count)
    ]


@pytest.fixture
def five_player_round():
    """5 players, one imposter at index 2, roles hidden on elimination."""
    return RoundEngine(make_roster({2}), total_imposters=1, reveal_on_elimination=False)


def name_everyone(ctrl, scheduler, names):
    """Submit each name and let its reveal timer fire."""
    for name in names:
        ctrl.submit_name(name)
        scheduler.run_pending()

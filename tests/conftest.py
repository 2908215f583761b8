"""
Shared fixtures: seeded and scripted random sources, fresh game state,
settings pointed at a temporary save directory.
"""

import pytest

from config import PathSettings, Settings
from simchurch.data_layer.save_store import SaveStore
from simchurch.simulation_layer.congregation.member import CongregationMember
from simchurch.simulation_layer.engine import ChurchSimulation
from simchurch.simulation_layer.models import AttendancePattern, GivingLevel
from simchurch.simulation_layer.random_utils import SimRandom
from simchurch.simulation_layer.state import GameState


class ScriptedRandom(SimRandom):
    """Returns queued values from random(), then `default` forever."""

    def __init__(self, values=(), default=0.5):
        super().__init__(0)
        self.values = list(values)
        self.default = default

    def random(self) -> float:
        if self.values:
            return self.values.pop(0)
        return self.default


def make_member(member_id="member_x", age=35, joined_week=1, **kwargs) -> CongregationMember:
    kwargs.setdefault("name", "Test Member")
    kwargs.setdefault("attendance_pattern", AttendancePattern.REGULAR)
    kwargs.setdefault("giving_level", GivingLevel.NON_GIVER)
    return CongregationMember(id=member_id, age=age, joined_week=joined_week, **kwargs)


@pytest.fixture
def rng():
    return SimRandom(42)


@pytest.fixture
def state():
    return GameState()


@pytest.fixture
def settings(tmp_path):
    return Settings(paths=PathSettings(save_root=tmp_path / "saves"))


@pytest.fixture
def store(tmp_path):
    return SaveStore(tmp_path / "saves")


@pytest.fixture
def simulation(settings, store):
    return ChurchSimulation.new_game(seed=42, settings=settings, store=store)

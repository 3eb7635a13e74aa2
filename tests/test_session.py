"""
Tests for the session controller stage machine.
"""

import random
import time

import pytest

from imposter.core import (
    DEFAULT_SECRET_ITEM, GameConfiguration, InvalidTransition, ItemSource, NamingState,
    NameValidationError, PrematureTransition, SessionController, SessionStage, Winner,
)
from imposter.options import OptionsResult

from conftest import SAMPLE_OPTIONS, name_everyone

NAMES = ["Ann", "Bob", "Cy", "Dee", "Eve"]


def notice_kinds(ctrl):
    return [n.kind for n in ctrl.notices]


def play_to_ready(ctrl, scheduler, config):
    ctrl.configure(config)
    name_everyone(ctrl, scheduler, NAMES[:config.player_count])


def test_initial_state(scheduler):
    """Test a new session is configuring with nothing derived."""
    ctrl = SessionController(scheduler=scheduler)
    assert ctrl.stage == SessionStage.CONFIGURING
    assert ctrl.options_loading
    assert ctrl.configuration is None
    assert ctrl.assignment is None
    assert ctrl.round is None


def test_configure_refused_while_options_loading(scheduler, five_player_config):
    """Test configuring before the options resolve asks the caller to retry."""
    ctrl = SessionController(scheduler=scheduler)
    with pytest.raises(PrematureTransition):
        ctrl.configure(five_player_config)

    assert ctrl.stage == SessionStage.CONFIGURING
    assert notice_kinds(ctrl) == ["options_loading"]

    ctrl.options_loaded(OptionsResult(options={"location": ["Beach"]}))
    ctrl.configure(five_player_config)
    assert ctrl.stage == SessionStage.NAMING_PLAYERS
    assert ctrl.assignment.secret_item == "Beach"


def test_full_flow(controller, scheduler, five_player_config, listener):
    """Test configuring, naming, beginning and finishing a round."""
    assignment = controller.configure(five_player_config)
    assert controller.stage == SessionStage.NAMING_PLAYERS
    assert len(assignment.imposter_indices) == 1

    name_everyone(controller, scheduler, NAMES)
    assert controller.stage == SessionStage.READY_TO_BEGIN
    assert controller.game.names == tuple(NAMES)
    assert controller.game.assignment is assignment

    engine = controller.begin_round()
    assert controller.stage == SessionStage.PLAYING_ROUND
    assert [p.name for p in engine.players] == NAMES
    assert {p.index for p in engine.players if p.is_imposter} == set(assignment.imposter_indices)

    imposter = next(iter(assignment.imposter_indices))
    assert controller.eliminate(imposter)
    assert engine.outcome.winner == Winner.PLAYERS

    stages = [data["stage"] for data in listener.of_type("stage_change")]
    assert stages == ["naming_players", "ready_to_begin", "playing_round"]
    assert listener.of_type("game_over")[0]["winner"] == "players"
    assert notice_kinds(controller) == ["configuration_saved", "all_set", "game_over"]


def test_reveal_content_matches_assignment(controller, scheduler, five_player_config):
    """Test each player's private reveal shows their role or the item."""
    assignment = controller.configure(five_player_config)
    for index, name in enumerate(NAMES):
        content = controller.submit_name(name)
        assert content == assignment.reveal_for(index)
        scheduler.run_pending()


def test_blank_name_does_not_advance(controller, five_player_config):
    """Test a blank name is rejected without moving on."""
    controller.configure(five_player_config)
    with pytest.raises(NameValidationError):
        controller.submit_name("   ")
    assert controller.sequencer.current_index == 0
    assert controller.stage == SessionStage.NAMING_PLAYERS


def test_previous_player(controller, scheduler, five_player_config):
    """Test going back during naming."""
    controller.configure(five_player_config)
    name_everyone(controller, scheduler, NAMES[:2])
    controller.previous_player()
    assert controller.sequencer.current_index == 1
    assert controller.sequencer.current_name == "Bob"


def test_transitions_out_of_order(controller, scheduler, five_player_config):
    """Test stage-specific actions are refused in other stages."""
    with pytest.raises(InvalidTransition):
        controller.begin_round()
    with pytest.raises(InvalidTransition):
        controller.submit_name("Ann")
    with pytest.raises(InvalidTransition):
        controller.eliminate(0)

    controller.configure(five_player_config)
    with pytest.raises(InvalidTransition):
        controller.configure(five_player_config)
    with pytest.raises(InvalidTransition):
        controller.begin_round()


def test_eliminate_after_game_over_is_ignored(controller, scheduler, five_player_config):
    """Test eliminations after the outcome change nothing."""
    play_to_ready(controller, scheduler, five_player_config)
    engine = controller.begin_round()
    imposter = next(iter(controller.assignment.imposter_indices))
    controller.eliminate(imposter)

    loyal = next(p.index for p in engine.players if not p.is_imposter)
    assert not controller.eliminate(loyal)
    assert not engine.players[loyal].is_eliminated
    assert notice_kinds(controller).count("game_over") == 1


def test_reset_returns_to_initial_state(controller, scheduler, five_player_config):
    """Test reset discards every derived value but keeps the options."""
    play_to_ready(controller, scheduler, five_player_config)
    controller.begin_round()
    controller.eliminate(0)

    controller.reset()
    assert controller.stage == SessionStage.CONFIGURING
    assert controller.configuration is None
    assert controller.assignment is None
    assert controller.sequencer is None
    assert controller.game is None
    assert controller.round is None
    assert not controller.options_loading

    view = controller.snapshot()
    assert view["roster"] == []
    assert view["round"] is None


def test_reset_during_reveal_discards_timer(controller, scheduler, five_player_config):
    """Test a reveal timer pending at reset cannot touch the new session."""
    controller.configure(five_player_config)
    controller.submit_name("Ann")
    controller.reset()

    assert scheduler.run_all() == 1
    assert controller.stage == SessionStage.CONFIGURING
    assert controller.sequencer is None


def test_reset_from_any_stage(controller, scheduler, five_player_config):
    """Test reset works from configuring, naming and ready stages."""
    controller.reset()
    assert controller.stage == SessionStage.CONFIGURING

    controller.configure(five_player_config)
    controller.reset()
    assert controller.stage == SessionStage.CONFIGURING

    play_to_ready(controller, scheduler, five_player_config)
    controller.reset()
    assert controller.stage == SessionStage.CONFIGURING


def test_empty_category_notice(controller, five_player_config):
    """Test an empty category falls back to the global pool with a notice."""
    config = GameConfiguration(category="games", player_count=5, imposter_count=1)
    assignment = controller.configure(config)
    assert assignment.item_source is ItemSource.GLOBAL_POOL
    assert "empty_category_options" in notice_kinds(controller)


def test_fetch_failure_uses_default_item(scheduler, five_player_config, listener, event_emitter):
    """Test a failed fetch degrades to the default item without a second warning."""
    ctrl = SessionController(event_emitter=event_emitter, scheduler=scheduler)
    ctrl.options_loaded(OptionsResult(options={}, error="HTTP 500"))
    assignment = ctrl.configure(five_player_config)

    assert assignment.secret_item == DEFAULT_SECRET_ITEM
    assert notice_kinds(ctrl) == ["options_fetch_failed", "configuration_saved"]
    assert listener.of_type("notice")[0]["level"] == "error"


def test_empty_options_warns(scheduler, five_player_config):
    """Test an empty but successful fetch warns at configuration time."""
    ctrl = SessionController(scheduler=scheduler)
    ctrl.options_loaded(OptionsResult(options={}))
    assignment = ctrl.configure(five_player_config)

    assert assignment.item_source is ItemSource.DEFAULT
    assert notice_kinds(ctrl) == ["no_options_available", "configuration_saved"]


def test_snapshot_during_naming(controller, five_player_config):
    """Test the session view exposes the naming state."""
    controller.configure(five_player_config)
    controller.submit_name("Ann")
    view = controller.snapshot()
    assert view["stage"] == "naming_players"
    assert view["configuration"]["player_count"] == 5
    assert view["naming"]["state"] == "revealing"


def wait_for(predicate, timeout=2.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return predicate()


@pytest.fixture
def timed_controller():
    """Controller on the default threading timer with a short reveal."""
    ctrl = SessionController(rng=random.Random(7), reveal_duration_ms=20)
    ctrl.options_loaded(OptionsResult(options=dict(SAMPLE_OPTIONS)))
    return ctrl


def test_timer_thread_advances_to_ready(timed_controller, five_player_config):
    """Test the real reveal timer hands the device on and finishes naming."""
    timed_controller.configure(five_player_config)
    sequencer = timed_controller.sequencer

    for name in NAMES[:-1]:
        timed_controller.submit_name(name)
        assert wait_for(lambda: sequencer.state == NamingState.ENTERING)
    timed_controller.submit_name(NAMES[-1])

    assert wait_for(lambda: timed_controller.stage == SessionStage.READY_TO_BEGIN)
    assert timed_controller.game.names == tuple(NAMES)


def test_reset_during_timed_reveal(timed_controller, five_player_config):
    """Test a reveal timer that outlives a reset does not touch the new session."""
    timed_controller.configure(five_player_config)
    sequencer = timed_controller.sequencer
    for name in NAMES[:-1]:
        timed_controller.submit_name(name)
        assert wait_for(lambda: sequencer.state == NamingState.ENTERING)

    timed_controller.submit_name(NAMES[-1])
    timed_controller.reset()
    time.sleep(0.1)

    assert timed_controller.stage == SessionStage.CONFIGURING
    assert timed_controller.game is None
    assert sequencer.state == NamingState.REVEALING

"""
Tests for the naming sequencer and its reveal timer.
"""

import pytest

from imposter.core import (
    IMPOSTER_LABEL, InvalidTransition, ManualScheduler, NameValidationError,
    NamingSequencer, NamingState, RoundAssignment,
)


@pytest.fixture
def assignment():
    return RoundAssignment(imposter_indices=frozenset({1}), secret_item="Beach")


@pytest.fixture
def completed():
    return []


@pytest.fixture
def sequencer(assignment, scheduler, completed):
    return NamingSequencer(assignment, 3, on_complete=completed.append, scheduler=scheduler)


def test_initial_state(sequencer):
    """Test the sequencer starts entering a name for player 1."""
    assert sequencer.state == NamingState.ENTERING
    assert sequencer.current_index == 0
    assert sequencer.current_name == ""
    assert not sequencer.can_go_back


@pytest.mark.parametrize("name", ["", "   ", "\t\n"])
def test_blank_name_rejected(sequencer, scheduler, name):
    """Test a blank name neither advances nor stores anything."""
    with pytest.raises(NameValidationError) as exc_info:
        sequencer.submit(name)

    assert exc_info.value.player_index == 0
    assert sequencer.current_index == 0
    assert sequencer.names == ["", "", ""]
    assert sequencer.state == NamingState.ENTERING
    assert scheduler.pending == []


def test_blank_resubmission_keeps_saved_name(sequencer, scheduler):
    """Test a blank submission after going back leaves the saved name alone."""
    sequencer.submit("Ann")
    scheduler.run_pending()
    sequencer.previous()

    with pytest.raises(NameValidationError):
        sequencer.submit("  ")
    assert sequencer.names[0] == "Ann"


def test_submit_reveals_secret_item(sequencer, scheduler):
    """Test a loyal player sees the secret item for the reveal duration."""
    content = sequencer.submit("  Ann  ")

    assert content == "Beach"
    assert sequencer.names[0] == "Ann"
    assert sequencer.state == NamingState.REVEALING
    assert [call.delay for call in scheduler.pending] == [3.0]


def test_submit_reveals_imposter(sequencer, scheduler):
    """Test an imposter sees the imposter label instead of the item."""
    sequencer.submit("Ann")
    scheduler.run_pending()

    assert sequencer.submit("Bob") == IMPOSTER_LABEL


def test_no_submission_while_revealing(sequencer):
    """Test the input is locked during the reveal."""
    sequencer.submit("Ann")
    with pytest.raises(InvalidTransition):
        sequencer.submit("Again")
    with pytest.raises(InvalidTransition):
        sequencer.previous()


def test_timer_advances_to_next_player(sequencer, scheduler):
    """Test the reveal ends and the next player is up when the timer fires."""
    sequencer.submit("Ann")
    assert scheduler.run_pending() == 1

    assert sequencer.state == NamingState.ENTERING
    assert sequencer.current_index == 1
    assert sequencer.revealed_content is None
    assert sequencer.can_go_back


def test_completion_after_last_reveal(sequencer, scheduler, completed):
    """Test the ordered name list is delivered after the last reveal."""
    for name in ["Ann", "Bob", "Cy"]:
        sequencer.submit(name)
        scheduler.run_pending()

    assert sequencer.is_complete
    assert completed == [["Ann", "Bob", "Cy"]]


def test_previous_restores_saved_name(sequencer, scheduler):
    """Test going back shows the earlier name and keeps later ones."""
    sequencer.submit("Ann")
    scheduler.run_pending()
    sequencer.submit("Bob")
    scheduler.run_pending()

    sequencer.previous()
    assert sequencer.current_index == 1
    assert sequencer.current_name == "Bob"

    sequencer.previous()
    assert sequencer.current_index == 0
    assert sequencer.current_name == "Ann"
    assert sequencer.names == ["Ann", "Bob", ""]

    with pytest.raises(InvalidTransition):
        sequencer.previous()


def test_resubmit_after_previous(sequencer, scheduler):
    """Test renaming an earlier player replaces only that name."""
    sequencer.submit("Ann")
    scheduler.run_pending()
    sequencer.submit("Bob")
    scheduler.run_pending()
    sequencer.previous()

    sequencer.submit("Robert")
    scheduler.run_pending()
    assert sequencer.names == ["Ann", "Robert", ""]
    assert sequencer.current_index == 2


def test_stale_timer_is_discarded(assignment, completed):
    """Test a timer from a superseded submission cannot advance the sequencer."""
    scheduler = ManualScheduler()
    sequencer = NamingSequencer(assignment, 3, on_complete=completed.append, scheduler=scheduler)

    sequencer.submit("Ann")
    stale = scheduler.calls[0]
    scheduler.run_pending()
    sequencer.previous()
    assert sequencer.current_index == 0

    # The old callback fires late against the same index
    stale.callback()
    assert sequencer.current_index == 0
    assert sequencer.state == NamingState.ENTERING


def test_cancel_invalidates_pending_timer(sequencer, scheduler):
    """Test cancelling drops the pending reveal even if its callback still runs."""
    sequencer.submit("Ann")
    sequencer.cancel()

    assert scheduler.pending == []
    assert scheduler.run_all() == 1
    assert sequencer.state == NamingState.REVEALING
    assert sequencer.current_index == 0


def test_name_is_truncated(assignment, scheduler):
    """Test names are capped at the maximum length."""
    sequencer = NamingSequencer(assignment, 3, scheduler=scheduler, max_name_length=5)
    sequencer.submit("Alexandra")
    assert sequencer.names[0] == "Alexa"


def test_to_dict(sequencer, scheduler):
    """Test the naming view lists names entered so far."""
    sequencer.submit("Ann")
    view = sequencer.to_dict()
    assert view["state"] == "revealing"
    assert view["revealed_content"] == "Beach"

    scheduler.run_pending()
    view = sequencer.to_dict()
    assert view["current_index"] == 1
    assert view["entered_names"] == ["Ann"]
    assert view["revealed_content"] is None

"""Tests for the mode transition table and derived predicates."""

import pytest

from polymeasure_core.interaction.modes import (
    Action,
    Appending,
    Drawing,
    Editing,
    Idle,
    can_cancel,
    can_finish,
    control_states,
    is_editing,
    selected_feature,
    transition,
)
from polymeasure_core.model.feature import Feature


@pytest.fixture
def feature():
    return Feature.from_line([(0.0, 0.0), (10.0, 10.0)])


def test_drawing_round_trip():
    assert transition(Idle(), Action.START_DRAWING) == Drawing()
    assert transition(Drawing(), Action.FINISH_DRAWING) == Idle()
    assert transition(Drawing(), Action.CANCEL_DRAWING) == Idle()


def test_start_drawing_rejected_outside_idle(feature):
    assert transition(Drawing(), Action.START_DRAWING) is None
    assert transition(Editing(None), Action.START_DRAWING) is None
    assert transition(Appending(feature, feature.as_tuple()), Action.START_DRAWING) is None


def test_edit_toggle(feature):
    assert transition(Idle(), Action.TOGGLE_EDIT) == Editing(None)
    assert transition(Editing(feature), Action.TOGGLE_EDIT) == Idle()
    assert transition(Drawing(), Action.TOGGLE_EDIT) is None
    assert transition(Appending(feature, feature.as_tuple()), Action.TOGGLE_EDIT) is None


def test_select_only_while_editing(feature):
    assert transition(Editing(None), Action.SELECT, feature=feature) == Editing(feature)
    assert transition(Editing(feature), Action.SELECT) == Editing(None)
    assert transition(Idle(), Action.SELECT, feature=feature) is None


def test_append_requires_selection_and_backup(feature):
    backup = feature.as_tuple()
    assert transition(Editing(None), Action.START_APPEND, backup=backup) is None
    assert transition(Editing(feature), Action.START_APPEND) is None

    appending = transition(Editing(feature), Action.START_APPEND, backup=backup)
    assert appending == Appending(feature, backup)
    assert transition(appending, Action.START_APPEND, backup=backup) is None


@pytest.mark.parametrize("action", [Action.CONFIRM_APPEND, Action.CANCEL_APPEND])
def test_append_ends_in_editing_with_target(feature, action):
    appending = Appending(feature, feature.as_tuple())
    assert transition(appending, action) == Editing(feature)
    assert transition(Editing(feature), action) is None
    assert transition(Idle(), action) is None


def test_modes_are_immutable(feature):
    mode = Editing(feature)
    with pytest.raises(AttributeError):
        mode.selected = None


def test_predicates(feature):
    appending = Appending(feature, feature.as_tuple())

    assert not can_finish(Idle())
    assert can_finish(Drawing())
    assert can_finish(appending)
    assert not can_finish(Editing(feature))

    assert not can_cancel(Idle())
    assert not can_cancel(Editing(None))
    assert can_cancel(Editing(feature))
    assert can_cancel(Drawing())
    assert can_cancel(appending)

    assert is_editing(appending)
    assert selected_feature(appending) is feature
    assert selected_feature(Drawing()) is None


class TestControlStates:
    def test_idle_without_features(self):
        controls = control_states(Idle(), 0)
        assert controls.start_drawing
        assert not controls.toggle_edit
        assert not controls.start_append
        assert not controls.show_numeric_inputs

    def test_idle_with_features(self):
        assert control_states(Idle(), 2).toggle_edit

    def test_drawing(self):
        controls = control_states(Drawing(), 3)
        assert not controls.start_drawing
        assert not controls.toggle_edit

    def test_editing_without_features_can_still_leave(self):
        controls = control_states(Editing(None), 0)
        assert controls.toggle_edit
        assert not controls.start_drawing
        assert not controls.edit_actions

    def test_editing_with_selection(self, feature):
        controls = control_states(Editing(feature), 1)
        assert controls.start_append
        assert controls.edit_actions
        assert controls.numeric_input
        assert controls.show_numeric_inputs

    def test_appending(self, feature):
        controls = control_states(Appending(feature, feature.as_tuple()), 1)
        assert not controls.toggle_edit
        assert not controls.start_append
        assert not controls.edit_actions
        assert not controls.numeric_input
        assert controls.show_numeric_inputs

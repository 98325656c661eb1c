from pathlib import Path

import click
import pytest

from spec_shaver.console import Console, LogLevel
from spec_shaver.errors import WizardCancelled
from spec_shaver.parser.base import ReducerOptions
from spec_shaver.parser.swagger import load_document
from spec_shaver.reducer.engine import OpenAPIReducer
from spec_shaver.wizard.machine import (
    TRANSITIONS,
    Event,
    InvalidTransition,
    SelectionWizard,
    State,
    run_wizard,
    transition,
)
from spec_shaver.wizard.prompts import parse_selection

FIXTURES = Path(__file__).parent / "fixtures"

# crm.json groups, sorted: accounts, health, reports, users


class ScriptedPrompter:
    """Answers prompts from a fixed script; records every question asked."""

    def __init__(self, answers: list):
        self.answers = list(answers)
        self.asked: list[str] = []

    def _next(self, message: str):
        self.asked.append(message)
        if not self.answers:
            raise AssertionError(f"Unexpected prompt: {message}")
        answer = self.answers.pop(0)
        if isinstance(answer, Exception):
            raise answer
        return answer

    def select(self, message, options, default=None):
        return self._next(message)

    def checkbox(self, message, labels, checked):
        answer = self._next(message)
        return list(range(len(labels))) if answer == "all" else answer

    def confirm(self, message, default=False):
        return self._next(message)


def _wizard(answers: list) -> tuple[SelectionWizard, ScriptedPrompter]:
    prompter = ScriptedPrompter(answers)
    console = Console(LogLevel.QUIET)
    wizard = SelectionWizard(
        load_document(FIXTURES / "crm.json"),
        OpenAPIReducer(ReducerOptions(), console=console),
        prompter=prompter,
        console=console,
    )
    return wizard, prompter


class TestTransitions:
    def test_every_state_can_cancel(self):
        for state in State:
            if state is not State.DONE:
                assert transition(state, Event.CANCEL) is State.DONE

    def test_back_edges(self):
        assert transition(State.CHOOSE_GROUPS, Event.BACK) is State.CHOOSE_MODE
        assert transition(State.CONFIRM_REFINE, Event.BACK) is State.CHOOSE_GROUPS
        assert transition(State.REFINE_OPERATIONS, Event.BACK) is State.CONFIRM_REFINE
        assert transition(State.CHOOSE_INDIVIDUAL, Event.BACK) is State.CHOOSE_MODE

    def test_done_is_terminal(self):
        assert not any(state is State.DONE for state, _ in TRANSITIONS)

    def test_invalid_transition(self):
        with pytest.raises(InvalidTransition):
            transition(State.CHOOSE_MODE, Event.REFINE)


class TestSelectionWizard:
    def test_keep_all(self):
        wizard, _ = _wizard(["all", "continue"])
        result = wizard.run()
        assert result.reduced_operation_count == 7
        assert wizard.state is State.DONE

    def test_groups_without_refine(self):
        wizard, _ = _wizard(["groups", [0, 3], "continue", False, "continue", "continue"])
        result = wizard.run()
        assert wizard.selected_tags == ["accounts", "users"]
        assert [(op.method, op.path) for op in result.operations] == [
            ("GET", "/accounts"),
            ("GET", "/users"),
            ("POST", "/users"),
            ("GET", "/users/{userId}"),
            ("DELETE", "/users/{userId}"),
        ]

    def test_groups_with_refine(self):
        answers = [
            "groups",
            [3], "continue",        # users
            True, "continue",       # refine
            [0, 3], "continue",     # GET /users, DELETE /users/{userId}
            "continue",
        ]
        wizard, _ = _wizard(answers)
        result = wizard.run()
        assert [(op.method, op.path) for op in result.operations] == [
            ("GET", "/users"),
            ("DELETE", "/users/{userId}"),
        ]

    def test_empty_group_selection_retries(self):
        wizard, prompter = _wizard(["groups", [], "continue", [1], "continue", False, "continue", "continue"])
        result = wizard.run()
        assert [op.path for op in result.operations] == ["/health"]
        assert prompter.asked.count("Select groups to include:") == 2

    def test_back_from_groups_to_mode(self):
        wizard, _ = _wizard(["groups", [0], "back", "all", "continue"])
        result = wizard.run()
        assert result.reduced_operation_count == 7

    def test_back_from_refine_keeps_previous_tags_checked(self):
        answers = [
            "groups",
            [0], "continue",
            True, "back",          # back to group selection
            [0, 2], "continue",
            False, "continue",
            "continue",
        ]
        wizard, _ = _wizard(answers)
        result = wizard.run()
        assert [op.path for op in result.operations] == ["/accounts", "/reports/{reportId}"]

    def test_individual(self):
        answers = ["individual", [0], [], [0], [], "continue", "continue"]
        wizard, _ = _wizard(answers)
        result = wizard.run()
        assert [op.path for op in result.operations] == ["/accounts", "/reports/{reportId}"]

    def test_nothing_selected_cancels(self):
        wizard, _ = _wizard(["individual", [], [], [], [], "continue"])
        with pytest.raises(WizardCancelled):
            wizard.run()

    def test_cancel_from_action_menu(self):
        wizard, _ = _wizard(["groups", [0], "cancel"])
        with pytest.raises(WizardCancelled):
            wizard.run()
        assert wizard.state is State.DONE
        assert wizard.result is None

    def test_ctrl_c_at_any_prompt_cancels(self):
        wizard, _ = _wizard(["groups", WizardCancelled("Cancelled.")])
        with pytest.raises(WizardCancelled):
            wizard.run()

    def test_declined_summary_cancels(self):
        wizard, _ = _wizard(["all", "cancel"])
        with pytest.raises(WizardCancelled):
            wizard.run()

    def test_start_over_from_summary(self):
        wizard, _ = _wizard(["all", "back", "groups", [1], "continue", False, "continue", "continue"])
        result = wizard.run()
        assert [op.path for op in result.operations] == ["/health"]

    def test_run_wizard_helper(self):
        prompter = ScriptedPrompter(["all", "continue"])
        result = run_wizard(
            load_document(FIXTURES / "crm.json"),
            ReducerOptions(max_size_bytes=10),
            prompter=prompter,
            console=Console(LogLevel.QUIET),
        )
        assert "example" not in result.document["components"]["schemas"]["User"]
        request_body = result.document["paths"]["/users"]["post"]["requestBody"]
        assert "examples" not in request_body["content"]["application/json"]


class TestParseSelection:
    def test_numbers_and_ranges(self):
        assert parse_selection("1, 3-4", 5) == [0, 2, 3]

    def test_all_and_none(self):
        assert parse_selection("all", 3) == [0, 1, 2]
        assert parse_selection("none", 3) == []
        assert parse_selection("", 3) == []

    def test_out_of_range(self):
        with pytest.raises(click.BadParameter):
            parse_selection("7", 3)

    def test_not_a_number(self):
        with pytest.raises(click.BadParameter):
            parse_selection("x", 3)

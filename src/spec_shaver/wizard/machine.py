"""Interactive operation-selection wizard as an explicit state machine.

States and the events that move between them are listed in ``TRANSITIONS``;
every state can be cancelled. Each state handler asks its questions through a
``Prompter`` and returns the event the answer maps to.
"""

from enum import Enum

from spec_shaver.console import Console, format_bytes, format_operation
from spec_shaver.errors import WizardCancelled
from spec_shaver.parser.base import OperationGroup, OperationInfo, ReducerOptions, ReductionResult
from spec_shaver.reducer.engine import OpenAPIReducer
from spec_shaver.wizard.grouping import extract_operation_groups
from spec_shaver.wizard.prompts import ClickPrompter, Prompter


class State(str, Enum):
    CHOOSE_MODE = "choose_mode"
    CHOOSE_GROUPS = "choose_groups"
    CONFIRM_REFINE = "confirm_refine"
    REFINE_OPERATIONS = "refine_operations"
    CHOOSE_INDIVIDUAL = "choose_individual"
    SUMMARY = "summary"
    DONE = "done"


class Event(str, Enum):
    GROUPS = "groups"
    INDIVIDUAL = "individual"
    ALL = "all"
    CONTINUE = "continue"
    REFINE = "refine"
    RETRY = "retry"
    BACK = "back"
    CANCEL = "cancel"


TRANSITIONS: dict[tuple[State, Event], State] = {
    (State.CHOOSE_MODE, Event.GROUPS): State.CHOOSE_GROUPS,
    (State.CHOOSE_MODE, Event.INDIVIDUAL): State.CHOOSE_INDIVIDUAL,
    (State.CHOOSE_MODE, Event.ALL): State.SUMMARY,
    (State.CHOOSE_GROUPS, Event.CONTINUE): State.CONFIRM_REFINE,
    (State.CHOOSE_GROUPS, Event.RETRY): State.CHOOSE_GROUPS,
    (State.CHOOSE_GROUPS, Event.BACK): State.CHOOSE_MODE,
    (State.CONFIRM_REFINE, Event.REFINE): State.REFINE_OPERATIONS,
    (State.CONFIRM_REFINE, Event.CONTINUE): State.SUMMARY,
    (State.CONFIRM_REFINE, Event.BACK): State.CHOOSE_GROUPS,
    (State.REFINE_OPERATIONS, Event.CONTINUE): State.SUMMARY,
    (State.REFINE_OPERATIONS, Event.BACK): State.CONFIRM_REFINE,
    (State.CHOOSE_INDIVIDUAL, Event.CONTINUE): State.SUMMARY,
    (State.CHOOSE_INDIVIDUAL, Event.BACK): State.CHOOSE_MODE,
    (State.SUMMARY, Event.CONTINUE): State.DONE,
    (State.SUMMARY, Event.BACK): State.CHOOSE_MODE,
}
for _state in State:
    if _state is not State.DONE:
        TRANSITIONS[(_state, Event.CANCEL)] = State.DONE


class InvalidTransition(ValueError):
    pass


def transition(state: State, event: Event) -> State:
    try:
        return TRANSITIONS[(state, event)]
    except KeyError:
        raise InvalidTransition(f"No transition from {state.value} on {event.value}") from None


ACTION_OPTIONS = [("continue", "Continue"), ("back", "Go back"), ("cancel", "Cancel")]

MODE_OPTIONS = [
    ("groups", "Select by groups/tags (recommended) - Choose entire groups of related endpoints"),
    ("individual", "Select individual operations - Pick specific endpoints one by one"),
    ("all", "Keep all operations - Include everything (only optimize size)"),
    ("cancel", "Cancel"),
]


def _operation_label(op: OperationInfo) -> str:
    summary = op.operation.get("summary")
    label = f"{op.method.ljust(7)} {op.path}"
    return f"{label} - {summary}" if isinstance(summary, str) and summary else label


class SelectionWizard:
    """Walks the user through choosing operations, then builds the result."""

    def __init__(
        self,
        document: dict,
        reducer: OpenAPIReducer,
        prompter: Prompter | None = None,
        console: Console | None = None,
    ):
        self.document = document
        self.reducer = reducer
        self.prompter = prompter or ClickPrompter()
        self.console = console or Console()
        self.groups = extract_operation_groups(document)

        self.state = State.CHOOSE_MODE
        self.mode: str | None = None
        self.selected_tags: list[str] = []
        self.refine = False
        self.selected: list[OperationInfo] = []
        self.result: ReductionResult | None = None
        self.cancelled = False

        self._handlers = {
            State.CHOOSE_MODE: self._choose_mode,
            State.CHOOSE_GROUPS: self._choose_groups,
            State.CONFIRM_REFINE: self._confirm_refine,
            State.REFINE_OPERATIONS: self._refine_operations,
            State.CHOOSE_INDIVIDUAL: self._choose_individual,
            State.SUMMARY: self._summary,
        }

    def run(self) -> ReductionResult:
        """Drive the machine to DONE. Raises WizardCancelled if the user backs out."""
        total = sum(len(g.operations) for g in self.groups)
        self.console.log(f"\nFound {total} operations in {len(self.groups)} groups:\n")

        while self.state is not State.DONE:
            try:
                event = self._handlers[self.state]()
            except WizardCancelled:
                event = Event.CANCEL
            if event is Event.CANCEL:
                self.cancelled = True
            self.state = transition(self.state, event)

        if self.cancelled or self.result is None:
            raise WizardCancelled("Cancelled.")
        return self.result

    def _ask_action(self) -> Event:
        return Event(self.prompter.select("What would you like to do?", ACTION_OPTIONS, default="continue"))

    def _chosen_groups(self) -> list[OperationGroup]:
        return [g for g in self.groups if g.tag in self.selected_tags]

    def _choose_mode(self) -> Event:
        mode = self.prompter.select(
            "How would you like to select operations? (Ctrl+C to exit)",
            MODE_OPTIONS,
            default=self.mode or "groups",
        )
        if mode == "cancel":
            return Event.CANCEL
        self.mode = mode
        if mode == "all":
            self.selected = [op for g in self.groups for op in g.operations]
        return Event(mode)

    def _choose_groups(self) -> Event:
        picked = self.prompter.checkbox(
            "Select groups to include:",
            [f"{g.tag} ({len(g.operations)} operations)" for g in self.groups],
            [g.tag in self.selected_tags for g in self.groups],
        )
        action = self._ask_action()
        if action is not Event.CONTINUE:
            return action

        if not picked:
            self.console.warn("No groups selected. Please select at least one group or go back.")
            return Event.RETRY

        self.selected_tags = [self.groups[i].tag for i in picked]
        return Event.CONTINUE

    def _confirm_refine(self) -> Event:
        chosen = self._chosen_groups()
        count = sum(len(g.operations) for g in chosen)
        refine = self.prompter.confirm(
            f"Selected {count} operations. Would you like to refine individual operations within these groups?",
            default=self.refine,
        )
        action = self._ask_action()
        if action is not Event.CONTINUE:
            return action

        self.refine = refine
        if refine:
            return Event.REFINE
        self.selected = [op for g in chosen for op in g.operations]
        return Event.CONTINUE

    def _pick_from_groups(self, groups: list[OperationGroup], checked: bool) -> list[OperationInfo]:
        picked_ops: list[OperationInfo] = []
        for group in groups:
            self.console.log(f"\n--- {group.tag} ---")
            picked = self.prompter.checkbox(
                f"Select operations from {group.tag}:",
                [_operation_label(op) for op in group.operations],
                [checked] * len(group.operations),
            )
            picked_ops.extend(group.operations[i] for i in picked)
        return picked_ops

    def _refine_operations(self) -> Event:
        refined = self._pick_from_groups(self._chosen_groups(), checked=True)
        action = self._ask_action()
        if action is not Event.CONTINUE:
            return action
        self.selected = refined
        return Event.CONTINUE

    def _choose_individual(self) -> Event:
        picked = self._pick_from_groups(self.groups, checked=False)
        action = self._ask_action()
        if action is not Event.CONTINUE:
            return action
        self.selected = picked
        return Event.CONTINUE

    def _summary(self) -> Event:
        if not self.selected:
            self.console.warn("No operations selected. Exiting.")
            return Event.CANCEL

        self.console.verbose("Building reduced schema from selections...")
        result = self.reducer.reduce_selection(self.document, self.selected)

        self.console.header("SELECTION SUMMARY")
        self.console.log(f"Operations: {result.original_operation_count} → {result.reduced_operation_count}")
        self.console.log(f"Estimated size: {format_bytes(result.size_bytes)}")
        self.console.separator()
        for op in result.operations:
            self.console.verbose(format_operation(op.method, op.path, op.summary))

        choice = self.prompter.select(
            "Generate reduced schema with these selections?",
            [("continue", "Generate"), ("back", "Start over"), ("cancel", "Cancel")],
            default="continue",
        )
        if choice == "continue":
            self.result = result
        return Event(choice)


def run_wizard(
    document: dict,
    options: ReducerOptions | None = None,
    prompter: Prompter | None = None,
    console: Console | None = None,
) -> ReductionResult:
    console = console or Console()
    reducer = OpenAPIReducer(options, console=console)
    return SelectionWizard(document, reducer, prompter=prompter, console=console).run()

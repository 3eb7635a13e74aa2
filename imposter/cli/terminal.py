"""
Terminal hot-seat front end. Players pass one keyboard around; each private
reveal is shown for the configured time and then cleared from the screen.
"""

import time
from typing import Callable, Optional

from ..core.configuration import CATEGORIES, ConfigurationDraft
from ..core.exceptions import ImposterGameError, NameValidationError
from ..core.naming import ManualScheduler
from ..core.roles import IMPOSTER_LABEL
from ..core.session import SessionController, SessionStage

BACK_COMMAND = "<"
CLEAR_SCREEN = "\033[2J\033[H"


class TerminalGame:
    """Drives a SessionController from stdin/stdout."""

    def __init__(self, controller: SessionController, scheduler: ManualScheduler,
                 input_fn: Callable[[str], str] = input,
                 output_fn: Callable[[str], None] = print,
                 sleep_fn: Callable[[float], None] = time.sleep,
                 draft: Optional[ConfigurationDraft] = None):
        self.controller = controller
        self.scheduler = scheduler
        self.input = input_fn
        self.output = output_fn
        self.sleep = sleep_fn
        self.draft = draft or ConfigurationDraft()

    def run(self) -> None:
        """Play games until the players decline another one."""
        while True:
            self.configure()
            self.name_players()
            if not self.confirm_ready():
                self.controller.reset()
                continue
            self.play_round()
            if not self._ask_yes_no("Configure a new game? [y/N] ", default=False):
                return
            self.controller.reset()

    def configure(self) -> None:
        self.output("Configure Game")
        self.output("=" * 40)
        for number, category in enumerate(CATEGORIES, start=1):
            self.output(f"  {number}. {category.label}")
        choice = self._ask_int("Category", 1, 1, len(CATEGORIES))
        self.draft.set_category(CATEGORIES[choice - 1].value)

        players = self._ask_int(
            "Players", self.draft.player_count, self.draft.min_players, self.draft.max_players
        )
        self.draft.set_player_count(players)
        imposters = self._ask_int("Imposters", self.draft.imposter_count, 1, self.draft.max_imposters)
        self.draft.set_imposter_count(imposters)
        self.draft.set_reveal_on_elimination(
            self._ask_yes_no("Reveal eliminated player's role? [y/N] ", default=False)
        )
        self.controller.configure(self.draft.build())
        self._print_notices()

    def name_players(self) -> None:
        controller = self.controller
        while controller.stage == SessionStage.NAMING_PLAYERS:
            sequencer = controller.sequencer
            index = sequencer.current_index
            hint = f" ({BACK_COMMAND} to go back)" if sequencer.can_go_back else ""
            default = f" [{sequencer.current_name}]" if sequencer.current_name else ""
            raw = self.input(f"Player {index + 1} of {sequencer.player_count}{hint}{default}: ")

            if raw.strip() == BACK_COMMAND and sequencer.can_go_back:
                controller.previous_player()
                continue
            name = raw if raw.strip() else sequencer.current_name
            try:
                content = controller.submit_name(name)
            except NameValidationError as exc:
                self.output(f"Name Required: {exc.message}")
                continue

            if content == IMPOSTER_LABEL:
                self.output(f"Your Role: {content}")
            else:
                self.output(f"Your secret item is: {content}")
            self.sleep(controller.reveal_duration_ms / 1000.0)
            self.output(CLEAR_SCREEN)
            self.scheduler.run_pending()
        self._print_notices()

    def confirm_ready(self) -> bool:
        game = self.controller.game
        config = game.configuration
        self.output("Game Ready!")
        self.output(f"Category: {config.category}")
        self.output(f"Players: {config.player_count}")
        self.output(f"Imposters: {config.imposter_count}")
        self.output(f"Reveal Eliminated Player's Role: {'Yes' if config.reveal_on_elimination else 'No'}")
        for number, name in enumerate(game.names, start=1):
            self.output(f"  {number}. {name}")
        return self._ask_yes_no("Begin round? [Y/n] ", default=True)

    def play_round(self) -> None:
        engine = self.controller.begin_round()
        while not engine.is_over:
            self._print_roster(reveal_all=False)
            choice = self._ask_int("Eliminate player", None, 1, len(engine.players))
            try:
                if not self.controller.eliminate(choice - 1):
                    self.output(f"{engine.players[choice - 1].name} is already eliminated.")
            except ImposterGameError as exc:
                self.output(exc.message)
        self._print_roster(reveal_all=True)
        self.output(engine.outcome.message)

    def _print_roster(self, reveal_all: bool) -> None:
        for player in self.controller.round.players:
            status = "eliminated" if player.is_eliminated else "in play"
            role = ""
            if reveal_all or player.role_revealed_on_elimination:
                role = " - Imposter" if player.is_imposter else " - Loyal"
            self.output(f"  {player.index + 1}. {player.name} ({status}){role}")

    def _print_notices(self) -> None:
        for notice in self.controller.notices:
            self.output(f"[{notice.title}] {notice.message}")
        self.controller.notices.clear()

    def _ask_int(self, label: str, default: Optional[int], low: int, high: int) -> int:
        prompt = f"{label} ({low}-{high})" + (f" [{default}]" if default is not None else "") + ": "
        while True:
            raw = self.input(prompt).strip()
            if not raw and default is not None:
                return default
            try:
                value = int(raw)
            except ValueError:
                self.output("Please enter a number.")
                continue
            if low <= value <= high:
                return value
            self.output(f"Please enter a number between {low} and {high}.")

    def _ask_yes_no(self, prompt: str, default: bool) -> bool:
        raw = self.input(prompt).strip().lower()
        if not raw:
            return default
        return raw in ("y", "yes")

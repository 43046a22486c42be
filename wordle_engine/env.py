import argparse
import asyncio
import logging
import uuid
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from .commands import keystrokes_for_line
from .config import Config, build_validator, build_word_source
from .game import FrameOutcome, GuessRejected, GuessScored, RoundLost, RoundState, RoundStateMachine, RoundWon
from .log import setup_logging
from .render import TextUI
from .session import RoundSession
from .validation import GuessValidator, Reason
from .words import WordSource

logger = logging.getLogger(__name__)


class WordleEnv:
    """Plays rounds of Wordle: picks secrets, runs one session at a time and shows outcomes."""

    def __init__(
        self,
        config: Optional[Config] = None,
        word_source: Optional[WordSource] = None,
        validator: Optional[GuessValidator] = None,
        ui: Optional[TextUI] = None,
        target_word: Optional[str] = None,
    ):
        """
        Args:
            config (Config): Settings used to build any collaborator not passed in.
            word_source (WordSource): Where secret words come from.
            validator (GuessValidator): Checks guesses before they are scored.
            ui (TextUI): Presentation sink receiving every frame outcome.
            target_word (str): A specific word to use for every round.
        """
        self.config = config or Config()
        self.word_source = word_source or build_word_source(self.config)
        self.machine = RoundStateMachine(validator or build_validator(self.config, self.word_source))
        self.ui = ui or TextUI()
        self.target_word_arg = target_word.upper() if target_word else None

        self.session: Optional[RoundSession] = None
        self.game_id: Optional[str] = None
        self.game_state: Dict[str, Any] = {}

    @property
    def state(self) -> RoundState:
        if not self.session:
            raise RuntimeError("You must call reset() before playing.")
        return self.session.state

    async def reset(self) -> RoundState:
        """Discards the current round, if any, and starts a new one."""
        await self._end_round()

        secret = self.target_word_arg or self.word_source.next()
        self.ui.reset()
        self.session = RoundSession(secret, self.machine, sink=self._on_outcome)
        self.session.start()
        self.game_id = str(uuid.uuid4())

        self.game_state = {
            "game_id": self.game_id,
            "target_word": self.session.state.secret,
            "won": False,
            "num_turns": 0,
            "guesses": [],
            "rejections": [],
        }
        logger.info("Round %s started", self.game_id)
        return self.session.state

    async def step(self, raw_keys: Iterable[str]) -> List[FrameOutcome]:
        """Feeds keystrokes to the current round and returns their outcomes in order."""
        if not self.session:
            raise RuntimeError("You must call reset() before calling step().")
        return await self.session.type_all(raw_keys)

    async def _end_round(self):
        if self.session:
            await self.session.close()
            self.session = None

    async def close(self):
        """Ends the current round and releases the word lookup."""
        await self._end_round()
        self.machine.validator.close()

    def _on_outcome(self, outcome: FrameOutcome):
        if isinstance(outcome, GuessRejected):
            self.game_state["rejections"].append(outcome.reason.value)
        elif isinstance(outcome, (GuessScored, RoundWon, RoundLost)):
            self.game_state["guesses"].append({
                "guess": outcome.word,
                "feedback": [f.value for f in outcome.feedback],
            })
            self.game_state["num_turns"] = outcome.row + 1
            self.game_state["won"] = isinstance(outcome, RoundWon)
        self.ui.show(outcome)


def show_rules_once(ui: TextUI, flag_path: Path) -> bool:
    """Prints the rules on the first ever visit, remembered by a flag file."""
    flag_path = Path(flag_path)
    if flag_path.exists():
        return False
    ui.print_rules()
    try:
        flag_path.parent.mkdir(parents=True, exist_ok=True)
        flag_path.touch()
    except OSError as e:
        logger.warning("Could not save rules flag at %s: %s", flag_path, e)
    return True


async def play_interactive(env: WordleEnv, read_line=None):
    """Terminal loop: each line becomes keystrokes for the current round."""
    read_line = read_line or input
    await env.reset()
    try:
        while True:
            state = env.state
            if state.is_over:
                prompt = "Type 'restart' for a new word or 'quit' to leave: "
            else:
                remaining = env.machine.max_guesses - state.row
                prompt = f"Attempt #{state.row + 1} ({remaining} left). Enter your guess: "

            try:
                line = read_line(prompt)
            except (KeyboardInterrupt, EOFError):
                print("\n\nExiting game.")
                break

            command = line.strip().lower()
            if command == "quit":
                break
            if command == "restart":
                await env.reset()
                print("New word chosen.")
                continue
            if command == "rules":
                env.ui.print_rules()
                continue
            if state.is_over:
                continue

            keys = keystrokes_for_line(line)
            if len(keys) == 1:
                await env.step(keys)
                continue

            # a typed word replaces whatever is left from a rejected guess
            if len(line.strip()) > env.machine.word_length:
                env.ui.show(GuessRejected(Reason.WRONG_LENGTH))
                continue
            await env.step(["BACKSPACE"] * len(env.state.partial) + keys)
    finally:
        await env.close()


def main(argv: Optional[List[str]] = None):
    """Main function to run an interactive Wordle game from the command line."""
    parser = argparse.ArgumentParser(
        description="Play Wordle in the terminal.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument('--no-check', action='store_true', help="Only check guess length, skip the word lookup.")
    parser.add_argument('--word-list', type=Path, default=None, help="File of 5-letter words used for secrets and offline word checks.")
    parser.add_argument('--log-level', type=str, default=None, help="Console log level (defaults to LOG_LEVEL or WARNING).")
    args = parser.parse_args(argv)

    config = Config()
    if args.word_list:
        config.WORD_LIST_PATH = str(args.word_list)
        if config.WORD_CHECK == "dictionary":
            config.WORD_CHECK = "word-list"
    if args.no_check:
        config.WORD_CHECK = "none"
    setup_logging(args.log_level or config.LOG_LEVEL, config.LOG_DIR)

    try:
        env = WordleEnv(config=config)
    except (FileNotFoundError, ValueError) as e:
        print(e)
        raise SystemExit(1)

    env.ui.print_welcome()
    show_rules_once(env.ui, config.RULES_FLAG_PATH)
    asyncio.run(play_interactive(env))


if __name__ == "__main__":
    main()

from typing import List, Optional

from .game import (
    MAX_TURNS, MAX_WORD_LEN, FrameOutcome, GuessRejected, GuessScored, LetterAdded,
    LetterRemoved, RoundLost, RoundState, RoundWon, letter_states,
)
from .validation import Reason

REJECT_MESSAGES = {
    Reason.WRONG_LENGTH: f"Word must have {MAX_WORD_LEN} letters",
    Reason.NOT_A_WORD: "Your input is not an actual word",
    Reason.LOOKUP_UNAVAILABLE: "The dictionary could not be reached, please try again",
}


def reject_message(reason: Reason) -> str:
    return REJECT_MESSAGES[reason]


# --- Text-based UI Class ---
class TextUI:
    """
    Terminal presentation sink. It keeps its own copy of the board and only
    ever changes it in response to frame outcomes.
    """

    def __init__(self, echo: bool = True):
        self.feedback_char_map = {"correct": "G", "present": "Y", "absent": "X"}
        self.echo = echo
        self.reset()

    def reset(self):
        self.tiles: List[List[str]] = [[" "] * MAX_WORD_LEN for _ in range(MAX_TURNS)]
        self.colours: List[Optional[str]] = [None] * MAX_TURNS
        self.messages: List[str] = []

    def __call__(self, outcome: FrameOutcome):
        self.show(outcome)

    def show(self, outcome: FrameOutcome):
        if isinstance(outcome, LetterAdded):
            self.tiles[outcome.row][outcome.col] = outcome.letter
        elif isinstance(outcome, LetterRemoved):
            self.tiles[outcome.row][outcome.col] = " "
        elif isinstance(outcome, GuessRejected):
            self._say(reject_message(outcome.reason))
        elif isinstance(outcome, (GuessScored, RoundWon, RoundLost)):
            self.tiles[outcome.row] = list(outcome.word)
            self.colours[outcome.row] = "".join(self.feedback_char_map[f.value] for f in outcome.feedback)
            self._say(self.board_string())
            if isinstance(outcome, RoundWon):
                self._say("You Win!")
            elif isinstance(outcome, RoundLost):
                self._say(f"You Lose! The word was {outcome.secret}")

    def _say(self, message: str):
        self.messages.append(message)
        if self.echo:
            print(message)

    def print_welcome(self):
        print("Wordle!")
        print(f"Guess the {MAX_WORD_LEN}-letter word in {MAX_TURNS} tries.")
        print(f"Feedback: [{self.feedback_char_map['correct']}] Correct, [{self.feedback_char_map['present']}] Present, [{self.feedback_char_map['absent']}] Absent.")
        print("-" * 50)

    def print_rules(self):
        print("How to play:")
        print(f"  Type letters to build a {MAX_WORD_LEN}-letter guess, BACKSPACE to remove one, ENTER to submit.")
        print(f"  You have {MAX_TURNS} guesses to find the secret word.")
        print(f"  [{self.feedback_char_map['correct']}] the letter is in the word and in the right spot.")
        print(f"  [{self.feedback_char_map['present']}] the letter is in the word but in another spot.")
        print(f"  [{self.feedback_char_map['absent']}] the letter is not in the word.")
        print("  Commands: 'restart' for a new word, 'rules' to see this again, 'quit' to leave.")
        print("-" * 50)

    def board_string(self) -> str:
        lines = ["======="]
        for i in range(MAX_TURNS):
            lines.append(f"|{''.join(self.tiles[i])}|")
            lines.append(f"|{self.colours[i] or ' ' * MAX_WORD_LEN}|")
            if i < MAX_TURNS - 1:
                lines.append("-------")
        lines.append("=======")
        return "\n".join(lines)

    def get_text_observation(self, state: RoundState, status: Optional[str] = None) -> str:
        """Board plus keyboard letter states for a round, e.g. for an LLM player."""
        board_str = self._get_board_string(state)
        letters_str = self._get_letters_string(state)

        status_message = f"Invalid Guess: {status}\n\n" if status else ""
        return f"{status_message}{board_str}\n{letters_str}"

    def _get_board_string(self, state: RoundState) -> str:
        lines = ["======="]
        for i in range(MAX_TURNS):
            if i < state.row:
                guess = state.history[i]
                feedback_chars = "".join(self.feedback_char_map[f.value] for f in guess.feedback)
                lines.append(f"|{guess.word}|")
                lines.append(f"|{feedback_chars}|")
            else:
                lines.append("|     |")
                lines.append("|     |")

            if i < MAX_TURNS - 1:
                lines.append("-------")
        lines.append("=======")
        return "\n".join(lines)

    def _get_letters_string(self, state: RoundState) -> str:
        states = letter_states(state.history)

        correct = sorted(k for k, v in states.items() if v == "correct")
        present = sorted(k for k, v in states.items() if v == "present")
        absent = sorted(k for k, v in states.items() if v == "absent")
        unused = sorted(k for k, v in states.items() if v == "unused")

        lines = ["\nLetters:"]
        lines.append(f"  Correct: {' '.join(correct)}")
        lines.append(f"  Present: {' '.join(present)}")
        lines.append(f"  Absent:  {' '.join(absent)}")
        lines.append(f"  Unused:  {' '.join(unused)}")
        return "\n".join(lines)

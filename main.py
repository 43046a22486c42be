import asyncio
import json
import os
import re
from pathlib import Path
from typing import List, Dict, Optional, Tuple, Any
from enum import Enum

from wordle_engine import WordleEnv, TextUI, keystrokes_for_line
from wordle_engine.config import Config
from wordle_engine.game import GuessRejected
from wordle_engine.log import setup_logging
from wordle_engine.render import reject_message
from dotenv import load_dotenv
from litellm import completion, get_supported_openai_params

load_dotenv()

FALLBACK_GUESS = "RAISE"

class ReasoningEffort(Enum):
    DISABLE = "disable"
    LOW     = "low"
    MEDIUM  = "medium"
    HIGH    = "high"

def colored(st, color:Optional[str], background=False): return f"\u001b[{10*background+60*(color.upper() == color)+30+['black', 'red', 'green', 'yellow', 'blue', 'magenta', 'cyan', 'white'].index(color.lower())}m{st}\u001b[0m" if color is not None else st

def query(
    model: str,
    reasoning_effort: Optional[ReasoningEffort],
    messages: List[Dict[str, Any]],
) -> Tuple[str, Optional[str]]:
    if reasoning_effort is not None:
        response = completion(model=model, messages=messages, reasoning_effort=reasoning_effort.value)
    else:
        response = completion(model=model, messages=messages)
    answer = response.choices[0].message.content
    cot = getattr(response.choices[0].message, "reasoning_content", None)
    return answer, cot


def parse_guess(answer: Optional[str]) -> Optional[str]:
    match = re.search(r'\[([A-Z]{5})\]', (answer or "").upper())
    return match.group(1) if match else None


async def play_wordle(model: str, reasoning_effort: ReasoningEffort, target_word: Optional[str] = None, logging_enabled: bool = True, env: Optional[WordleEnv] = None, max_queries: int = 30) -> Dict[str, Any]:
    """
    Plays a round of Wordle using an LLM agent. The agent's word is typed into
    the engine one keystroke at a time, exactly like a human at a keyboard.

    Args:
        model (str): The identifier of the model to use.
        reasoning_effort (ReasoningEffort): The reasoning effort setting for the model.
        target_word (str): The secret word for the game (random when omitted).
        logging_enabled (bool): If True, saves all game artifacts to disk.
        env (WordleEnv): Environment to play in, built from the environment settings when omitted.
        max_queries (int): Upper bound on model calls, rejected guesses included.

    Returns:
        The game state record of the round.
    """
    env = env or WordleEnv(ui=TextUI(echo=False), target_word=target_word)
    state = await env.reset()

    print(colored("=" * 30, "blue"))
    print(colored("Let's Play Wordle with an LLM!", "cyan"))
    print(f"{colored('Model:', 'magenta')} {colored(model, 'yellow')}")
    print(f"{colored('Target Word:', 'magenta')} {colored(state.secret, 'yellow')}")
    print(f"{colored('Logging:', 'magenta')} {colored('Enabled' if logging_enabled else 'Disabled', 'yellow')}")
    print(colored("=" * 30, "blue"))

    game_log_dir: Optional[Path] = None
    if logging_enabled:
        model_dir_name = model.replace('/', '_') # Sanitize model name
        game_log_dir = Path("logs") / model_dir_name / env.game_id
        os.makedirs(game_log_dir, exist_ok=True)
        print(colored(f"Logs for this game will be saved to: {game_log_dir}", "blue"))

    system_prompt = {"role": "system", "content": (
        "You are an expert Wordle player. Your objective is to guess a 5-letter secret word in 6 tries. "
        "After each guess you get the board: G means right letter in the right spot, Y means the letter is "
        "somewhere else in the word, X means the letter is not in the word. "
        "Your response MUST be a single, valid 5-letter English word enclosed in square brackets, like [WORD]."
    )}
    messages: List[Dict[str, Any]] = [system_prompt]

    observation_text = env.ui.get_text_observation(state)
    print(observation_text)
    messages.append({"role": "user", "content": f"Here is the initial state:\n{observation_text}\n\nWhat is your first guess?"})

    supported_params = get_supported_openai_params(model=model) or []
    current_reasoning_effort = reasoning_effort if "reasoning_effort" in supported_params else None

    try:
        queries = 0
        while not env.state.is_over and queries < max_queries:
            queries += 1
            answer, thoughts = query(model, current_reasoning_effort, messages)

            guess = parse_guess(answer)
            if guess is None:
                print(colored(f"LLM returned an invalid response: '{answer}'. Defaulting to '{FALLBACK_GUESS}'.", "red"))
                guess = FALLBACK_GUESS

            if thoughts: print(colored("\n[chain-of-thought]", "yellow"), f"\n{thoughts}")

            print(f"\n{colored(f'LLM Guess ({env.state.row + 1}/{env.machine.max_guesses}):', 'cyan')} {colored(guess, 'yellow')}")
            print(30*"-", "\n")
            messages.append({"role": "assistant", "content": f"[{guess}]"})

            outcomes = await env.step(keystrokes_for_line(guess))

            status = None
            rejected = [o for o in outcomes if isinstance(o, GuessRejected)]
            if rejected:
                status = reject_message(rejected[-1].reason)
                # clear the rejected word so the next one starts on an empty row
                await env.step(["BACKSPACE"] * len(env.state.partial))

            observation_text = env.ui.get_text_observation(env.state, status=status)
            print(observation_text)

            if env.state.is_over: break

            messages.append({"role": "user", "content": f"Here is the current state:\n{observation_text}\n\nWhat is your next guess?"})

        final_state = env.state
    finally:
        await env.close()

    print(colored("=" * 30, "blue"))
    agent_name = f"{model} with {reasoning_effort.value} reasoning"
    if final_state.won:
        print(colored(f"{agent_name} won! Guessed '{final_state.secret}' in {final_state.row} tries.", "green"))
    elif final_state.is_over:
        print(colored(f"{agent_name} lost. The word was '{final_state.secret}'.", "red"))
    else:
        print(colored(f"{agent_name} gave up after {max_queries} queries. The word was '{final_state.secret}'.", "red"))

    game_state = dict(env.game_state, model=model)

    if logging_enabled and game_log_dir:
        print(colored("-" * 30, "blue"))

        game_state_filepath = game_log_dir / "game_state.json"
        try:
            with open(game_state_filepath, 'w') as f:
                json.dump(game_state, f, indent=4)
            print(colored(f"Game state log saved to: {game_state_filepath}", "green"))
        except OSError as e:
            print(colored(f"Error saving game state file: {e}", "red"))

        log_filepath = game_log_dir / "conversation.json"
        try:
            with open(log_filepath, 'w') as f:
                json.dump(messages, f, indent=4)
            print(colored(f"Conversation log saved to: {log_filepath}", "green"))
        except OSError as e:
            print(colored(f"Error saving conversation log: {e}", "red"))

    print(colored("=" * 30, "blue"))
    return game_state


if __name__ == "__main__":
    config = Config()
    setup_logging(config.LOG_LEVEL, config.LOG_DIR)
    params = {
        "model": config.AGENT_MODEL,
        # "model": "gemini/gemini-2.5-flash",
        # "model": "groq/openai/gpt-oss-120b",
        "reasoning_effort": ReasoningEffort.LOW,
        "target_word": None,
        "logging_enabled": True
    }
    asyncio.run(play_wordle(**params))

"""Interactive simulator for Koji's emotional state machine.

Type events such as ``bang!``, ``music`` or ``stranger`` and watch the mood,
the chosen action and, when an LLM backend is reachable, its reasoning. A
background ticker applies time-based decay once per second.
"""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
import os
import sys
import threading
from typing import Callable, List, Optional, TextIO

import google.generativeai as genai
from pydantic import ValidationError

from config import PetConfig
from personality.brains import GeminiClient, LLMBrain, LLMClientError, OllamaClient, RateLimiter
from personality.events import parse_event_context
from personality.pet_controller import PetController, Reaction
from personality.structured_logger import StructuredLogger
from personality.variation import VariationEngine

LOGGER = logging.getLogger(__name__)

HELP_TEXT = """Events:
  loud, bang, noise     - loud noise
  music, song           - music playing
  rhythm, beat          - beat detected
  face, familiar, owner - familiar face
  stranger, unknown     - unknown face
  motion, movement      - motion detected
  object, thing, new    - unknown object spotted
  pet, petted           - being petted
  poke, poked           - being poked
  silence, quiet        - silence
  wait, time            - time passes

Commands:
  status, s             - show current state
  actions, a            - show available actions
  echoes, e             - show lingering mood echoes
  idle, i               - play an idle micro-behavior
  stats                 - show pipeline counters
  llm                   - toggle LLM on/off
  help, ?               - show this help
  quit, exit, q         - exit

Add '!' for high intensity (e.g. 'loud!' or 'bang!'), 'soft' for low.
"""


def load_env_file(path: str) -> None:
    if not os.path.exists(path):
        return
    with open(path, "r", encoding="utf-8") as handle:
        for raw_line in handle:
            line = raw_line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" not in line:
                continue
            key, value = line.split("=", 1)
            os.environ.setdefault(key.strip(), value.strip())


def build_strategy(config: PetConfig) -> Optional[LLMBrain]:
    """Create the LLM brain for the configured backend, or None if it is unreachable."""

    if not config.llm_enabled:
        return None

    if config.llm_backend == "gemini":
        api_key = os.getenv("GEMINI_API_KEY")
        if not api_key:
            LOGGER.warning("GEMINI_API_KEY is not set; running in deterministic mode")
            return None
        genai.configure(api_key=api_key)
        client = GeminiClient(config.gemini_model)
    else:
        client = OllamaClient(
            base_url=config.ollama_url,
            model=config.ollama_model,
            request_timeout=config.request_timeout,
        )

    try:
        client.ping(timeout=config.ping_timeout)
    except LLMClientError as exc:
        LOGGER.warning("Cannot reach %s backend: %s; running in deterministic mode", config.llm_backend, exc)
        return None

    if isinstance(client, OllamaClient):
        try:
            found, available = client.check_model(timeout=config.ping_timeout)
        except LLMClientError as exc:
            LOGGER.warning("Cannot list Ollama models: %s; running in deterministic mode", exc)
            return None
        if not found:
            LOGGER.warning(
                "Model %s not found in Ollama (available: %s); try 'ollama pull %s'",
                client.model_name,
                ", ".join(available) or "none",
                client.model_name,
            )

    return LLMBrain(
        client,
        rate_limiter=RateLimiter(expected_exception=(LLMClientError, asyncio.TimeoutError)),
        structured_logger=StructuredLogger("personality.brains"),
    )


class PetSimulator:
    """Line-oriented front end over a PetController."""

    def __init__(self, controller: PetController, out: TextIO = sys.stdout) -> None:
        self.controller = controller
        self.out = out
        self._commands: dict[str, Callable[[], None]] = {
            "help": self.print_help,
            "?": self.print_help,
            "status": self.print_state,
            "s": self.print_state,
            "actions": self.print_actions,
            "a": self.print_actions,
            "echoes": self.print_echoes,
            "e": self.print_echoes,
            "idle": self.print_micro_behavior,
            "i": self.print_micro_behavior,
            "stats": self.print_stats,
            "llm": self.toggle_llm,
        }

    def _write(self, text: str = "") -> None:
        print(text, file=self.out)

    async def handle_input(self, line: str) -> bool:
        """Process one line of input; returns False when the user asked to quit."""

        command = line.strip().lower()
        if not command:
            return True
        if command in ("quit", "exit", "q"):
            self._write("Bye!")
            return False
        handler = self._commands.get(command)
        if handler is not None:
            handler()
            return True

        context = parse_event_context(command)
        if context is None:
            self._write(f"Unknown event: {command} (type 'help' for options)")
            return True

        reaction = await self.controller.handle_event(context)
        self.print_reaction(reaction)
        return True

    async def on_tick(self) -> None:
        state = self.controller.state
        if await self.controller.tick():
            self._write(f"\n[decay] Mood decayed to {state.mood.value}")
            self.print_state()

    def print_reaction(self, reaction: Reaction) -> None:
        event = reaction.event.event.value
        if reaction.changed:
            self._write(f"\n[event] {event}: {reaction.previous_mood.value} -> {reaction.mood.value}")
        else:
            self._write(f"\n[event] {event}: no mood change (still {reaction.mood.value})")
        self.print_state()
        self._write(f"  Koji chooses: {reaction.action} ({reaction.modifier.value}, {reaction.selector})")
        if reaction.reason:
            self._write(f"  Reason: {reaction.reason}")
        if reaction.response is not None and reaction.response.default_set is not None:
            defaults = reaction.response.default_set
            self._write(f"  Expression: {defaults.expression.value}, Sound: {defaults.sound.value}")
        self._write()

    def print_state(self) -> None:
        state = self.controller.state
        self._write()
        self._write(f"  Mood:      {state.mood.value}")
        self._write(f"  Intensity: {state.intensity:.1f} ({state.intensity_label})")
        self._write(f"  Duration:  {state.duration():.0f}s")
        self._write(f"  Baseline:  {state.is_baseline()}")
        self._write(f"  LLM:       {'enabled' if self.controller.use_strategy else 'disabled'}")
        self._write()

    def print_actions(self) -> None:
        state = self.controller.state
        actions = ", ".join(action.value for action in state.available_actions())
        defaults = state.suggest_default_action()
        self._write(f"  Available actions: [{actions}]")
        self._write(
            f"  Default action:    movement={defaults.movement.value}, "
            f"expression={defaults.expression.value}, sound={defaults.sound.value}"
        )
        self._write()

    def print_echoes(self) -> None:
        echoes = self.controller.engine.get_active_echoes()
        if not echoes:
            self._write("  No lingering moods.")
            return
        for echo in echoes:
            self._write(f"  {echo.from_mood.value}: strength {echo.strength:.2f}")

    def print_micro_behavior(self) -> None:
        behavior = self.controller.idle()
        if behavior is None:
            self._write("  ... (pause)")
        else:
            self._write(f"  *{behavior.name}* ({behavior.duration * 1000:.0f}ms)")

    def print_stats(self) -> None:
        for key, value in self.controller.metrics.get_stats().items():
            self._write(f"  {key}: {value}")

    def toggle_llm(self) -> None:
        if self.controller.strategy is None:
            self._write("LLM not configured. Restart with a reachable backend.")
            return
        enabled = self.controller.toggle_strategy()
        self._write("LLM enabled" if enabled else "LLM disabled (deterministic mode)")

    def print_help(self) -> None:
        self._write(HELP_TEXT)


async def _decay_loop(simulator: PetSimulator, interval: float) -> None:
    while True:
        await asyncio.sleep(interval)
        await simulator.on_tick()


def start_input_reader(
    loop: asyncio.AbstractEventLoop,
    lines: asyncio.Queue[Optional[str]],
    ready: threading.Event,
    prompt: str = "> ",
) -> threading.Thread:
    """Read stdin on a daemon thread and hand each line to ``loop``.

    The reader prompts only after ``ready`` is set, so output for the previous
    line is printed first. ``None`` is queued at end of input.
    """

    def _read() -> None:
        while True:
            ready.wait()
            ready.clear()
            try:
                line: Optional[str] = input(prompt)
            except EOFError:
                line = None
            try:
                loop.call_soon_threadsafe(lines.put_nowait, line)
            except RuntimeError:
                return  # loop already closed
            if line is None:
                return

    thread = threading.Thread(target=_read, name="KojiInputReader", daemon=True)
    thread.start()
    return thread


async def run(simulator: PetSimulator, decay_tick: float) -> None:
    loop = asyncio.get_running_loop()
    lines: asyncio.Queue[Optional[str]] = asyncio.Queue()
    ready = threading.Event()
    start_input_reader(loop, lines, ready)
    ticker = asyncio.create_task(_decay_loop(simulator, decay_tick))
    try:
        while True:
            ready.set()
            line = await lines.get()
            if line is None:
                break
            if not await simulator.handle_input(line):
                break
    finally:
        ticker.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await ticker


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Koji emotional state simulator")
    parser.add_argument("--backend", choices=["ollama", "gemini", "none"], help="LLM backend for action selection")
    parser.add_argument("--ollama", help="Ollama API URL")
    parser.add_argument("--model", help="LLM model to use")
    parser.add_argument("--no-llm", action="store_true", help="Disable the LLM and use only the variation engine")
    parser.add_argument("--seed", type=int, help="Seed for the variation engine's random source")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> PetConfig:
    base = PetConfig.from_env()
    overrides = {}
    if args.backend:
        overrides["llm_backend"] = args.backend
    if args.no_llm:
        overrides["llm_backend"] = "none"
    if args.ollama:
        overrides["ollama_url"] = args.ollama
    if args.model:
        backend = overrides.get("llm_backend", base.llm_backend)
        key = "gemini_model" if backend == "gemini" else "ollama_model"
        overrides[key] = args.model
    return PetConfig(**{**base.model_dump(), **overrides})


async def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.WARNING))
    load_env_file(os.path.join(os.path.dirname(os.path.abspath(__file__)), "koji.env"))

    try:
        config = build_config(args)
    except ValidationError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2

    print("=== Koji Emotional State Simulator ===")
    strategy = build_strategy(config)
    if strategy is not None:
        print(f"Connected to {config.llm_backend} (model: {strategy.model_name})")
    else:
        print("Running in deterministic mode.")

    controller = PetController(
        engine=VariationEngine(seed=args.seed),
        strategy=strategy,
        strategy_timeout=config.strategy_timeout,
        recent_event_limit=config.recent_event_limit,
    )
    simulator = PetSimulator(controller)
    simulator.print_state()
    simulator.print_help()
    await run(simulator, config.decay_tick)
    return 0


def cli() -> int:
    try:
        return asyncio.run(main())
    except KeyboardInterrupt:
        print("\nBye!")
        return 0


if __name__ == "__main__":
    sys.exit(cli())

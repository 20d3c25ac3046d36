"""Default values shared by the personality core, the brains and the CLI."""

DEFAULT_LLM_BACKEND = "ollama"
DEFAULT_OLLAMA_URL = "http://localhost:11434"
DEFAULT_OLLAMA_MODEL = "llama3.2:1b"
DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"

DEFAULT_REQUEST_TIMEOUT_SECONDS = 30.0
DEFAULT_STRATEGY_TIMEOUT_SECONDS = 30.0
DEFAULT_PING_TIMEOUT_SECONDS = 5.0
DEFAULT_DECAY_TICK_SECONDS = 1.0

DEFAULT_RECENT_EVENT_LIMIT = 5
ECHO_HISTORY_SIZE = 8

# Chance of an idle pause instead of a micro-behavior.
MICRO_BEHAVIOR_PAUSE_PROBABILITY = 0.3

DECAY_INTENSITY_STEP = 0.2

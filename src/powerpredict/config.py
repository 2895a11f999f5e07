"""Configuration constants and environment variable names.

Constructor arguments always win over the environment, and the
environment wins over the defaults below.
"""

ASSISTANT_URL_ENV = "POWERPREDICT_ASSISTANT_URL"
DEFAULT_ASSISTANT_URL = "http://localhost:5000"
ASSISTANT_CHAT_PATH = "/api/chat"
ASSISTANT_TIMEOUT = 10.0  # seconds

# Upstream LLM used by the proxy
OPENAI_API_KEY_ENV = "OPENAI_API_KEY"
ASSISTANT_MODEL_ENV = "POWERPREDICT_ASSISTANT_MODEL"
DEFAULT_ASSISTANT_MODEL = "gpt-3.5-turbo"
UPSTREAM_URL_ENV = "POWERPREDICT_UPSTREAM_URL"
DEFAULT_UPSTREAM_URL = "https://api.openai.com/v1/chat/completions"
UPSTREAM_TIMEOUT = 30.0  # seconds

PORT_ENV = "PORT"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 5000

NO_RICH_ENV = "POWERPREDICT_NO_RICH"

# Chat pacing, seconds
GREETING_DELAY = 0.5
TYPING_DELAY_MIN = 1.0
TYPING_DELAY_SPREAD = 1.0
SUGGESTION_DELAY = 0.8

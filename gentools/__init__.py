"""
gentools

Small chat-completion helpers for the shell: draft a commit message from
the staged diff, or name and save the text on the clipboard.
"""

__version__ = "1.0.0"

# o4-mini only accepts temperature 1.0; see DEFAULT_TEMPERATURES in gentools.llm.request
DEFAULT_MODEL = "o4-mini"
DEFAULT_ENDPOINT = "https://api.openai.com/v1/chat/completions"

# Environment variables read at startup
ENV_API_KEY = "OPENAI_API_KEY"
ENV_ENDPOINT = "OPENAI_ENDPOINT"
ENV_MODEL = "GEN_MODEL"
ENV_TIMEOUT = "GEN_TIMEOUT"

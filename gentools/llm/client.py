"""Chat-Completions HTTP Client"""

import http.client
import socket
import urllib.error
import urllib.request

from gentools.errors import TransportError
from gentools.llm.base import ChatClient
from gentools.llm.request import ChatRequest


class ChatCompletionsClient(ChatClient):
    """Client for OpenAI-compatible /chat/completions endpoints. One request, no retries."""

    def __init__(self, endpoint: str, api_key: str, timeout: float | None = None):
        self.endpoint = endpoint
        self.api_key = api_key
        self.timeout = timeout

    @property
    def name(self) -> str:
        return self.endpoint

    def _build_http_request(self, request: ChatRequest) -> urllib.request.Request:
        return urllib.request.Request(
            self.endpoint,
            data=request.to_json(),
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {self.api_key}",
            },
            method="POST",
        )

    def send(self, request: ChatRequest) -> tuple[int, str]:
        """POST the request and return (status_code, body).

        Non-2xx answers are returned, not raised; the validator decides what they mean.
        """
        # urlopen treats None as "use the socket default", which blocks forever
        kwargs = {"timeout": self.timeout} if self.timeout else {}

        try:
            http_request = self._build_http_request(request)
            with urllib.request.urlopen(http_request, **kwargs) as response:
                return response.status, response.read().decode('utf-8', errors='replace')
        except urllib.error.HTTPError as e:
            try:
                body = e.read().decode('utf-8', errors='replace')
            except (OSError, http.client.HTTPException):
                body = ""
            return e.code, body
        except urllib.error.URLError as e:
            if isinstance(e.reason, (socket.timeout, TimeoutError)):
                raise TransportError(self._timeout_message())
            raise TransportError(f"Could not reach {self.endpoint}: {e.reason}")
        except (socket.timeout, TimeoutError):
            raise TransportError(self._timeout_message())
        except http.client.HTTPException as e:
            raise TransportError(f"Incomplete response from {self.endpoint}: {e}")
        except ValueError as e:
            raise TransportError(f"Invalid endpoint URL '{self.endpoint}': {e}")
        except OSError as e:
            raise TransportError(f"Connection to {self.endpoint} lost: {e}")

    def _timeout_message(self) -> str:
        if not self.timeout:
            return f"Request to {self.endpoint} timed out."
        return (f"Request timed out after {self.timeout:g}s. "
                f"Increase the timeout: export GEN_TIMEOUT=300")

import logging
from typing import Any

import httpx

from buildgate.gate.errors import TransientPollError
from buildgate.gate.models import PollConfig

logger = logging.getLogger(__name__)


def build_attributes(payload: Any) -> dict[str, Any]:
    if not isinstance(payload, dict):
        return {}
    data = payload.get("data")
    if not isinstance(data, dict):
        return {}
    attributes = data.get("attributes")
    if not isinstance(attributes, dict):
        return {}
    return attributes


def extract_state(payload: Any) -> str | None:
    state = build_attributes(payload).get("state")
    if not isinstance(state, str) or not state.strip():
        return None
    return state.strip()


class PercyClient:
    def __init__(self, config: PollConfig, *, client: httpx.Client | None = None) -> None:
        self.config = config
        self._client = client or httpx.Client(timeout=config.timeout_seconds, follow_redirects=True)

    @property
    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Token token={self.config.token}"}

    def fetch_build(self) -> dict[str, Any]:
        response = self._client.get(self.config.url, headers=self.headers)
        response.raise_for_status()
        data = response.json()
        if not isinstance(data, dict):
            raise ValueError("Build response is not a JSON object.")
        return data

    def fetch_state(self) -> str:
        try:
            payload = self.fetch_build()
        except (httpx.HTTPError, ValueError) as exc:
            raise TransientPollError(f"Build status request failed: {exc}") from exc
        state = extract_state(payload)
        if state is None:
            raise TransientPollError("Build response has no state value.")
        return state

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "PercyClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

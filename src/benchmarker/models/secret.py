"""Per-user secret storage model and test-token extraction."""

from __future__ import annotations

import json
from datetime import datetime

from pydantic import BaseModel

from benchmarker.errors import ConfigurationError

TEST_TOKEN_KEY = "GPT_ENGINEER_TEST_TOKEN"


class UserSecret(BaseModel):
    """A JSON blob of secrets owned by one user."""

    model_config = {"extra": "ignore"}

    id: str
    user_id: str
    secret: str
    created_at: datetime | None = None


def extract_test_token(secrets: list[UserSecret]) -> str:
    """Return the bearer token stored in the first secret row.

    Args:
        secrets: The user's secret rows, in backend order.

    Returns:
        The GPT_ENGINEER_TEST_TOKEN value.

    Raises:
        ConfigurationError: If there are no rows, the first row is not a
            JSON object, or the token is missing or empty.
    """
    if not secrets:
        raise ConfigurationError(
            "No user secrets found. Please set up your GPT Engineer test token."
        )

    try:
        payload = json.loads(secrets[0].secret)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"User secret is not valid JSON: {exc.msg}") from exc

    token = payload.get(TEST_TOKEN_KEY) if isinstance(payload, dict) else None
    if not token:
        raise ConfigurationError(
            "GPT Engineer test token not found. Please set it up in your secrets."
        )
    return str(token)

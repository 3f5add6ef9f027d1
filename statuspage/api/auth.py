"""Caller authentication for the status page API."""

import hmac
from typing import Annotated

from fastapi import Header

from statuspage.config import get_settings


def is_authenticated(authorization: Annotated[str | None, Header()] = None) -> bool:
    """True when the request carries ``Authorization: Bearer <API_TOKEN>``.

    Nobody is authenticated while API_TOKEN is empty.
    """
    token = get_settings().api_token
    if not token or not authorization:
        return False
    scheme, _, value = authorization.partition(" ")
    return scheme.lower() == "bearer" and hmac.compare_digest(value.strip(), token)

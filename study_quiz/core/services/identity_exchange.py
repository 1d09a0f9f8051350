"""Resolve an OAuth authorization code into a stable external identity."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Protocol
from urllib.parse import urlencode

import httpx

from study_quiz.constants.network_constants import (
    DISCORD_AUTHORIZE_URL,
    DISCORD_GUILD_MEMBER_URL,
    DISCORD_SCOPES,
    DISCORD_TOKEN_URL,
    IDENTITY_TIMEOUT_SECONDS,
)
from study_quiz.core.errors import IdentityExchangeError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ResolvedIdentity:
    user_id: str
    display_name: str


class IdentityProvider(Protocol):
    def authorize_url(self, state: str) -> str: ...

    def resolve(self, code: str) -> ResolvedIdentity: ...


class DiscordIdentityProvider:
    """Discord OAuth2 flow restricted to members of one guild."""

    def __init__(
        self,
        client_id: str,
        secret: str,
        redirect_uri: str,
        guild_id: str,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._client_id = client_id
        self._secret = secret
        self._redirect_uri = redirect_uri
        self._guild_id = guild_id
        self._transport = transport

    def authorize_url(self, state: str) -> str:
        query = urlencode(
            {
                "client_id": self._client_id,
                "response_type": "code",
                "redirect_uri": self._redirect_uri,
                "state": state,
                "scope": " ".join(DISCORD_SCOPES),
                "prompt": "none",
            }
        )
        return f"{DISCORD_AUTHORIZE_URL}?{query}"

    def resolve(self, code: str) -> ResolvedIdentity:
        with httpx.Client(timeout=IDENTITY_TIMEOUT_SECONDS, transport=self._transport) as client:
            access_token = self._exchange_code(client, code)
            member = self._fetch_guild_member(client, access_token)
        return _identity_from_member(member)

    def _exchange_code(self, client: httpx.Client, code: str) -> str:
        payload = self._request_json(
            client,
            "POST",
            DISCORD_TOKEN_URL,
            data={
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": self._redirect_uri,
            },
            auth=(self._client_id, self._secret),
        )
        token_type = payload.get("token_type")
        access_token = payload.get("access_token")
        if not isinstance(access_token, str) or str(token_type).lower() != "bearer":
            logger.error("Discord token response is missing a bearer token: %s", payload)
            raise IdentityExchangeError("Identity provider returned no bearer token.")
        return access_token

    def _fetch_guild_member(self, client: httpx.Client, access_token: str) -> dict:
        return self._request_json(
            client,
            "GET",
            DISCORD_GUILD_MEMBER_URL.format(guild_id=self._guild_id),
            headers={"Authorization": f"Bearer {access_token}"},
        )

    @staticmethod
    def _request_json(client: httpx.Client, method: str, url: str, **kwargs) -> dict:
        try:
            response = client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            logger.error("Unable to communicate with Discord at %s: %s", url, exc)
            raise IdentityExchangeError("Identity provider is unreachable.") from exc
        if response.status_code != httpx.codes.OK:
            logger.error(
                "Discord returned status %s for %s. Response body: %s",
                response.status_code,
                url,
                response.text,
            )
            raise IdentityExchangeError(f"Identity provider returned status {response.status_code}.")
        try:
            payload = response.json()
        except ValueError as exc:
            logger.error("Failed to decode Discord response from %s: %s", url, exc)
            raise IdentityExchangeError("Identity provider returned invalid JSON.") from exc
        if not isinstance(payload, dict):
            raise IdentityExchangeError("Identity provider returned an unexpected payload.")
        return payload


def _identity_from_member(member: dict) -> ResolvedIdentity:
    user = member.get("user")
    if not isinstance(user, dict) or not isinstance(user.get("id"), str) or not user.get("username"):
        logger.error("Discord guild member payload has no usable user: %s", member)
        raise IdentityExchangeError("Identity provider returned no user.")
    display_name = member.get("nick") or user.get("global_name") or user["username"]
    return ResolvedIdentity(user_id=user["id"], display_name=display_name)

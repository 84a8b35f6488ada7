from typing import Optional

from fastapi import Request

from graide.database.google_api import StaticTokenProvider


class AuthService:
    """The caller's Google OAuth access token, forwarded as a bearer token."""

    @staticmethod
    def bearer_token(request: Request) -> Optional[str]:
        header = request.headers.get("Authorization", "")
        scheme, _, token = header.partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            return None
        return token.strip()

    @staticmethod
    def get_token_provider(request: Request) -> StaticTokenProvider:
        # a missing token is only an error once a Google call is attempted
        return StaticTokenProvider(AuthService.bearer_token(request))

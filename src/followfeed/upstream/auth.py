from __future__ import annotations

from enum import Enum
from typing import Any

from ..errors import CredentialExpired, CredentialMissing, UpstreamRequestFailed
from .credentials import CredentialStore

CODE_CREDENTIAL_EXPIRED = -6
CODE_REQUEST_FAILED = 4_100_000


class AuthOutcome(Enum):
    AUTHORIZED = "authorized"
    EXPIRED = "expired"
    REQUEST_REJECTED = "request_rejected"


def require_credential(store: CredentialStore, account_id: str) -> str:
    cookie = store.lookup(account_id)
    if not cookie:
        raise CredentialMissing(account_id=account_id)
    return cookie


def classify_code(code: Any) -> AuthOutcome:
    if isinstance(code, bool) or not isinstance(code, int):
        return AuthOutcome.AUTHORIZED
    if code == CODE_CREDENTIAL_EXPIRED:
        return AuthOutcome.EXPIRED
    if code == CODE_REQUEST_FAILED:
        return AuthOutcome.REQUEST_REJECTED
    return AuthOutcome.AUTHORIZED


def ensure_authorized(envelope: dict[str, Any], account_id: str) -> None:
    outcome = classify_code(envelope.get("code"))
    if outcome is AuthOutcome.EXPIRED:
        raise CredentialExpired(account_id=account_id)
    if outcome is AuthOutcome.REQUEST_REJECTED:
        message = envelope.get("message") or envelope.get("msg")
        if isinstance(message, str) and message.strip():
            raise UpstreamRequestFailed(
                f"bilibili rejected the feed request ({message.strip()})",
                account_id=account_id,
            )
        raise UpstreamRequestFailed(account_id=account_id)

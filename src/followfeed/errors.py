from __future__ import annotations


class FeedError(ValueError):
    reason = "unknown"
    default_message = "Feed resolution failed"

    def __init__(self, message: str | None = None, *, account_id: str | None = None):
        self.account_id = account_id
        text = message or self.default_message
        if account_id:
            text = f"{text}: uid {account_id}"
        super().__init__(text)


class CredentialMissing(FeedError):
    reason = "credential_missing"
    default_message = "Missing login cookie for bilibili account"


class CredentialExpired(FeedError):
    reason = "credential_expired"
    default_message = "Login cookie for bilibili account has expired"


class UpstreamRequestFailed(FeedError):
    reason = "request_failed"
    default_message = "bilibili rejected the feed request"


class DecodeFailure(FeedError):
    reason = "decode_failure"
    default_message = "Could not decode bilibili feed payload"

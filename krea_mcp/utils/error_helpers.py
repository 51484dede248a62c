from __future__ import annotations

_CREDENTIALS_TIP = " Tip: Check that KREA_API_KEY is set to a valid key with access to this endpoint."


def _looks_like_auth_issue(text: str) -> bool:
    """Best-effort detection for auth/billing issues from Krea API errors."""
    if not text:
        return False
    lower = text.lower()

    keywords = [
        # auth/credentials
        "api key",
        "apikey",
        "invalid key",
        "unauthorized",
        "forbidden",
        "access denied",
        "credentials",
        "krea api error 401",
        "krea api error 403",
        # billing/quota
        "billing",
        "quota",
        "insufficient credits",
    ]

    return any(k in lower for k in keywords)


def augment_with_credentials_tip(message: str) -> str:
    """Append a credentials tip to the message when appropriate.

    Ensures we don't duplicate the tip on repeated calls.
    """
    if not message:
        return message
    if _CREDENTIALS_TIP.strip() in message:
        return message
    if _looks_like_auth_issue(message):
        return message.rstrip() + _CREDENTIALS_TIP
    return message


__all__ = ["augment_with_credentials_tip"]

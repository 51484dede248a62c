from __future__ import annotations

import pytest

from krea_mcp.utils.error_helpers import augment_with_credentials_tip


@pytest.mark.parametrize(
    "message",
    [
        'Krea API error 401: {"error":"Unauthorized"}',
        "Krea API error 403",
        'Krea API error 402: {"error":"insufficient credits"}',
    ],
)
def test_tip_added_for_auth_and_billing_errors(message):
    augmented = augment_with_credentials_tip(message)
    assert augmented.startswith(message)
    assert "KREA_API_KEY" in augmented


def test_tip_not_duplicated():
    once = augment_with_credentials_tip("Krea API error 401")
    assert augment_with_credentials_tip(once) == once


@pytest.mark.parametrize("message", ["", "Job j did not reach a terminal status within 5000ms."])
def test_unrelated_messages_unchanged(message):
    assert augment_with_credentials_tip(message) == message

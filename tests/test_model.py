from datetime import datetime
from datetime import timezone

from fazuh.vknet.model import VkAuthorization


def test_from_url_token():
    auth = VkAuthorization.from_url(
        "https://oauth.vk.com/blank.html#access_token=abc123&expires_in=86400&user_id=42&email=a@b.c"
    )

    assert auth.is_authorized
    assert auth.access_token == "abc123"
    assert auth.expires_in == 86400
    assert auth.user_id == 42
    assert auth.email == "a@b.c"
    assert auth.captcha_id is None
    assert not auth.is_authorization_required


def test_expires_at():
    issued = datetime(2024, 1, 1, tzinfo=timezone.utc)
    auth = VkAuthorization(access_token="t", expires_in=3600, issued_at=issued)
    assert auth.expires_at == datetime(2024, 1, 1, 1, tzinfo=timezone.utc)


def test_non_expiring_token():
    auth = VkAuthorization.from_url(
        "https://oauth.vk.com/blank.html#access_token=abc&expires_in=0&user_id=1"
    )
    assert auth.expires_at is None


def test_from_url_captcha():
    auth = VkAuthorization.from_url(
        "https://oauth.vk.com/authorize?client_id=1&email=x&sid=918273&m=5"
    )

    assert not auth.is_authorized
    assert auth.captcha_id == 918273


def test_from_url_grant_page():
    auth = VkAuthorization.from_url("https://oauth.vk.com/authorize?client_id=1&__q_hash=f00d")

    assert auth.is_authorization_required
    assert not auth.is_authorized


def test_from_url_rejected_login():
    auth = VkAuthorization.from_url(
        "https://oauth.vk.com/authorize?client_id=1&email=x&m=4&display=wap"
    )

    assert not auth.is_authorized
    assert not auth.is_authorization_required
    assert auth.captcha_id is None


def test_from_url_error():
    auth = VkAuthorization.from_url(
        "https://oauth.vk.com/blank.html#error=access_denied&error_description=User%20denied"
    )

    assert auth.error == "access_denied"
    assert auth.error_description == "User denied"


def test_malformed_numbers_are_ignored():
    auth = VkAuthorization.from_url(
        "https://oauth.vk.com/blank.html#access_token=t&expires_in=soon&user_id=me&sid=abc"
    )

    assert auth.expires_in == 0
    assert auth.user_id is None
    assert auth.captcha_id is None


def test_repr_hides_token():
    auth = VkAuthorization(access_token="secret", user_id=5)
    assert "secret" not in repr(auth)
    assert "user_id=5" in repr(auth)


def test_to_dict():
    auth = VkAuthorization(access_token="t", user_id=5)
    data = auth.to_dict()
    assert data["access_token"] == "t"
    assert data["user_id"] == 5
    assert data["expires_at"] is None

import pytest

from fazuh.vknet.error import WebFormError
from fazuh.vknet.vk.web_call import WebCallResult
from fazuh.vknet.vk.web_form import WebForm

LOGIN_HTML = """
<html><body>
<form method="post" action="https://login.vk.com/?act=login&soft=1">
    <input type="hidden" name="ip_h" value="a1b2">
    <input type="hidden" name="lg_h" value="c3d4">
    <input type="hidden" name="_origin" value="https://oauth.vk.com">
    <input type="text" name="email">
    <input type="password" name="pass">
    <input type="checkbox" name="remember" value="1">
    <input type="checkbox" name="expire" value="0" checked>
    <select name="lang"><option value="0">ru</option><option value="3" selected>en</option></select>
    <textarea name="note">hello</textarea>
    <input type="submit" name="submit_input" value="Log in">
</form>
</body></html>
"""

CODE_HTML = """
<form action="/login?act=authcheck_code&hash=77">
    <input type="text" name="code">
</form>
"""


def _result(html: str, url: str = "https://oauth.vk.com/authorize?client_id=1") -> WebCallResult:
    return WebCallResult(request_url=url, response_url=url, response=html, cookies=None)


def test_from_result_collects_fields():
    form = WebForm.from_result(_result(LOGIN_HTML))

    assert form.action == "https://login.vk.com/?act=login&soft=1"
    assert form.method == "POST"
    assert form.fields == {
        "ip_h": "a1b2",
        "lg_h": "c3d4",
        "_origin": "https://oauth.vk.com",
        "email": "",
        "pass": "",
        "expire": "0",
        "lang": "3",
        "note": "hello",
    }


def test_relative_action_is_resolved():
    form = WebForm.from_result(_result(CODE_HTML, url="https://m.vk.com/login?act=authcheck"))

    assert form.action == "https://m.vk.com/login?act=authcheck_code&hash=77"
    assert form.original_url == "https://m.vk.com/login?act=authcheck"


def test_missing_action_posts_back_to_page():
    html = '<form><input name="code"></form>'
    form = WebForm.from_result(_result(html, url="https://m.vk.com/validate"))

    assert form.action == "https://m.vk.com/validate"


def test_with_field_chains():
    form = (
        WebForm.from_result(_result(LOGIN_HTML))
        .with_field("email", "user@example.com")
        .with_field("pass", "hunter2")
        .with_field("captcha_sid", "123")
    )

    assert form.fields["email"] == "user@example.com"
    assert form.fields["pass"] == "hunter2"
    assert form.fields["captcha_sid"] == "123"
    assert form.fields["ip_h"] == "a1b2"


def test_with_field_rejects_none():
    form = WebForm.from_result(_result(LOGIN_HTML))
    with pytest.raises(ValueError):
        form.with_field("pass", None)


def test_fields_is_a_copy():
    form = WebForm.from_result(_result(LOGIN_HTML))
    form.fields["email"] = "changed"
    assert form.fields["email"] == ""


def test_no_form_raises():
    with pytest.raises(WebFormError):
        WebForm.from_result(_result("<html><body>Nothing here</body></html>"))


def test_form_index():
    html = LOGIN_HTML + CODE_HTML
    form = WebForm.from_result(_result(html), form_index=1)
    assert "code" in form.fields


def test_is_oauth_blank():
    assert WebForm.is_oauth_blank(
        _result("", url="https://oauth.vk.com/blank.html#access_token=abc")
    )
    assert not WebForm.is_oauth_blank(_result("", url="https://oauth.vk.com/authorize?x=1"))

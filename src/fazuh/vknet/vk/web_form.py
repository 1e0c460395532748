from typing import Self
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from bs4 import Tag

from fazuh.vknet.error import WebFormError
from fazuh.vknet.vk.path import Path
from fazuh.vknet.vk.web_call import WebCallResult


class WebForm:
    """An HTML form scraped from a page, ready to be filled and submitted.

    Usage:
        form = WebForm.from_result(result).with_field("email", login).with_field("pass", password)
        result = web_call.post(form)
    """

    def __init__(self, action: str, method: str, fields: dict[str, str], original_url: str):
        self.action = action
        self.method = method
        self.original_url = original_url
        self._fields = fields

    @classmethod
    def from_result(cls, result: WebCallResult, form_index: int = 0) -> Self:
        """Scrapes a form out of the page returned by a web call.

        Args:
            result: The page the form lives on.
            form_index: Which form to take when the page has several.

        Raises:
            WebFormError: The page has no such form.
        """
        soup = BeautifulSoup(result.response, "html.parser")
        forms = soup.find_all("form")
        if form_index >= len(forms):
            raise WebFormError(
                f"Form #{form_index} not found on {result.response_url} ({len(forms)} forms)"
            )

        form = forms[form_index]
        action = urljoin(result.response_url, str(form.get("action") or ""))
        method = str(form.get("method") or "POST").upper()
        return cls(action, method, _collect_fields(form), result.response_url)

    @staticmethod
    def is_oauth_blank(result: WebCallResult) -> bool:
        """Check if VK has already redirected to the OAuth blank page."""
        return result.response_url.startswith(Path.BLANK)

    @property
    def fields(self) -> dict[str, str]:
        return dict(self._fields)

    def with_field(self, name: str, value: str) -> Self:
        """Fills a field, adding it when the page did not render one."""
        if value is None:
            raise ValueError(f"Value for form field {name!r} is not set")
        self._fields[name] = str(value)
        return self

    def __repr__(self):
        return f"WebForm({self.method} {self.action}, fields={sorted(self._fields)})"


def _collect_fields(form: Tag) -> dict[str, str]:
    fields: dict[str, str] = {}

    for inp in form.find_all("input"):
        name = inp.get("name")
        if not name:
            continue
        input_type = str(inp.get("type") or "text").lower()
        if input_type in ("submit", "button", "image", "reset", "file"):
            continue
        if input_type in ("checkbox", "radio") and not inp.has_attr("checked"):
            continue
        fields[str(name)] = str(inp.get("value") or "")

    for select in form.find_all("select"):
        name = select.get("name")
        if not name:
            continue
        option = select.find("option", selected=True) or select.find("option")
        if isinstance(option, Tag):
            value = option.get("value")
            fields[str(name)] = str(value if value is not None else option.get_text(strip=True))
        else:
            fields[str(name)] = ""

    for textarea in form.find_all("textarea"):
        name = textarea.get("name")
        if name:
            fields[str(name)] = textarea.get_text()

    return fields

from collections.abc import Iterable
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

from loguru import logger
import requests
from requests.cookies import RequestsCookieJar

from fazuh.vknet.error import WebCallError

if TYPE_CHECKING:
    from fazuh.vknet.vk.web_form import WebForm

Parameters = Mapping[str, str] | Iterable[tuple[str, str]]

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/119.0.0.0 Safari/537.36"
)


@dataclass
class WebCallResult:
    request_url: str
    response_url: str
    response: str
    cookies: RequestsCookieJar
    status_code: int = 200

    @classmethod
    def from_response(cls, request_url: str, response: requests.Response) -> "WebCallResult":
        return cls(
            request_url=request_url,
            response_url=response.url,
            response=response.text,
            cookies=response.cookies,
            status_code=response.status_code,
        )


class WebCall:
    """HTTP session shared by every step of a login walk.

    Cookies set by VK on one page are sent back on the next request, the way
    a real browser would.
    """

    def __init__(
        self,
        proxy: str | None = None,
        timeout: float = 30,
        session: requests.Session | None = None,
    ):
        if session is None:
            session = requests.Session()
            session.headers["User-Agent"] = USER_AGENT
        self.session = session
        self.timeout = timeout
        self.proxy = proxy

    @property
    def proxy(self) -> str | None:
        return self._proxy

    @proxy.setter
    def proxy(self, value: str | None):
        self._proxy = value
        if value:
            self.session.proxies.update({"http": value, "https": value})
        else:
            self.session.proxies.pop("http", None)
            self.session.proxies.pop("https", None)

    def make_call(self, url: str) -> WebCallResult:
        """GET a page, following redirects."""
        logger.debug(f"GET {url}")
        return self._request("GET", url)

    def post(self, form: "WebForm") -> WebCallResult:
        """Submit a filled form to its action URL."""
        logger.debug(f"{form.method} {form.action} (form from {form.original_url})")
        if form.method == "GET":
            return self._request("GET", form.action, params=form.fields)
        return self._request("POST", form.action, data=form.fields)

    def post_call(self, url: str, parameters: Parameters) -> WebCallResult:
        """Form-encoded POST, used for API method calls."""
        logger.debug(f"POST {url}")
        return self._request("POST", url, data=parameters)

    def _request(self, method: str, url: str, **kwargs) -> WebCallResult:
        try:
            response = self.session.request(
                method, url, timeout=self.timeout, allow_redirects=True, **kwargs
            )
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"{method} {url} failed: {e}")
            raise WebCallError(url, str(e)) from e
        return WebCallResult.from_response(url, response)

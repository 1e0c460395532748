from collections.abc import Callable
import json
from typing import Any

from loguru import logger

from fazuh.vknet.enums.filters import Settings
from fazuh.vknet.error import AuthorizationError
from fazuh.vknet.error import CaptchaNeededError
from fazuh.vknet.error import NeedValidationError
from fazuh.vknet.error import VkApiError
from fazuh.vknet.model import VkAuthorization
from fazuh.vknet.vk.browser import Browser
from fazuh.vknet.vk.path import Path

DEFAULT_API_VERSION = "5.131"

# VK error codes that need special handling
USER_AUTHORIZATION_FAILED = 5
CAPTCHA_NEEDED = 14
NEED_VALIDATION = 17


class VkApi:
    """Service for calling VK API methods.

    Holds the access token obtained through the browser and turns VK error
    payloads into exceptions.
    """

    def __init__(
        self,
        browser: Browser | None = None,
        api_version: str = DEFAULT_API_VERSION,
        language: str | None = None,
    ) -> None:
        self.browser = browser or Browser()
        self.api_version = api_version
        self.language = language
        self.access_token: str | None = None
        self.user_id: int | None = None

    @property
    def is_authorized(self) -> bool:
        return bool(self.access_token)

    def authorize(
        self,
        app_id: int,
        email: str,
        password: str,
        settings: Settings,
        code: Callable[[], str] | None = None,
        captcha_sid: int | None = None,
        captcha_key: str | None = None,
    ) -> VkAuthorization:
        """Logs in through the browser and keeps the issued token.

        Raises:
            AuthorizationError: VK rejected the credentials.
            CaptchaNeededError: Retry with the captcha answered.
        """
        authorization = self.browser.authorize(
            app_id, email, password, settings, code, captcha_sid, captcha_key
        )
        return self._store(authorization)

    def validate(self, validate_url: str, phone_number: str) -> VkAuthorization:
        """Passes phone validation and keeps the issued token."""
        return self._store(self.browser.validate(validate_url, phone_number))

    def _store(self, authorization: VkAuthorization) -> VkAuthorization:
        if not authorization.is_authorized:
            message = authorization.error_description or authorization.error or "Login rejected"
            raise AuthorizationError(message)
        self.access_token = authorization.access_token
        self.user_id = authorization.user_id
        return authorization

    def call(self, method: str, parameters: dict[str, Any] | None = None) -> Any:
        """Calls an API method and returns its ``response`` member.

        Args:
            method: Method name, e.g. ``users.get``.
            parameters: Method parameters. Lists are sent comma separated.

        Raises:
            CaptchaNeededError: Code 14.
            NeedValidationError: Code 17.
            AuthorizationError: Code 5.
            VkApiError: Any other error, or an answer that is not JSON.
        """
        params = {k: _format_value(v) for k, v in (parameters or {}).items() if v is not None}
        params["v"] = self.api_version
        if self.access_token:
            params["access_token"] = self.access_token
        if self.language:
            params["lang"] = self.language

        logger.debug(f"Calling {method}")
        raw = self.browser.get_json(f"{Path.API_METHOD}{method}", params)

        try:
            answer = json.loads(raw)
        except json.JSONDecodeError as e:
            raise VkApiError(f"{method} returned non-JSON answer: {raw[:200]!r}") from e

        if not isinstance(answer, dict):
            raise VkApiError(f"{method} returned unexpected answer: {raw[:200]!r}")
        if "error" in answer:
            raise _map_error(answer["error"])
        return answer.get("response")


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (list, tuple, set)):
        return ",".join(str(v) for v in value)
    return str(value)


def _map_error(error: Any) -> VkApiError:
    if not isinstance(error, dict):
        return VkApiError(f"Malformed error: {error!r}")
    code = error.get("error_code")
    message = error.get("error_msg", "Unknown error")

    if code == CAPTCHA_NEEDED:
        logger.warning("API call requires a captcha answer.")
        captcha_sid = error.get("captcha_sid")
        captcha_img = error.get("captcha_img")
        if captcha_sid is None or not captcha_img or not str(captcha_sid).isdigit():
            return VkApiError(message, error_code=code)
        return CaptchaNeededError(int(captcha_sid), captcha_img)
    if code == NEED_VALIDATION:
        logger.warning("API call requires phone validation.")
        return NeedValidationError(error.get("redirect_uri", ""), message)
    if code == USER_AUTHORIZATION_FAILED:
        return AuthorizationError(message, error_code=code)
    return VkApiError(message, error_code=code)

from collections.abc import Callable
import json
from pathlib import Path as FilePath
from urllib.parse import urlencode

from loguru import logger
import requests

from fazuh.vknet.enums.filters import Settings
from fazuh.vknet.enums.safety import Display
from fazuh.vknet.enums.safety import ResponseType
from fazuh.vknet.error import CaptchaNeededError
from fazuh.vknet.error import VkApiError
from fazuh.vknet.error import WebCallError
from fazuh.vknet.model import VkAuthorization
from fazuh.vknet.vk.path import Path
from fazuh.vknet.vk.web_call import Parameters
from fazuh.vknet.vk.web_call import WebCall
from fazuh.vknet.vk.web_call import WebCallResult
from fazuh.vknet.vk.web_form import WebForm


class Browser:
    """Browser through which all network interaction with VK happens.

    Logs in by walking the OAuth web flow the way a user would: it loads the
    authorization page, fills the login form, answers the two-factor and
    captcha prompts, and reads the access token out of the final redirect URL.
    """

    def __init__(
        self, proxy: str | None = None, timeout: float = 30, web_call: WebCall | None = None
    ):
        self.web_call = web_call or WebCall(proxy=proxy, timeout=timeout)

    @property
    def proxy(self) -> str | None:
        return self.web_call.proxy

    @proxy.setter
    def proxy(self, value: str | None):
        self.web_call.proxy = value

    def get_json(self, method_url: str, parameters: Parameters) -> str:
        """POSTs API parameters and returns the raw JSON answer."""
        return self.web_call.post_call(method_url, parameters).response

    def upload_file(self, upload_url: str, path: str | FilePath) -> str:
        """Uploads a file to an upload server returned by the API.

        Returns:
            str: The ``file`` value to pass on to the ``*.save`` API method.
        """
        path = FilePath(path)
        logger.debug(f"Uploading {path.name} to {upload_url}")
        with path.open("rb") as f:
            try:
                response = self.web_call.session.post(
                    upload_url, files={"file": (path.name, f)}, timeout=self.web_call.timeout
                )
                response.raise_for_status()
            except requests.RequestException as e:
                logger.error(f"Upload to {upload_url} failed: {e}")
                raise WebCallError(upload_url, str(e)) from e

        try:
            answer = json.loads(response.text)
        except json.JSONDecodeError as e:
            raise VkApiError(f"Upload server returned non-JSON answer: {response.text!r}") from e

        if not isinstance(answer, dict) or "file" not in answer:
            raise VkApiError(f"Upload server answer has no 'file' member: {response.text!r}")
        return answer["file"]

    def download_file(self, url: str, path: str | FilePath):
        """Downloads a URL into a local file."""
        path = FilePath(path)
        logger.debug(f"Downloading {url} to {path}")
        try:
            with self.web_call.session.get(url, stream=True, timeout=self.web_call.timeout) as response:
                response.raise_for_status()
                with path.open("wb") as f:
                    for chunk in response.iter_content(chunk_size=64 * 1024):
                        f.write(chunk)
        except requests.RequestException as e:
            logger.error(f"Download of {url} failed: {e}")
            # Partial downloads are never left behind
            path.unlink(missing_ok=True)
            raise WebCallError(url, str(e)) from e

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
        """Authorizes the application on behalf of a user.

        Args:
            app_id: Application identifier.
            email: Login, a phone number or an e-mail.
            password: Password.
            settings: Access rights the application asks for.
            code: Called for the two-factor authentication code when VK asks for one.
            captcha_sid: Identifier of the captcha being answered.
            captcha_key: Text of the captcha.

        Returns:
            VkAuthorization: The authorization; ``is_authorized`` is False when VK
                rejected the credentials.

        Raises:
            CaptchaNeededError: VK wants a captcha answered. Retry with its sid and key.
            ValueError: Invalid arguments.
        """
        if not isinstance(app_id, int) or app_id <= 0:
            raise ValueError("Application id must be positive")
        if not email or not email.strip():
            raise ValueError("Login is not set")
        if not password or not password.strip():
            raise ValueError("Password is not set")
        if captcha_sid is not None and not captcha_key:
            raise ValueError("Captcha key is required along with captcha sid")

        authorize_url = self.create_authorize_url_for(app_id, settings, Display.WAP)
        authorize_url_result = self.web_call.make_call(authorize_url)

        if authorize_url_result.response_url.startswith(Path.BLANK_ACCESS_TOKEN):
            logger.debug("Application already granted, token issued without login")
            return self._end_authorize(authorize_url_result)

        # Fill login and password
        login_form = (
            WebForm.from_result(authorize_url_result)
            .with_field("email", email)
            .with_field("pass", password)
        )
        if captcha_sid is not None:
            login_form.with_field("captcha_sid", str(captcha_sid)).with_field(
                "captcha_key", captcha_key
            )

        login_form_post_result = self.web_call.post(login_form)

        if code is None or WebForm.is_oauth_blank(login_form_post_result):
            return self._end_authorize(login_form_post_result)

        # Two-factor authentication code
        logger.info("Two-factor authentication code requested.")
        code_form = WebForm.from_result(login_form_post_result).with_field("code", code())
        code_form_post_result = self.web_call.post(code_form)

        return self._end_authorize(code_form_post_result)

    def validate(self, validate_url: str, phone_number: str) -> VkAuthorization:
        """Passes the phone validation VK asks for: https://vk.com/dev/need_validation

        Args:
            validate_url: Address of the validation page.
            phone_number: Full phone number of the account.
        """
        if not validate_url or not validate_url.strip():
            raise ValueError("Validation URL is not set")
        if not phone_number or not phone_number.strip():
            raise ValueError("Phone number is not set")
        phone_number = phone_number.strip()
        if len(phone_number) < 9:
            raise ValueError(f"Phone number is too short: {phone_number!r}")

        validate_url_result = self.web_call.make_call(validate_url)
        # VK shows the first and the last two digits, the rest is typed in
        code_form = WebForm.from_result(validate_url_result).with_field(
            "code", phone_number[1:9]
        )
        code_form_post_result = self.web_call.post(code_form)

        return self._end_authorize(code_form_post_result)

    def _end_authorize(self, result: WebCallResult) -> VkAuthorization:
        authorization = VkAuthorization.from_url(result.response_url)
        if authorization.captcha_id is not None:
            logger.warning(f"Captcha requested (sid={authorization.captcha_id}).")
            raise CaptchaNeededError(
                authorization.captcha_id, f"{Path.CAPTCHA}{authorization.captcha_id}"
            )

        if not authorization.is_authorization_required:
            self._log_outcome(authorization)
            return authorization

        # Grant access to the application
        logger.debug("Submitting access grant form")
        authorization_form = WebForm.from_result(result)
        authorization_form_post_result = self.web_call.post(authorization_form)

        authorization = VkAuthorization.from_url(authorization_form_post_result.response_url)
        self._log_outcome(authorization)
        return authorization

    @staticmethod
    def _log_outcome(authorization: VkAuthorization):
        if authorization.is_authorized:
            logger.info(f"Authorization successful (user_id={authorization.user_id}).")
        else:
            logger.warning(f"Authorization failed: {authorization.error or 'login rejected'}")

    @staticmethod
    def create_authorize_url_for(app_id: int, settings: Settings, display: Display) -> str:
        """Builds the authorization URL.

        Args:
            app_id: Application identifier.
            settings: Access rights.
            display: Look of the authorization window.
        """
        query = urlencode(
            {
                "client_id": app_id,
                "scope": str(settings),
                "redirect_uri": Path.BLANK,
                "display": str(display),
                "response_type": str(ResponseType.TOKEN),
            },
            safe=":/,",
        )
        return f"{Path.AUTHORIZE}?{query}"

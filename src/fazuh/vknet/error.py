"""Custom exception hierarchy for the vknet library.

This module defines the base exception class and specific error types
raised by the browser, the API service and the configuration layer.
"""


class VkNetError(Exception): ...


class InternalError(VkNetError):
    """Error caused by failure in library logic."""


class WebFormError(InternalError):
    """The expected HTML form is missing from the page."""


class ConfigError(VkNetError):
    """Error caused by invalid user configuration."""


class WebCallError(VkNetError):
    """Transport failure while talking to VK."""

    def __init__(self, url: str, message: str):
        super().__init__(f"{message} ({url})")
        self.url = url


class VkApiError(VkNetError):
    """VK answered with an error."""

    def __init__(self, message: str, error_code: int | None = None):
        super().__init__(message)
        self.error_code = error_code


class AuthorizationError(VkApiError):
    """Login was rejected or the access token is invalid."""


class CaptchaNeededError(VkApiError):
    """VK demands a captcha answer before continuing."""

    def __init__(self, captcha_sid: int, captcha_img: str):
        super().__init__(f"Captcha needed: {captcha_img}", error_code=14)
        self.captcha_sid = captcha_sid
        self.captcha_img = captcha_img


class NeedValidationError(VkApiError):
    """VK demands phone validation at the given page."""

    def __init__(self, redirect_uri: str, message: str = "Validation required"):
        super().__init__(message, error_code=17)
        self.redirect_uri = redirect_uri

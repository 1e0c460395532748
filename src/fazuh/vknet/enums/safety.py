from enum import StrEnum


class Display(StrEnum):
    """Look of the authorization window."""

    PAGE = "page"
    POPUP = "popup"
    MOBILE = "mobile"
    WAP = "wap"


class ResponseType(StrEnum):
    """OAuth ``response_type``: implicit flow token or authorization code."""

    TOKEN = "token"
    CODE = "code"

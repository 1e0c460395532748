import os
from typing import Self

from dotenv import load_dotenv
from loguru import logger

from fazuh.vknet.enums.filters import Settings
from fazuh.vknet.error import ConfigError
from fazuh.vknet.service.api_service import DEFAULT_API_VERSION


class Config:
    """Library configuration manager.

    Handles loading and validation of environment variables for the vknet
    command-line tool, including application id, credentials, requested
    scopes and HTTP settings.
    """

    _instance: Self | None = None

    def load(self):
        """Load environment variables

        The priority is .env file > environment variables
        See .env-example for the available variables
        """
        load_dotenv()

        # VK credentials
        self.app_id = self._get_int("VK_APP_ID", None)
        self.login = os.getenv("VK_LOGIN")
        self.password = os.getenv("VK_PASSWORD")
        self.access_token = os.getenv("VK_ACCESS_TOKEN")
        self.two_factor = self._is_truthy(os.getenv("VK_TWO_FACTOR", "false"))

        self.settings = Settings.FRIENDS | Settings.OFFLINE
        settings = os.getenv("VK_SETTINGS")
        if settings:
            try:
                self.settings = Settings.parse(settings)
            except ValueError as e:
                logger.error(f"Invalid VK_SETTINGS: {e}. Using {self.settings}.")

        # API
        self.api_version = os.getenv("VK_API_VERSION", DEFAULT_API_VERSION)
        self.language = os.getenv("VK_LANGUAGE")

        # HTTP
        self.proxy = os.getenv("VK_PROXY")
        self.timeout = self._get_int("VK_TIMEOUT", 30)

    def __new__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super(Config, cls).__new__(cls)

            cls._instance.load()
        return cls._instance

    def require_credentials(self):
        """Raises ConfigError unless everything needed for a login is set."""
        missing = [
            name
            for name, value in (
                ("VK_APP_ID", self.app_id),
                ("VK_LOGIN", self.login),
                ("VK_PASSWORD", self.password),
            )
            if not value
        ]
        if missing:
            raise ConfigError(f"Environment variables not set: {', '.join(missing)}")

    @staticmethod
    def _get_int(name: str, default: int | None) -> int | None:
        value = os.getenv(name)
        if value is None or value == "":
            return default
        try:
            return int(value)
        except ValueError:
            logger.error(f"Invalid {name}: {value!r} is not an integer.")
            return default

    def _is_truthy(self, bool_value: str) -> bool:
        return bool_value.lower() in (
            "true",
            "1",
            "yes",
        )

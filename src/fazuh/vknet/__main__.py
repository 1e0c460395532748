"""Main entry point for the vknet command-line tool.

Handles command-line argument parsing and dispatches execution to the
requested command (authorize, validate, or call).
"""

import argparse
import json
import sys

from loguru import logger

from fazuh.vknet.config import Config
from fazuh.vknet.error import CaptchaNeededError
from fazuh.vknet.error import VkNetError
from fazuh.vknet.service.api_service import VkApi
from fazuh.vknet.vk.browser import Browser


def authorize(api: VkApi, conf: Config, two_factor: bool, captcha_retries: int):
    """Logs in with the configured credentials, asking for captcha answers on stdin."""
    conf.require_credentials()
    code = (lambda: input("Two-factor code: ").strip()) if two_factor else None

    captcha_sid = None
    captcha_key = None
    captcha_retries = max(captcha_retries, 0)
    for attempt in range(captcha_retries + 1):
        try:
            return api.authorize(
                conf.app_id,
                conf.login,
                conf.password,
                conf.settings,
                code=code,
                captcha_sid=captcha_sid,
                captcha_key=captcha_key,
            )
        except CaptchaNeededError as e:
            if attempt == captcha_retries:
                raise
            logger.warning(f"CAPTCHA detected. Open {e.captcha_img} and type the code.")
            captcha_sid = e.captcha_sid
            captcha_key = input("Captcha: ").strip()


def parse_parameters(items: list[str]) -> dict[str, str]:
    params = {}
    for item in items:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise ValueError(f"Expected key=value, got {item!r}")
        params[key] = value
    return params


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="vknet", description="VK API client")
    sub = parser.add_subparsers(dest="command", required=True)

    auth_parser = sub.add_parser("authorize", help="Log in and print the access token.")
    auth_parser.add_argument(
        "--two-factor", action="store_true", help="Ask for a two-factor code."
    )
    auth_parser.add_argument(
        "--captcha-retries", type=int, default=3, help="How many captchas to answer."
    )

    validate_parser = sub.add_parser("validate", help="Pass phone validation.")
    validate_parser.add_argument("url", help="Validation page address (redirect_uri).")
    validate_parser.add_argument("phone", help="Phone number of the account.")

    call_parser = sub.add_parser("call", help="Call an API method.")
    call_parser.add_argument("method", help="Method name, e.g. users.get")
    call_parser.add_argument("params", nargs="*", help="Parameters as key=value.")

    args = parser.parse_args(argv)

    conf = Config()
    logger.add("log/{time}.log", rotation="1 day")

    api = VkApi(
        Browser(proxy=conf.proxy, timeout=conf.timeout),
        api_version=conf.api_version,
        language=conf.language,
    )

    try:
        if args.command == "authorize":
            result = authorize(api, conf, args.two_factor or conf.two_factor, args.captcha_retries)
            print(json.dumps(result.to_dict(), indent=2))

        elif args.command == "validate":
            result = api.validate(args.url, args.phone)
            print(json.dumps(result.to_dict(), indent=2))

        elif args.command == "call":
            params = parse_parameters(args.params)
            if conf.access_token:
                api.access_token = conf.access_token
            else:
                authorize(api, conf, conf.two_factor, captcha_retries=3)
            response = api.call(args.method, params)
            print(json.dumps(response, indent=2, ensure_ascii=False))
    except (VkNetError, ValueError) as e:
        logger.error(e)
        return 1

    return 0


def main_sync():
    """Console script wrapper."""
    sys.exit(main())


if __name__ == "__main__":
    main_sync()

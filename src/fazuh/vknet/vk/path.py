class Path:
    """URL constants for the VK endpoints.

    Contains the OAuth host, the redirect target used by the implicit flow
    and the API method root.
    """

    OAUTH_HOST = "https://oauth.vk.com/"
    AUTHORIZE = f"{OAUTH_HOST}authorize"
    BLANK = f"{OAUTH_HOST}blank.html"
    BLANK_ACCESS_TOKEN = f"{BLANK}#access_token="
    API_METHOD = "https://api.vk.com/method/"
    CAPTCHA = "http://api.vk.com/captcha.php?sid="

import os

API_KEY_NAME = "bessertankenKey"
DEFAULT_BASE_URL = "https://api.kraftstoffbilliger.de"


def get_secret(name: str, default: str = "") -> str:
    """Look up a secret from the environment, falling back to `default`."""
    value = os.getenv(name)
    if value is None:
        return default
    return value


def get_api_key() -> str:
    return get_secret(API_KEY_NAME, "")


def get_base_url() -> str:
    return os.getenv("KRAFTSTOFFBILLIGER_BASE_URL", DEFAULT_BASE_URL).rstrip("/")

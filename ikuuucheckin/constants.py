from __future__ import annotations

DEFAULT_HOST = "ikuuu.one"
DEFAULT_ACCOUNTS_ENV = "ACCOUNTS"
DEFAULT_HOST_ENV = "HOST"
DEFAULT_PUSHPLUS_TOKENS_ENV = "PUSHPLUS_TOKENS"
DEFAULT_GITHUB_OUTPUT_ENV = "GITHUB_OUTPUT"
DEFAULT_TIMEOUT_SECONDS = 30
MIN_TIMEOUT_SECONDS = 5
DEFAULT_USER_AGENT = "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36"

LOGIN_PATH = "/auth/login"
CHECKIN_PATH = "/user/checkin"
LOGIN_SUCCESS_RET = 1

PUSHPLUS_URL = "https://www.pushplus.plus/send"
PUSHPLUS_SUCCESS_CODE = 200
PUSHPLUS_TEMPLATE = "markdown"

GITHUB_OUTPUT_NAME = "result"
REPORT_HEADER = "======== 签到结果 ========"
REPORT_TITLE = "iKuuu自动签到结果汇总"
SUCCESS_ICON = "✅"
FAILURE_ICON = "❌"


def login_url_for_host(host: str) -> str:
    return f"https://{host}{LOGIN_PATH}"


def checkin_url_for_host(host: str) -> str:
    return f"https://{host}{CHECKIN_PATH}"


def account_notification_title(name: str) -> str:
    return f"iKuuu签到 - {name}"

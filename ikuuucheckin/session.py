from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

import httpx

from ikuuucheckin.config import Account
from ikuuucheckin.console import info
from ikuuucheckin.constants import LOGIN_SUCCESS_RET

SET_COOKIE_PAIR_RE = re.compile(r"^\s*([^=]+)=([^;]*)")


class CheckinError(RuntimeError):
    pass


class NetworkError(CheckinError):
    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class AuthError(CheckinError):
    pass


@dataclass(frozen=True)
class AuthenticatedAccount:
    account: Account
    cookie: str

    @property
    def name(self) -> str:
        return self.account.name


def format_cookie(raw_cookies: Iterable[str]) -> str:
    """Collapse raw ``Set-Cookie`` values into a single ``Cookie`` header.

    Only the leading ``name=value`` of each entry is kept. A repeated name
    keeps its first position but takes the last value seen.
    """
    pairs: dict[str, str] = {}
    for raw in raw_cookies:
        match = SET_COOKIE_PAIR_RE.match(raw)
        if match:
            pairs[match.group(1).strip()] = match.group(2).strip()
    return "; ".join(f"{key}={value}" for key, value in pairs.items())


def _decode_json_object(response: httpx.Response) -> dict[str, Any]:
    try:
        payload = response.json()
    except ValueError as exc:
        raise NetworkError(f"响应解析失败 - {response.status_code}", response.status_code) from exc
    if not isinstance(payload, dict):
        raise NetworkError(f"响应解析失败 - {response.status_code}", response.status_code)
    return payload


def _ensure_success(response: httpx.Response) -> None:
    if not response.is_success:
        raise NetworkError(f"网络请求出错 - {response.status_code}", response.status_code)


async def _post(client: httpx.AsyncClient, url: str, **kwargs: Any) -> httpx.Response:
    try:
        return await client.post(url, **kwargs)
    except httpx.HTTPError as exc:
        raise NetworkError(f"网络请求出错 - {exc}") from exc


async def log_in(client: httpx.AsyncClient, account: Account, *, host: str, login_url: str) -> AuthenticatedAccount:
    info(f"{account.name}: 登录中...")

    # (None, value) parts keep the body multipart without attaching filenames.
    form = {
        "host": (None, host.encode("utf-8")),
        "email": (None, account.email.encode("utf-8")),
        "passwd": (None, account.passwd.encode("utf-8")),
        "code": (None, b""),
        "remember_me": (None, b"off"),
    }
    response = await _post(client, login_url, files=form)
    _ensure_success(response)

    payload = _decode_json_object(response)
    if payload.get("ret") != LOGIN_SUCCESS_RET:
        raise AuthError(f"登录失败: {payload.get('msg')}")
    info(f"{account.name}: {payload.get('msg')}")

    cookie = format_cookie(response.headers.get_list("set-cookie"))
    if not cookie:
        raise AuthError("获取 Cookie 失败")

    return AuthenticatedAccount(account=account, cookie=cookie)


async def check_in(client: httpx.AsyncClient, account: AuthenticatedAccount, *, checkin_url: str) -> str:
    response = await _post(client, checkin_url, headers={"cookie": account.cookie})
    _ensure_success(response)

    payload = _decode_json_object(response)
    msg = payload.get("msg")
    message = "" if msg is None else str(msg)
    info(f"{account.name}: {message}")
    return message

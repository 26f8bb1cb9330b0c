from __future__ import annotations

import json
import re
from dataclasses import dataclass, field

import httpx
import pytest

from ikuuucheckin.config import Account, RunConfig
from ikuuucheckin.session import format_cookie

_FORM_FIELD_RE = r'name="{name}"\r\n\r\n([^\r]*)\r\n'


def form_field(request: httpx.Request, name: str) -> str | None:
    match = re.search(_FORM_FIELD_RE.format(name=re.escape(name)), request.content.decode("utf-8"))
    return match.group(1) if match else None


@dataclass
class FakeIkuuu:
    """In-memory stand-in for the check-in site and the PushPlus relay."""

    passwords: dict[str, str] = field(default_factory=dict)
    cookies: dict[str, list[str]] = field(default_factory=dict)
    checkin_messages: dict[str, str] = field(default_factory=dict)
    login_status: int = 200
    checkin_status: int = 200
    pushplus_code: int = 200
    pushplus_fail: bool = False
    requests: list[httpx.Request] = field(default_factory=list)

    def add_account(self, email: str, passwd: str, cookies: list[str], message: str) -> None:
        self.passwords[email] = passwd
        self.cookies[email] = cookies
        self.checkin_messages[format_cookie(cookies)] = message

    def by_path(self, path: str) -> list[httpx.Request]:
        return [request for request in self.requests if request.url.path == path]

    @property
    def pushplus_requests(self) -> list[httpx.Request]:
        return [request for request in self.requests if request.url.host == "www.pushplus.plus"]

    def pushplus_payloads(self) -> list[dict]:
        return [json.loads(request.content) for request in self.pushplus_requests]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if request.url.host == "www.pushplus.plus":
            if self.pushplus_fail:
                raise httpx.ConnectError("relay unreachable", request=request)
            return httpx.Response(200, json={"code": self.pushplus_code, "msg": "ok"})

        if request.url.path == "/auth/login":
            if self.login_status != 200:
                return httpx.Response(self.login_status, text="bad gateway")
            email = form_field(request, "email") or ""
            passwd = form_field(request, "passwd")
            if self.passwords.get(email) != passwd:
                return httpx.Response(200, json={"ret": 0, "msg": "wrong password"})
            headers = [("set-cookie", value) for value in self.cookies.get(email, [])]
            return httpx.Response(200, json={"ret": 1, "msg": "ok"}, headers=headers)

        if request.url.path == "/user/checkin":
            if self.checkin_status != 200:
                return httpx.Response(self.checkin_status, text="error")
            cookie = request.headers.get("cookie", "")
            message = self.checkin_messages.get(cookie, "not logged in")
            return httpx.Response(200, json={"ret": 1, "msg": message})

        return httpx.Response(404)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def service() -> FakeIkuuu:
    return FakeIkuuu()


@pytest.fixture
def make_config():
    def _make(accounts: list[Account], **kwargs) -> RunConfig:
        return RunConfig(host="ikuuu.test", accounts=tuple(accounts), **kwargs)

    return _make

from __future__ import annotations

from collections.abc import Iterable, Sequence

import httpx

from ikuuucheckin.console import error, info
from ikuuucheckin.constants import PUSHPLUS_SUCCESS_CODE, PUSHPLUS_TEMPLATE, PUSHPLUS_URL


class NotificationError(RuntimeError):
    pass


def mask_token(token: str) -> str:
    return f"{token.strip()[:10]}..."


async def _post_pushplus(client: httpx.AsyncClient, token: str, title: str, content: str) -> bool:
    body = {
        "token": token.strip(),
        "title": title,
        "content": content,
        "template": PUSHPLUS_TEMPLATE,
    }
    try:
        response = await client.post(PUSHPLUS_URL, json=body)
        response.raise_for_status()
        data = response.json()
    except (httpx.HTTPError, ValueError) as exc:
        raise NotificationError(str(exc)) from exc

    if not isinstance(data, dict):
        raise NotificationError(f"unexpected response: {data!r}")
    return data.get("code") == PUSHPLUS_SUCCESS_CODE


async def send_pushplus_notification(client: httpx.AsyncClient, token: str, title: str, content: str) -> bool:
    """Send one PushPlus message. Never raises; failures are logged and return False."""
    try:
        return await _post_pushplus(client, token, title, content)
    except Exception as exc:  # noqa: BLE001
        error(f"PushPlus通知发送失败: {exc}")
    return False


async def send_global_notifications(
    client: httpx.AsyncClient,
    tokens: Iterable[str],
    title: str,
    lines: Sequence[str],
) -> int:
    content = "\n".join(lines)
    accepted = 0
    for token in tokens:
        if not token.strip():
            continue
        info(f"发送全局PushPlus通知到: {mask_token(token)}")
        if await send_pushplus_notification(client, token, title, content):
            accepted += 1
    return accepted

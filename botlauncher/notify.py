"""Launch-failure notifications via the Telegram Bot API."""

from __future__ import annotations

import logging
from typing import Any, Tuple

import requests

from botlauncher.config import LauncherConfig

log = logging.getLogger(__name__)

MAX_TEXT_LEN = 4000


def _send_message(api_base: str, token: str, chat_id: str, text: str, timeout: int = 15) -> Tuple[int, Any]:
    url = f"{api_base.rstrip('/')}/bot{token}/sendMessage"
    try:
        r = requests.post(url, json={"chat_id": chat_id, "text": text[:MAX_TEXT_LEN]}, timeout=timeout)
    except requests.RequestException as e:
        return 0, str(e)
    try:
        body = r.json()
    except ValueError:
        body = r.text
    return r.status_code, body


def notify_failure(cfg: LauncherConfig, reason: str) -> bool:
    """Tell the configured chat that the launch failed.

    Returns True when Telegram accepted the message. Never raises: a broken
    notification channel must not mask the launcher's own exit status.
    """
    if not cfg.notify_enabled:
        return False
    text = f"{cfg.bot_name} launch failed: {reason}"
    code, body = _send_message(cfg.telegram_api_base, cfg.telegram_bot_token, cfg.telegram_chat_id, text)
    if code < 200 or code >= 300:
        log.warning(f"Telegram notification failed ({code}): {str(body)[:200]}")
        return False
    if isinstance(body, dict) and body.get("ok") is False:
        log.warning(f"Telegram rejected notification: {body.get('description', '')}")
        return False
    log.debug("Telegram notification sent")
    return True

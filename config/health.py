from __future__ import annotations

from typing import Any

import redis
from django.conf import settings
from django.db import connection
from django.http import JsonResponse


def check_db() -> dict[str, Any]:
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1;")
            cursor.fetchone()
    except Exception as exc:  # noqa: BLE001 - health must degrade, not crash
        return {"ok": False, "error": str(exc)}
    else:
        return {"ok": True}


def check_redis() -> dict[str, Any]:
    # Redis only carries cross-process broadcasts; one process runs without it.
    url = getattr(settings, "REDIS_URL", None)
    if not url:
        return {"ok": True, "skipped": True}
    try:
        client = redis.Redis.from_url(
            url,
            socket_timeout=0.5,
            socket_connect_timeout=0.5,
        )
        client.ping()
    except Exception as exc:  # noqa: BLE001 - health must degrade, not crash
        return {"ok": False, "error": str(exc)}
    else:
        return {"ok": True}


def check_realtime() -> dict[str, Any]:
    from post_relay.realtime.socketio import sio  # noqa: PLC0415

    namespaces = sorted(sio.handlers)
    gate_configured = bool(settings.POST_NAMESPACE_PUBLIC_KEY)
    info: dict[str, Any] = {
        "ok": gate_configured,
        "namespaces": namespaces,
        "fanout": "redis" if settings.REDIS_URL else "local",
    }
    if not gate_configured:
        info["error"] = "POST_NAMESPACE_PUBLIC_KEY not configured"
    return info


def health(request):
    components = {
        "db": check_db(),
        "redis": check_redis(),
        "realtime": check_realtime(),
    }

    all_ok = all(v.get("ok", False) for v in components.values())
    some_ok = any(v.get("ok", False) for v in components.values())

    status = "ok" if all_ok else ("degraded" if some_ok else "down")
    http_status = 200 if all_ok else 503

    return JsonResponse(
        {"status": status, "components": components},
        status=http_status,
    )

from time import time

from fastapi import Request

_RATE_LIMIT_STORE: dict[str, list[float]] = {}


#Sliding window limiter; False once the key has used up its window
def rate_limit(key: str, max_requests: int, window_seconds: int) -> bool:
    now = time()
    timestamps = _RATE_LIMIT_STORE.get(key, [])

    timestamps = [t for t in timestamps if now - t < window_seconds]

    if len(timestamps) >= max_requests:
        _RATE_LIMIT_STORE[key] = timestamps
        return False

    timestamps.append(now)
    _RATE_LIMIT_STORE[key] = timestamps
    return True


def make_key(endpoint: str, request: Request, identity: str = "") -> str:
    ip = request.client.host if request.client else "unknown"
    return f"{endpoint}:{ip}:{identity}"


def reset_rate_limits() -> None:
    _RATE_LIMIT_STORE.clear()

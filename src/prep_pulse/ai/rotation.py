# ABOUTME: Rate-limited credential rotation shared by every caller of one provider.
# ABOUTME: Enforces a minimum inter-request interval and rotates keys on 429 or transport errors.

import asyncio
import time
from collections.abc import Awaitable, Callable, Sequence

import httpx
import structlog
from pydantic import SecretStr

from prep_pulse.config import is_placeholder
from prep_pulse.errors import ExhaustedError, NoCredentialsError

log = structlog.get_logger()

RATE_LIMITED = 429

RequestFactory = Callable[[str], Awaitable[httpx.Response]]


def _key_preview(key: str) -> str:
    return f"...{key[-4:]}"


class KeyRotator:
    """Process-wide throttle clock and key cursor for a single provider.

    Throttle slots are handed out one at a time under an asyncio lock, so
    concurrent callers queue in arrival order instead of interleaving. The
    cursor is only moved under the same lock.
    """

    def __init__(
        self,
        provider: str,
        keys: Sequence[str | SecretStr],
        min_interval: float = 3.0,
        rate_limit_cooldown: float = 3.0,
        retry_delay: float = 1.0,
    ) -> None:
        self.provider = provider
        self.min_interval = min_interval
        self.rate_limit_cooldown = rate_limit_cooldown
        self.retry_delay = retry_delay
        self._keys = [
            (key.get_secret_value() if isinstance(key, SecretStr) else key).strip()
            for key in keys
            if not is_placeholder(key)
        ]
        self._current_index = 0
        self._last_request_time: float | None = None
        self._lock_instance: asyncio.Lock | None = None
        self._lock_loop: asyncio.AbstractEventLoop | None = None

    @property
    def _lock(self) -> asyncio.Lock:
        """Lock bound to the running event loop.

        A lock cannot move between loops, so a new loop (another `asyncio.run`)
        gets a fresh one. Throttle timing is kept across loops.
        """
        loop = asyncio.get_running_loop()
        if self._lock_instance is None or self._lock_loop is not loop:
            self._lock_instance = asyncio.Lock()
            self._lock_loop = loop
        return self._lock_instance

    @property
    def has_credentials(self) -> bool:
        return bool(self._keys)

    @property
    def pool_size(self) -> int:
        return len(self._keys)

    def throttle_status(self) -> tuple[bool, float]:
        """Report whether a request would wait now, and for how many seconds."""
        if self._last_request_time is None:
            return False, 0.0
        remaining = self.min_interval - (time.monotonic() - self._last_request_time)
        return (True, remaining) if remaining > 0 else (False, 0.0)

    async def _wait_for_slot(self) -> str:
        """Suspend until the minimum interval has passed, then claim the current key."""
        async with self._lock:
            if self._last_request_time is not None:
                elapsed = time.monotonic() - self._last_request_time
                if elapsed < self.min_interval:
                    await asyncio.sleep(self.min_interval - elapsed)
            self._last_request_time = time.monotonic()
            return self._keys[self._current_index]

    async def _rotate(self) -> None:
        async with self._lock:
            self._current_index = (self._current_index + 1) % len(self._keys)
            log.info(
                "api_key_rotated",
                provider=self.provider,
                key_number=self._current_index + 1,
                pool_size=len(self._keys),
            )

    async def with_rotation(
        self,
        make_request: RequestFactory,
        max_attempts: int | None = None,
    ) -> httpx.Response:
        """Issue a request with throttling and key rotation.

        Attempts are counted across the whole pool, not per key.

        Args:
            make_request: Coroutine factory taking the credential to use.
            max_attempts: Total attempts. Defaults to the number of usable keys.

        Returns:
            The first successful response.

        Raises:
            NoCredentialsError: If the pool has no usable credential.
            ExhaustedError: If every attempt was rate limited or failed.
        """
        if not self._keys:
            raise NoCredentialsError(self.provider)

        max_attempts = max_attempts or len(self._keys)
        last_error: str | None = None

        for attempt in range(1, max_attempts + 1):
            key = await self._wait_for_slot()
            log.debug(
                "api_request",
                provider=self.provider,
                attempt=attempt,
                key=_key_preview(key),
            )

            try:
                response = await make_request(key)
            except httpx.HTTPError as e:
                last_error = str(e) or type(e).__name__
                log.warning(
                    "api_request_failed",
                    provider=self.provider,
                    attempt=attempt,
                    error=last_error,
                )
                await self._rotate()
                if attempt < max_attempts:
                    await asyncio.sleep(self.retry_delay)
                continue

            if response.status_code == RATE_LIMITED:
                last_error = "rate limited"
                log.warning("rate_limit_hit", provider=self.provider, attempt=attempt)
                await self._rotate()
                if attempt < max_attempts:
                    await asyncio.sleep(self.rate_limit_cooldown)
                continue

            if not response.is_success:
                last_error = f"HTTP {response.status_code}"
                log.warning(
                    "api_bad_status",
                    provider=self.provider,
                    attempt=attempt,
                    status=response.status_code,
                )
                await self._rotate()
                if attempt < max_attempts:
                    await asyncio.sleep(self.retry_delay)
                continue

            return response

        log.error("api_keys_exhausted", provider=self.provider, attempts=max_attempts)
        raise ExhaustedError(self.provider, max_attempts, last_error)


_ROTATORS: dict[str, KeyRotator] = {}


def get_rotator(
    provider: str,
    keys: Sequence[str | SecretStr],
    min_interval: float = 3.0,
    rate_limit_cooldown: float = 3.0,
    retry_delay: float = 1.0,
) -> KeyRotator:
    """Return the single rotator for a provider, creating it on first use.

    State lives for the lifetime of the process; later calls reuse the first
    configuration.
    """
    rotator = _ROTATORS.get(provider)
    if rotator is None:
        rotator = KeyRotator(provider, keys, min_interval, rate_limit_cooldown, retry_delay)
        _ROTATORS[provider] = rotator
    return rotator


def reset_rotators() -> None:
    """Forget all provider rotators."""
    _ROTATORS.clear()

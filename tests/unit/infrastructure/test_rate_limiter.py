"""
Unit tests for rate limiting.
"""

from unittest.mock import MagicMock

from app.infrastructure.rate_limiting import (
    RateLimit, RateLimitStatus, RateLimitStrategy, InMemoryRateLimiter, RateLimiter, RATE_LIMITS,
    user_key, ip_key
)
from app.infrastructure.rate_limiting.limiter import RedisRateLimiter


class FakeClock:
    """Clock the test moves by hand."""

    def __init__(self, now: float = 1_000_050):
        self.now = now

    def __call__(self) -> float:
        return self.now


def fake_request(path="/api/v1/marketplace/posts", host="10.0.0.1", authorization=None):
    request = MagicMock()
    request.client.host = host
    request.url.path = path
    request.headers = {"authorization": authorization} if authorization else {}
    return request


class TestInMemoryRateLimiter:
    """Test cases for the in-process fixed window limiter."""

    def setup_method(self):
        """Set up test fixtures."""
        self.clock = FakeClock()
        self.limiter = InMemoryRateLimiter(clock=self.clock)
        self.limit = RateLimit(requests=2, window=60)

    def test_allows_until_limit(self):
        """Test requests are counted down and then refused until the epoch-aligned window ends."""
        first = self.limiter.is_allowed("key", self.limit)
        second = self.limiter.is_allowed("key", self.limit)
        third = self.limiter.is_allowed("key", self.limit)

        assert (first.remaining, second.remaining) == (1, 0)
        assert first.retry_after is None
        assert third.remaining == 0
        # 1_000_050 falls in the window starting at 1_000_020
        assert third.retry_after == 30
        assert third.reset_time == 1_000_080

    def test_window_resets(self):
        """Test a new window starts a fresh count."""
        self.limiter.is_allowed("key", self.limit)
        self.limiter.is_allowed("key", self.limit)

        self.clock.now += 60
        status = self.limiter.is_allowed("key", self.limit)

        assert status.retry_after is None
        assert status.remaining == 1

    def test_keys_are_independent(self):
        """Test different keys have their own counters."""
        self.limiter.is_allowed("a", self.limit)
        self.limiter.is_allowed("a", self.limit)

        assert self.limiter.is_allowed("b", self.limit).retry_after is None

    def test_reset(self):
        """Test clearing every counter."""
        self.limiter.is_allowed("key", self.limit)
        self.limiter.is_allowed("key", self.limit)

        self.limiter.reset()

        assert self.limiter.is_allowed("key", self.limit).remaining == 1


class TestRateLimitStatus:
    """Test cases for rate limit headers."""

    def test_headers_without_retry(self):
        """Test headers of an allowed request."""
        headers = RateLimitStatus(limit=10, remaining=9, reset_time=123).to_headers()

        assert headers == {
            "X-RateLimit-Limit": "10",
            "X-RateLimit-Remaining": "9",
            "X-RateLimit-Reset": "123"
        }

    def test_headers_with_retry(self):
        """Test refused requests carry Retry-After."""
        headers = RateLimitStatus(limit=10, remaining=0, reset_time=123, retry_after=7).to_headers()

        assert headers["Retry-After"] == "7"


class TestRateLimiter:
    """Test cases for the backend-selecting limiter and key functions."""

    def test_defaults_to_memory(self):
        """Test no Redis URL means the in-memory backend."""
        limiter = RateLimiter()

        assert isinstance(limiter.limiter, InMemoryRateLimiter)

    def test_default_key_uses_ip_and_path(self):
        """Test requests from different clients are counted separately."""
        limiter = RateLimiter()
        limit = RateLimit(requests=1, window=60)

        limiter.check_rate_limit(fake_request(host="10.0.0.1"), limit)
        other = limiter.check_rate_limit(fake_request(host="10.0.0.2"), limit)
        repeat = limiter.check_rate_limit(fake_request(host="10.0.0.1"), limit)

        assert other.retry_after is None
        assert repeat.retry_after is not None

    def test_user_key_hashes_token(self):
        """Test bearer tokens are hashed into the key."""
        key = user_key(fake_request(authorization="Bearer secret-token"))

        assert key.startswith("rate_limit:user:")
        assert "secret-token" not in key
        assert key.endswith(":/api/v1/marketplace/posts")

    def test_user_key_falls_back_to_ip(self):
        """Test anonymous requests are keyed by IP."""
        request = fake_request()

        assert user_key(request) == ip_key(request) == "rate_limit:ip:10.0.0.1:/api/v1/marketplace/posts"

    def test_predefined_limits(self):
        """Test messaging uses a sliding window and auth is strict."""
        assert RATE_LIMITS["message"].strategy == RateLimitStrategy.SLIDING_WINDOW
        assert RATE_LIMITS["auth"].requests < RATE_LIMITS["default"].requests


class TestRedisRateLimiter:
    """Test cases for the Redis backend with a mocked client."""

    def test_fixed_window_over_limit(self):
        """Test counts above the limit are refused."""
        client = MagicMock()
        client.pipeline.return_value.execute.return_value = [3, True]

        status = RedisRateLimiter(client).is_allowed("key", RateLimit(requests=2, window=60))

        assert status.remaining == 0
        assert status.retry_after >= 1

    def test_sliding_window_under_limit(self):
        """Test the sliding window reports the remaining budget."""
        client = MagicMock()
        client.pipeline.return_value.execute.return_value = [0, 1, 1, True]

        status = RedisRateLimiter(client).is_allowed(
            "key", RateLimit(requests=5, window=60, strategy=RateLimitStrategy.SLIDING_WINDOW)
        )

        assert status.remaining == 3
        assert status.retry_after is None
        client.zrem.assert_not_called()

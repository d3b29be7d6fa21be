"""Tests for the generative-tier circuit breaker."""

from spellseeker.services.circuit_breaker import CircuitBreaker, CircuitState


class TestCircuitBreaker:
    def test_starts_closed(self, clock) -> None:
        """A new breaker lets calls through."""
        breaker = CircuitBreaker(clock=clock)

        assert breaker.state == CircuitState.CLOSED
        assert breaker.allow_request() is True

    def test_opens_after_threshold(self, clock) -> None:
        """Consecutive failures up to the threshold open the circuit."""
        breaker = CircuitBreaker(failure_threshold=2, reset_seconds=60.0, clock=clock)

        breaker.record_failure()
        assert breaker.state == CircuitState.CLOSED

        breaker.record_failure()
        assert breaker.state == CircuitState.OPEN
        assert breaker.allow_request() is False

    def test_success_resets_failure_count(self, clock) -> None:
        """Failures must be consecutive to open the circuit."""
        breaker = CircuitBreaker(failure_threshold=2, clock=clock)

        breaker.record_failure()
        breaker.record_success()
        breaker.record_failure()

        assert breaker.state == CircuitState.CLOSED

    def test_half_open_after_reset_window(self, clock) -> None:
        """After the reset window one trial call is allowed."""
        breaker = CircuitBreaker(failure_threshold=1, reset_seconds=60.0, clock=clock)
        breaker.record_failure()

        clock.advance(59.0)
        assert breaker.allow_request() is False

        clock.advance(1.0)
        assert breaker.state == CircuitState.HALF_OPEN
        assert breaker.allow_request() is True

    def test_half_open_success_closes(self, clock) -> None:
        """A successful trial closes the circuit."""
        breaker = CircuitBreaker(failure_threshold=1, reset_seconds=10.0, clock=clock)
        breaker.record_failure()
        clock.advance(10.0)

        breaker.record_success()

        assert breaker.state == CircuitState.CLOSED

    def test_half_open_failure_reopens(self, clock) -> None:
        """A failed trial re-opens the circuit for another window."""
        breaker = CircuitBreaker(failure_threshold=1, reset_seconds=10.0, clock=clock)
        breaker.record_failure()
        clock.advance(10.0)

        breaker.record_failure()

        assert breaker.state == CircuitState.OPEN
        assert breaker.allow_request() is False

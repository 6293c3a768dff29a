"""Exponential backoff policy for reconnect delays."""

from luxacast.errors import InvalidConfigurationError


class BackoffPolicy:
    """Computes reconnect delays that grow multiplicatively up to a cap.

    The policy itself is stateless: callers keep the current delay and feed it
    back into :meth:`next`. Every delay it returns lies in
    ``[min_delay, max_delay]``.
    """

    def __init__(
        self,
        min_delay: float = 1.0,
        max_delay: float = 60.0,
        multiplier: float = 2.0,
    ):
        """
        Initialize backoff policy.

        Args:
            min_delay: First (and smallest) delay in seconds
            max_delay: Largest delay in seconds
            multiplier: Factor applied to the delay after every attempt

        Raises:
            InvalidConfigurationError: If the bounds or multiplier are inconsistent
        """
        if min_delay <= 0 or max_delay <= 0:
            raise InvalidConfigurationError(
                f"Reconnect delays must be positive (min_delay={min_delay}, max_delay={max_delay})"
            )
        if min_delay > max_delay:
            raise InvalidConfigurationError(
                f"min_delay ({min_delay}) cannot exceed max_delay ({max_delay})"
            )
        if multiplier < 1:
            raise InvalidConfigurationError(
                f"multiplier must be at least 1 (got {multiplier})"
            )

        self._min_delay = float(min_delay)
        self._max_delay = float(max_delay)
        self._multiplier = float(multiplier)

    @property
    def min_delay(self) -> float:
        return self._min_delay

    @property
    def max_delay(self) -> float:
        return self._max_delay

    @property
    def multiplier(self) -> float:
        return self._multiplier

    def reset(self) -> float:
        """Delay used for the first attempt of a fresh reconnect cycle."""
        return self._min_delay

    def next(self, current_delay: float) -> float:
        """
        Calculate the delay that follows ``current_delay``.

        Args:
            current_delay: Delay used for the previous attempt (seconds)

        Returns:
            ``current_delay * multiplier`` clamped to ``[min_delay, max_delay]``
        """
        return max(self._min_delay, min(self._max_delay, current_delay * self._multiplier))

    def delay_for_attempt(self, attempt: int) -> float:
        """
        Delay scheduled after ``attempt`` consecutive failures (0-indexed).

        Args:
            attempt: Number of failed attempts so far in the current cycle

        Returns:
            ``min(max_delay, min_delay * multiplier ** attempt)``
        """
        if attempt <= 0:
            return self._min_delay

        try:
            return min(self._max_delay, self._min_delay * (self._multiplier ** attempt))
        except OverflowError:
            return self._max_delay

    def __repr__(self) -> str:
        return (
            f"BackoffPolicy(min_delay={self._min_delay}, "
            f"max_delay={self._max_delay}, multiplier={self._multiplier})"
        )

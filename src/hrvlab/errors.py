"""Exceptions raised by the analysis engine."""


class InsufficientDataError(ValueError):
    """Fewer than the minimum number of valid RR intervals were supplied."""

    def __init__(self, count: int, minimum: int = 2) -> None:
        self.count = count
        self.minimum = minimum
        super().__init__(
            f"Not enough valid RR interval data for analysis "
            f"({count} given, minimum {minimum} intervals required)."
        )

"""
Forecasting exceptions
"""


class InvalidInputError(ValueError):
    """Raised when forecast input is malformed (non-finite values, gaps, bad types)."""

    def __init__(self, field: str, message: str = "invalid value"):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")

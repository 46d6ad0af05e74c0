from __future__ import annotations


class BadRequestError(Exception):
    """Raised when caller input is missing or malformed (maps to 400)."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(Exception):
    """Raised when required configuration is missing at startup."""

    def __init__(self, problems: list[str]):
        super().__init__("; ".join(problems))
        self.problems = problems

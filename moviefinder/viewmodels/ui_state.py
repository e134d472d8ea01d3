from dataclasses import dataclass
from typing import Any, Union

# Screen states. Every screen moves Initial -> Loading -> Success | Error;
# the movie detail screen adds SaveSuccess after an explicit save.


@dataclass(frozen=True)
class Initial:
    pass


@dataclass(frozen=True)
class Loading:
    pass


@dataclass(frozen=True)
class Success:
    payload: Any = None


@dataclass(frozen=True)
class SaveSuccess:
    payload: Any = None


@dataclass(frozen=True)
class Error:
    message: str


UiState = Union[Initial, Loading, Success, SaveSuccess, Error]

UNKNOWN_ERROR = "Unknown error occurred"


def error_message(exc: BaseException, fallback: str = UNKNOWN_ERROR) -> str:
    """Human-readable text for a failed task, falling back when the exception has none."""
    return str(exc) or fallback

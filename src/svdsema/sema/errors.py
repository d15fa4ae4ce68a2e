from __future__ import annotations

from typing import Iterable


class ResolutionError(Exception):
    """A name or derivation reference in the model could not be resolved.

    Each recursion level that lets the error pass through appends a
    context frame with :meth:`add_context`; ``str()`` renders the frames
    outermost first, followed by the original failure.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
        self.context: list[str] = []

    def add_context(self, text: str) -> "ResolutionError":
        self.context.append(text)
        return self

    def __str__(self) -> str:
        frames = list(reversed(self.context)) + [self.message]
        return ": ".join(frames)


class NotFoundError(ResolutionError):
    pass


class AmbiguousReferenceError(ResolutionError):
    def __init__(self, name: str, fields: Iterable[str]) -> None:
        self.name = name
        self.fields = tuple(fields)
        super().__init__(
            f"fields {list(self.fields)} all have an enumeratedValues named {name}"
        )


class SelfDerivationError(ResolutionError):
    pass


class MissingDescriptionError(ResolutionError):
    pass


class InvalidReferenceError(ResolutionError):
    pass


class UnsupportedWidthError(ResolutionError):
    def __init__(self, width: int) -> None:
        self.width = width
        super().__init__(f"can't convert {width} bits into an integer type")

"""Errors raised while decoding RLP data."""

from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    """The kinds of failure the RLP decoder reports."""

    RLP_IS_TOO_BIG = "RlpIsTooBig"
    RLP_IS_TOO_SHORT = "RlpIsTooShort"
    RLP_EXPECTED_TO_BE_LIST = "RlpExpectedToBeList"
    RLP_EXPECTED_TO_BE_DATA = "RlpExpectedToBeData"
    RLP_INCORRECT_LIST_LEN = "RlpIncorrectListLen"
    RLP_DATA_LEN_WITH_ZERO_PREFIX = "RlpDataLenWithZeroPrefix"
    RLP_LIST_LEN_WITH_ZERO_PREFIX = "RlpListLenWithZeroPrefix"
    RLP_INVALID_INDIRECTION = "RlpInvalidIndirection"
    RLP_INCONSISTENT_LENGTH_AND_DATA = "RlpInconsistentLengthAndData"
    RLP_INVALID_LENGTH = "RlpInvalidLength"
    CUSTOM = "Custom"


class DecoderError(Exception):
    """Raised when RLP data cannot be decoded."""

    def __init__(self, kind: ErrorKind, message: str | None = None) -> None:
        self.kind = kind
        self.message = message
        super().__init__(self._describe())

    @classmethod
    def custom(cls, message: str) -> DecoderError:
        """Build an error carrying a free-form message."""
        return cls(ErrorKind.CUSTOM, message)

    def _describe(self) -> str:
        if self.kind is ErrorKind.CUSTOM:
            return f'Custom("{self.message}")'
        return self.kind.value

    def __str__(self) -> str:
        return self._describe()

    def __repr__(self) -> str:
        return f"DecoderError({self._describe()})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DecoderError):
            return NotImplemented
        return self.kind is other.kind and self.message == other.message

    def __hash__(self) -> int:
        return hash((self.kind, self.message))
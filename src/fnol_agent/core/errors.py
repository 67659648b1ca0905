"""Failure kinds reported at the document-intake boundary."""

from __future__ import annotations


class FnolError(Exception):
    """Base class for intake errors; ``status_code`` is the HTTP mapping."""

    status_code: int = 400

    @property
    def kind(self) -> str:
        return type(self).__name__


class InputUnavailable(FnolError):
    """No text or file was supplied."""

    status_code = 400


class UnsupportedFormat(FnolError):
    """The file type is not one the decoder understands."""

    status_code = 415


class DecodeFailure(FnolError):
    """A binary document could not be converted to text."""

    status_code = 422

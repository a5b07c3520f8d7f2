# SPDX-License-Identifier: GPL-3.0-or-later
# SPDX-FileCopyrightText: Copyright 2023 Geoffrey Coulaud
# SPDX-FileCopyrightText: Copyright 2026 Playshelf Contributors

import threading
from enum import StrEnum
from typing import NamedTuple


class FriendlyError(Exception):
    """
    An error that is meant to be shown to the user.

    The title is short ("Steam detection failed"),
    the subtitle explains what happened in a sentence.
    """

    title: str
    subtitle: str

    def __init__(self, title: str, subtitle: str) -> None:
        super().__init__(title, subtitle)
        self.title = title
        self.subtitle = subtitle

    def __str__(self) -> str:
        return f"{self.title} - {self.subtitle}"


class ErrorProducer:
    """
    A mixin for objects that produce errors.

    Errors are stored as they are reported and may be collected by the caller.
    Reporting is safe from any thread.
    """

    errors: list[Exception]
    errors_lock: threading.Lock

    def __init__(self) -> None:
        self.errors = []
        self.errors_lock = threading.Lock()

    def report_error(self, error: Exception) -> None:
        """Report an error"""
        with self.errors_lock:
            self.errors.append(error)

    def collect_errors(self) -> list[Exception]:
        """Collect and remove the errors produced by the object"""
        with self.errors_lock:
            errors = self.errors.copy()
            self.errors.clear()
        return errors


class NotificationStyle(StrEnum):
    SUCCESS = "success"
    INFO = "info"
    FAILURE = "failure"


class Notification(NamedTuple):
    """Something the presentation layer should tell the user about."""

    style: NotificationStyle
    title: str
    message: str
    dismiss: bool = False

    @property
    def ok(self) -> bool:
        return self.style != NotificationStyle.FAILURE

    @classmethod
    def success(cls, title: str, message: str, *, dismiss: bool = False) -> "Notification":
        return cls(NotificationStyle.SUCCESS, title, message, dismiss)

    @classmethod
    def info(cls, title: str, message: str) -> "Notification":
        return cls(NotificationStyle.INFO, title, message)

    @classmethod
    def failure(cls, title: str, message: str) -> "Notification":
        return cls(NotificationStyle.FAILURE, title, message)

    @classmethod
    def from_error(cls, error: FriendlyError) -> "Notification":
        return cls.failure(error.title, error.subtitle)

from __future__ import annotations

from enum import IntEnum


class Severity(IntEnum):
    FATAL = 1
    ERROR = 2
    WARNING = 3
    NOTICE = 4
    DEPRECATED = 5

    @property
    def label(self) -> str:
        return self.name.title()

    @classmethod
    def from_warning(cls, category: type[Warning]) -> "Severity":
        if issubclass(category, (DeprecationWarning, PendingDeprecationWarning, FutureWarning)):
            return cls.DEPRECATED
        if issubclass(category, (ResourceWarning, ImportWarning)):
            return cls.NOTICE
        return cls.WARNING

    @classmethod
    def parse(cls, value: "Severity | int | str") -> "Severity":
        if isinstance(value, cls):
            return value
        if isinstance(value, int):
            return cls(value)
        text = str(value).strip()
        if text.isdigit():
            return cls(int(text))
        try:
            return cls[text.upper()]
        except KeyError:
            raise ValueError(f"unknown severity: {value!r}") from None

"""
Result probing for the phone "ajax" endpoints.

These endpoints answer in different shapes depending on the sub-operation.
The result is read by trying an ordered list of rules; the first rule that
applies decides, and when none applies the answer is ``False``.
"""

from dataclasses import dataclass
from typing import Any, Optional, Sequence


@dataclass(frozen=True)
class BoolFieldRule:
    """Read a top-level boolean field; not applicable when absent or null."""

    name: str

    def extract(self, result: Any) -> Optional[bool]:
        if not isinstance(result, dict) or result.get(self.name) is None:
            return None
        value = result[self.name]
        if not isinstance(value, bool):
            raise TypeError(f"failed to parse {self.name} field into boolean: {value!r}")
        return value


AJAX_RULES: tuple[BoolFieldRule, ...] = (
    BoolFieldRule("has_phone"),
    BoolFieldRule("success"),
)


def probe_ajax_result(result: Any, rules: Sequence[BoolFieldRule] = AJAX_RULES) -> bool:
    for rule in rules:
        value = rule.extract(result)
        if value is not None:
            return value
    return False

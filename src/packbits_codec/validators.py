"""
Validation functions for attrs.
"""

from typing import Any

import attr
from attr.validators import in_

__all__ = ["in_", "range_"]


@attr.s(repr=False, slots=True, hash=True)
class _RangeValidator:
    minimum = attr.ib()
    maximum = attr.ib()

    def __call__(self, inst: Any, attribute: Any, value: Any) -> None:
        try:
            in_range = all(self.minimum <= item <= self.maximum for item in value)
        except TypeError:
            in_range = False

        if not in_range:
            raise ValueError(
                "'{name}' items must be in range [{minimum!r}, {maximum!r}]".format(
                    name=attribute.name, minimum=self.minimum, maximum=self.maximum
                )
            )

    def __repr__(self) -> str:
        return "<range_ validator with [{minimum!r}, {maximum!r}]>".format(
            minimum=self.minimum, maximum=self.maximum
        )


def range_(minimum: int, maximum: int) -> _RangeValidator:
    """
    A validator that raises a :exc:`ValueError` if any item of the sequence
    the initializer is called with does not belong in the [minimum, maximum]
    range.
    """
    return _RangeValidator(minimum, maximum)

"""
Processing options controlling how extracted values are displayed.
"""

from dataclasses import dataclass, field, replace
from typing import Optional

# Decimal-places setting used by the UI to mean "keep every digit"
KEEP_ALL_DECIMALS = -1


@dataclass(frozen=True)
class Precision:
    """
    Decimal precision for rendering numbers.

    Either a fixed number of fractional digits or full precision.
    Build instances with :meth:`fixed`, :meth:`full` or
    :meth:`from_setting` rather than passing a magic negative number.
    """
    places: Optional[int] = 2

    def __post_init__(self):
        if self.places is not None and self.places < 0:
            raise ValueError(f"Decimal places must be >= 0, got {self.places}")

    @classmethod
    def fixed(cls, places: int) -> "Precision":
        return cls(places=places)

    @classmethod
    def full(cls) -> "Precision":
        return cls(places=None)

    @classmethod
    def from_setting(cls, setting: int) -> "Precision":
        """Convert the integer UI setting (-1 = keep all) to a Precision."""
        if setting == KEEP_ALL_DECIMALS:
            return cls.full()
        return cls.fixed(setting)

    @property
    def keeps_all(self) -> bool:
        return self.places is None

    def as_setting(self) -> int:
        """Integer form of this precision, -1 meaning keep all."""
        return KEEP_ALL_DECIMALS if self.places is None else self.places

    def __str__(self) -> str:
        return "all decimals" if self.keeps_all else f"{self.places} dp"


@dataclass(frozen=True)
class ProcessingOptions:
    """Snapshot of the user's formatting choices for one formatting pass."""
    multiplier: float = 1.0
    decimal_places: Precision = field(default_factory=Precision)
    custom_instruction: str = ""
    force_negative: bool = False
    title_case: bool = False

    def __post_init__(self):
        if isinstance(self.decimal_places, int):
            object.__setattr__(
                self, "decimal_places", Precision.from_setting(self.decimal_places)
            )
        if not self.multiplier > 0:
            raise ValueError(f"Multiplier must be positive, got {self.multiplier}")

    def with_changes(self, **changes) -> "ProcessingOptions":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

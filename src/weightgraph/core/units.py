"""
Weight units and the persisted unit preference.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING

from weightgraph import constants

if TYPE_CHECKING:
    from weightgraph.utils.preferences import PreferenceStore


logger = logging.getLogger("WeightGraph.Units")


class WeightUnit(Enum):
    """A display unit for body weight. Stored values are always kilograms."""
    KILOGRAM = "kilogram"
    POUND = "pound"

    @property
    def factor(self) -> float:
        """Conversion factor from kilograms to this unit."""
        return 1.0 if self is WeightUnit.KILOGRAM else 2.20462

    @property
    def symbol(self) -> str:
        return "kg" if self is WeightUnit.KILOGRAM else "lb"

    def convert(self, kilograms: float) -> float:
        return kilograms * self.factor

    @classmethod
    def load(cls, store: "PreferenceStore") -> "WeightUnit":
        """Reads the persisted preference, falling back to kilograms."""
        raw = store.get(constants.config.defaults.UNIT_PREFERENCE_KEY)
        try:
            return cls(raw) if raw is not None else cls.KILOGRAM
        except ValueError:
            logger.warning("Unknown unit preference '%s', using kilograms.", raw)
            return cls.KILOGRAM

    def save(self, store: "PreferenceStore") -> None:
        store.set(constants.config.defaults.UNIT_PREFERENCE_KEY, self.value)

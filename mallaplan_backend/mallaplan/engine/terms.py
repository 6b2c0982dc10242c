from dataclasses import dataclass
from enum import Enum


class Period(str, Enum):
    S1 = "S1"
    S2 = "S2"
    I = "I"  # noqa: E741  (Invierno, intersession)
    V = "V"  # Verano, summer


SPECIAL_PERIODS = frozenset({Period.I, Period.V})

# Position of each period inside an academic year: S1, I, S2, V.
_ORDER = {Period.S1: 1, Period.I: 2, Period.S2: 3, Period.V: 4}


@dataclass(frozen=True)
class Term:
    period: Period
    year: int

    @property
    def label(self) -> str:
        return term_label(self.period, self.year)

    @property
    def is_special(self) -> bool:
        return self.period in SPECIAL_PERIODS

    def sort_key(self) -> tuple[int, int]:
        return self.year, _ORDER[self.period]

    def following(self, include_special: bool = False) -> "Term":
        """Next term in the academic calendar.

        Special terms are only visited when ``include_special`` is set; a
        special term is always followed by the next regular one.
        """
        if self.period == Period.S1:
            if include_special:
                return Term(Period.I, self.year)
            return Term(Period.S2, self.year)
        if self.period == Period.I:
            return Term(Period.S2, self.year)
        if self.period == Period.S2:
            if include_special:
                return Term(Period.V, self.year)
            return Term(Period.S1, self.year + 1)
        return Term(Period.S1, self.year + 1)


def term_label(period, year: int) -> str:
    return f"{Period(period).value}-{year}"

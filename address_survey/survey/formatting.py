"""
Note text formatting

Two strategies turn a collected answer into note text:
- ComposedAddressFormatter: "street, house № N, L floors (comment)"
- KeyValueFormatter: one "key = value" line per field
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Mapping, Tuple

# Ordered as (one, few, many)
PluralForms = Tuple[str, str, str]


@dataclass(frozen=True)
class Locale:
    house_label: str
    floor_forms: PluralForms


LOCALES: Dict[str, Locale] = {
    "ru": Locale(house_label="дом №", floor_forms=("этаж", "этажа", "этажей")),
    "en": Locale(house_label="house №", floor_forms=("floor", "floors", "floors")),
}


def levels_word(n: int, forms: PluralForms = LOCALES["ru"].floor_forms) -> str:
    """
    Pick the floor word agreeing with n (Russian grammatical number)
    
    Args:
        n: Non-negative floor count
        forms: (one, few, many) word forms
    """
    one, few, many = forms
    n %= 100
    if 5 <= n <= 20:
        return many
    n %= 10
    if n == 1:
        return one
    if 2 <= n <= 4:
        return few
    return many


class AddressFormatter(ABC):
    """Strategy turning an answer into note text"""
    
    name: str = ""
    
    @abstractmethod
    def format(self, answer: Mapping[str, str]) -> str:
        ...


class ComposedAddressFormatter(AddressFormatter):
    name = "composed"
    
    def __init__(self, locale: str = "ru"):
        self.locale = LOCALES[locale]
    
    def format(self, answer: Mapping[str, str]) -> str:
        pieces = []
        if answer.get("street"):
            pieces.append(answer["street"])
        if answer.get("number"):
            pieces.append(f"{self.locale.house_label} {answer['number']}")
        if answer.get("levels"):
            levels = answer["levels"]
            pieces.append(f"{levels} {self._floor_word(levels)}")
        
        address = ", ".join(pieces)
        comment = answer.get("comment")
        if comment:
            if address:
                address += f" ({comment})"
            else:
                address = comment
        return address
    
    def _floor_word(self, levels: str) -> str:
        try:
            n = int(levels)
        except ValueError:
            # Not a whole number ("2-3", "5a"): fall back to the many form
            return self.locale.floor_forms[2]
        return levels_word(n, self.locale.floor_forms)


class KeyValueFormatter(AddressFormatter):
    name = "key_value"
    
    def format(self, answer: Mapping[str, str]) -> str:
        return "\n".join(f"{key} = {value}" for key, value in answer.items())


def get_formatter(mode: str = "composed", locale: str = "ru") -> AddressFormatter:
    """Select a formatting strategy by name"""
    if mode == ComposedAddressFormatter.name:
        if locale not in LOCALES:
            raise ValueError(f"Unknown locale {locale!r}, expected one of {', '.join(LOCALES)}")
        return ComposedAddressFormatter(locale)
    if mode == KeyValueFormatter.name:
        return KeyValueFormatter()
    raise ValueError(f"Unknown format mode {mode!r}, expected 'composed' or 'key_value'")

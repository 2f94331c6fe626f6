"""Heuristic requisite matcher.

Fills placeholders from free-text requisite lines (company details, bank
details, personal data) using per-field recognition patterns. Matching is
first-fit: placeholders are handled in order and each takes the first
unused line its rule accepts. Nothing is retried or reassigned.
"""

import logging
import re
from dataclasses import dataclass, field

from docprep.interfaces.requisites import BaseRequisiteMatcher
from docprep.strategies.requisites.normalizers import (
    is_plate_key,
    looks_like_plate,
    normalize_plate,
)
from docprep.strategies.template_engine.models import PlaceholderToken, RequisiteLine

logger = logging.getLogger(__name__)

FULL_NAME_KEY = "имя"
SHORT_NAME_KEY = "имякратко"

FULL_NAME_PATTERN = re.compile(r"[А-ЯЁ][а-яё]+ [А-ЯЁ][а-яё]+ [А-ЯЁ][а-яё]+")
SHORT_NAME_PATTERN = re.compile(r"(?<!\w)[А-ЯЁ][а-яё]+\s[А-ЯЁ]\.(?:\s?[А-ЯЁ]\.)?")


@dataclass(frozen=True)
class FieldRule:
    """Recognition rule for one requisite field.

    Attributes:
        pattern: Regex searched in each line.
        extract: Use the matched span as the value; otherwise the whole
            line is taken.
    """

    pattern: re.Pattern
    extract: bool = True


FIELD_RULES: dict[str, FieldRule] = {
    "имя": FieldRule(FULL_NAME_PATTERN),
    "имякратко": FieldRule(FULL_NAME_PATTERN),
    "название": FieldRule(re.compile(r'"[^"]*[A-ZА-ЯЁ][^"]*"'), extract=False),
    "огрнип": FieldRule(re.compile(r"\b\d{15}\b")),
    "огрн": FieldRule(re.compile(r"\b\d{13}\b")),
    "инн": FieldRule(re.compile(r"\b\d{12}\b")),
    "инно": FieldRule(re.compile(r"\b\d{10}\b")),
    "бик": FieldRule(re.compile(r"\b04\d{7}\b")),
    "кпп": FieldRule(re.compile(r"\b\d{9}\b")),
    "снилс": FieldRule(re.compile(r"\b\d{3}-\d{3}-\d{3} \d{2}\b")),
    "расчетныйсчет": FieldRule(re.compile(r"\b40\d{18}\b")),
    "коррсчет": FieldRule(re.compile(r"\b30\d{18}\b")),
    "адрес": FieldRule(re.compile(r"(?=.*\d)(?=.*[a-zA-Zа-яА-ЯёЁ])(?=.*[.,]).*"), extract=False),
    "наименованиебанка": FieldRule(re.compile(r"(?=.*банк)(?=.*в)", re.IGNORECASE), extract=False),
    "имейл": FieldRule(re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")),
}


def find_rule(key: str) -> FieldRule | None:
    """Look up the rule for a lower-cased placeholder key.

    An exact key wins; otherwise the longest rule key contained in
    ``key`` is used (``иннзаказчика`` -> ``инн``).
    """
    if key in FIELD_RULES:
        return FIELD_RULES[key]
    contained = [name for name in FIELD_RULES if name in key]
    if not contained:
        return None
    return FIELD_RULES[max(contained, key=len)]


@dataclass(frozen=True)
class PersonNames:
    """Person names found among the lines, with the raw line each came from."""

    full: str | None
    short: str | None
    full_line: str | None = None
    short_line: str | None = None


def find_person_names(requisites: list[RequisiteLine]) -> PersonNames:
    """Find the first full name and short name among the lines.

    When no short form like ``Иванов И.И.`` is present, it is derived from
    the full name as ``Surname I.P.``.
    """
    full = short = full_line = short_line = None
    for line in requisites:
        if full is None:
            match = FULL_NAME_PATTERN.search(line.value)
            if match:
                full, full_line = match.group(0), line.value
        if short is None:
            match = SHORT_NAME_PATTERN.search(line.value)
            if match:
                short, short_line = match.group(0), line.value

    if short is None and full is not None:
        parts = full.split(" ")
        if len(parts) == 3:
            last, first, middle = parts
            short = f"{last} {first[0]}.{middle[0]}."
            short_line = full_line
    return PersonNames(full=full, short=short, full_line=full_line, short_line=short_line)


@dataclass
class MatchResult:
    """Outcome of one matching pass.

    Attributes:
        placeholders: Tokens in input order, matched ones with new values.
        used_values: Raw lines and values consumed so far.
        matched: Assigned values by placeholder name.
        unmatched: Names left with their previous value.
    """

    placeholders: list[PlaceholderToken]
    used_values: set[str] = field(default_factory=set)
    matched: dict[str, str] = field(default_factory=dict)
    unmatched: list[str] = field(default_factory=list)


class RequisiteMatcher(BaseRequisiteMatcher):
    """Assigns requisite lines to placeholders by field-specific patterns."""

    def match(
        self,
        placeholders: list[PlaceholderToken],
        requisites: list[RequisiteLine],
        used_values: set[str] | None = None,
    ) -> MatchResult:
        """Fill placeholders from requisite lines.

        Args:
            placeholders: Tokens to fill, processed in order.
            requisites: Candidate lines; earlier lines win.
            used_values: Values consumed by a previous pass. Updated in
                place and returned in the result.

        Returns:
            MatchResult with updated copies of the placeholders.
        """
        used = used_values if used_values is not None else set()
        result = MatchResult(placeholders=[], used_values=used)
        names: PersonNames | None = None

        for placeholder in placeholders:
            key = placeholder.name.strip().lower()
            value = None

            if key in (FULL_NAME_KEY, SHORT_NAME_KEY):
                if names is None:
                    names = find_person_names(requisites)
                if key == FULL_NAME_KEY:
                    value, line = names.full, names.full_line
                else:
                    value, line = names.short, names.short_line
                if value is not None and value in used:
                    value = None
                elif value is not None:
                    used.update((value, line))

            if value is None and is_plate_key(key):
                value = self._match_plate(requisites, used)
            elif value is None:
                value = self._match_rule(key, requisites, used)

            if value is None:
                result.unmatched.append(placeholder.name)
                result.placeholders.append(placeholder)
                continue

            result.matched[placeholder.name] = value
            result.placeholders.append(placeholder.model_copy(update={"value": value}))

        logger.info(
            f"Matched {len(result.matched)} of {len(placeholders)} placeholders "
            f"from {len(requisites)} requisite lines"
        )
        return result

    @staticmethod
    def _match_plate(requisites: list[RequisiteLine], used: set[str]) -> str | None:
        for line in requisites:
            raw = line.value
            if raw in used or not looks_like_plate(raw):
                continue
            normalized = normalize_plate(raw.strip())
            if normalized in used:
                continue
            used.update((raw, normalized))
            return normalized
        return None

    @staticmethod
    def _match_rule(key: str, requisites: list[RequisiteLine], used: set[str]) -> str | None:
        rule = find_rule(key)
        if rule is None:
            return None

        for line in requisites:
            raw = line.value
            if raw in used:
                continue
            match = rule.pattern.search(raw)
            if match is None:
                continue
            value = match.group(0).strip() if rule.extract else raw.strip()
            if not value or value in used:
                continue
            used.update((raw, value))
            return value
        return None

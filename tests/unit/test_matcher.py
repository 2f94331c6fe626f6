"""Unit tests for the requisite matcher."""

import pytest

from docprep.strategies.requisites.matcher import (
    FIELD_RULES,
    RequisiteMatcher,
    find_person_names,
    find_rule,
)
from docprep.strategies.template_engine.models import PlaceholderToken, RequisiteLine


def lines(*values: str) -> list[RequisiteLine]:
    return [RequisiteLine(id=i, value=v) for i, v in enumerate(values)]


def tokens(*names: str) -> list[PlaceholderToken]:
    return [PlaceholderToken(name=n) for n in names]


class TestFindRule:
    """Test suite for field rule lookup."""

    def test_exact_key(self):
        assert find_rule("огрн") is FIELD_RULES["огрн"]
        assert find_rule("огрнип") is FIELD_RULES["огрнип"]

    def test_longest_contained_key(self):
        assert find_rule("огрнипзаказчика") is FIELD_RULES["огрнип"]
        assert find_rule("иннисполнителя") is FIELD_RULES["инн"]

    def test_unknown_key(self):
        assert find_rule("номердоговора") is None


class TestFindPersonNames:
    def test_short_name_derived_from_full(self):
        names = find_person_names(lines("Директор: Иванов Иван Иванович"))

        assert names.full == "Иванов Иван Иванович"
        assert names.short == "Иванов И.И."
        assert names.full_line == names.short_line == "Директор: Иванов Иван Иванович"

    def test_explicit_short_name_wins(self):
        names = find_person_names(lines("Иванов Иван Иванович", "Подпись: Петров П.С."))
        assert names.short == "Петров П.С."
        assert names.full_line == "Иванов Иван Иванович"
        assert names.short_line == "Подпись: Петров П.С."

    def test_no_names(self):
        names = find_person_names(lines("ИНН 123456789012"))
        assert names.full is None and names.short is None


class TestRequisiteMatcher:
    """Test suite for RequisiteMatcher."""

    @pytest.fixture
    def matcher(self):
        return RequisiteMatcher()

    def test_identifier_and_plate(self, matcher):
        """Test that digit codes take the span and plates are normalized."""
        result = matcher.match(tokens("инн", "госномер"), lines("ИНН 123456789012", "A123BC77"))

        assert result.matched == {"инн": "123456789012", "госномер": "А123ВС77"}
        assert result.unmatched == []
        assert {"ИНН 123456789012", "123456789012", "A123BC77", "А123ВС77"} <= result.used_values

    def test_same_line_is_not_assigned_twice(self, matcher):
        result = matcher.match(
            tokens("иннзаказчика", "иннисполнителя"),
            lines("ИНН 123456789012", "ИНН 210987654321"),
        )
        assert result.matched == {
            "иннзаказчика": "123456789012",
            "иннисполнителя": "210987654321",
        }

    def test_unmatched_placeholder_keeps_value(self, matcher):
        placeholders = [PlaceholderToken(name="номер", value="17"), PlaceholderToken(name="бик")]
        result = matcher.match(placeholders, lines("нет данных"))

        assert result.unmatched == ["номер", "бик"]
        assert result.placeholders[0].value == "17"

    def test_input_tokens_are_not_mutated(self, matcher):
        placeholders = tokens("инн")
        matcher.match(placeholders, lines("123456789012"))
        assert placeholders[0].value == ""

    def test_names(self, matcher):
        result = matcher.match(tokens("имякратко", "имя"), lines("Ген. директор Сидоров Пётр Олегович"))
        assert result.matched == {"имякратко": "Сидоров П.О.", "имя": "Сидоров Пётр Олегович"}

    def test_name_consumes_its_line(self, matcher):
        requisites = lines('Директор ООО "Ромашка" Иванов Иван Иванович')
        result = matcher.match(tokens("имя", "название"), requisites)

        assert result.matched == {"имя": "Иванов Иван Иванович"}
        assert result.unmatched == ["название"]
        assert requisites[0].value in result.used_values

    def test_case_insensitive_keys(self, matcher):
        result = matcher.match(tokens("ИНН"), lines("123456789012"))
        assert result.matched == {"ИНН": "123456789012"}

    def test_descriptive_fields_take_whole_line(self, matcher):
        result = matcher.match(
            tokens("название", "адрес", "наименованиебанка"),
            lines(
                'ООО "Ромашка"',
                "г. Москва, ул. Ленина, д. 1",
                "ПАО Сбербанк в г. Москва",
            ),
        )
        assert result.matched == {
            "название": 'ООО "Ромашка"',
            "адрес": "г. Москва, ул. Ленина, д. 1",
            "наименованиебанка": "ПАО Сбербанк в г. Москва",
        }

    def test_bank_codes_and_accounts(self, matcher):
        result = matcher.match(
            tokens("бик", "расчетныйсчет", "коррсчет", "снилс", "имейл"),
            lines(
                "БИК 044525225",
                "Р/с 40702810900000000001",
                "К/с 30101810400000000225",
                "СНИЛС 123-456-789 01",
                "E-mail: info@romashka.ru",
            ),
        )
        assert result.matched == {
            "бик": "044525225",
            "расчетныйсчет": "40702810900000000001",
            "коррсчет": "30101810400000000225",
            "снилс": "123-456-789 01",
            "имейл": "info@romashka.ru",
        }

    def test_first_fit_without_backtracking(self, matcher):
        """Test that an earlier placeholder keeps the line a later one needed."""
        result = matcher.match(tokens("кпп", "бик"), lines("044525225"))

        assert result.matched == {"кпп": "044525225"}
        assert result.unmatched == ["бик"]

    def test_used_values_carry_over(self, matcher):
        used: set[str] = set()
        first = matcher.match(tokens("инн"), lines("123456789012"), used)
        second = matcher.match(tokens("инн"), lines("123456789012"), used)

        assert first.matched == {"инн": "123456789012"}
        assert second.unmatched == ["инн"]
        assert second.used_values is used

    def test_plate_not_taken_twice(self, matcher):
        result = matcher.match(tokens("госномер", "госномерприцепа"), lines("А123ВС77", "a123bc77"))

        assert result.matched == {"госномер": "А123ВС77"}
        assert result.unmatched == ["госномерприцепа"]

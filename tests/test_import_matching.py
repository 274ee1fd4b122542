from types import SimpleNamespace

import pytest

from app.api.v1.imports.matching import ReferenceResolver, match_by_key, normalize_name


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("Ahmed Ben Ali", "ahmed ben ali"),
        ("  ahmed   BEN\tali ", "ahmed ben ali"),
        ("Matière", "matiere"),
        ("Éléonore Noël", "eleonore noel"),
        ("STRASSE", "strasse"),
        ("", ""),
        (None, ""),
    ],
)
def test_normalize_name(raw, expected):
    assert normalize_name(raw) == expected


def test_normalized_names_compare_equal_across_spellings():
    assert normalize_name("Sciences Naturelles") == normalize_name("sciences  naturelles")
    assert normalize_name("Français") == normalize_name("FRANCAIS")


def test_match_by_key_returns_first_of_duplicates():
    first = SimpleNamespace(id=1, name="Math")
    second = SimpleNamespace(id=2, name="MATH")
    assert match_by_key([first, second], "math") is first
    assert match_by_key([first, second], "physics") is None


def test_match_by_key_custom_key():
    events = [SimpleNamespace(title="Exam", day="2024-06-01"), SimpleNamespace(title="Exam", day="2024-06-02")]
    found = match_by_key(events, ("exam", "2024-06-02"), key=lambda e: (normalize_name(e.title), e.day))
    assert found is events[1]


class TestReferenceResolver:
    def setup_method(self):
        self.math = SimpleNamespace(id=1, name="Math")
        self.math_dup = SimpleNamespace(id=2, name="math")
        self.physics = SimpleNamespace(id=3, name="Physique")
        self.resolver = ReferenceResolver("subject", [self.math, self.math_dup, self.physics])

    def test_resolve_is_approximate(self):
        errors = []
        assert self.resolver.resolve("  MATH ", errors) is self.math
        assert self.resolver.resolve("physique", errors) is self.physics
        assert errors == []

    def test_unknown_reference_is_reported(self):
        errors = []
        assert self.resolver.resolve("Chemistry", errors) is None
        assert errors == ["Unknown subject: Chemistry"]

    def test_blank_optional_reference(self):
        errors = []
        assert self.resolver.resolve("", errors) is None
        assert errors == []

    def test_blank_required_reference(self):
        errors = []
        assert self.resolver.resolve("", errors, required=True) is None
        assert errors == ["Subject is required"]

    def test_resolve_many_reports_all_missing_in_one_message(self):
        errors = []
        found = self.resolver.resolve_many(["Math", "Chemistry", "Physique", "Biology"], errors)
        assert found == [self.math, self.physics]
        assert errors == ["Unknown subject: Chemistry, Biology"]

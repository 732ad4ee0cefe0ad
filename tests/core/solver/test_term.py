"""Tests for Term parsing, combination and the three-valued relation."""

from __future__ import annotations

import pytest

from pubgrub.core.solver import Term, TermRelation
from pubgrub.core.version import Version, VersionSet, parse_constraint
from pubgrub.exceptions import ConstraintParseError


def t(text: str) -> Term:
    return Term.parse(text)


class TestTermParse:
    """Tests for ``Term.parse``."""

    def test_positive(self) -> None:
        term = t("foo ^1.0.0")
        assert term.package == "foo"
        assert term.positive is True
        assert term.versions == VersionSet.caret(Version(1, 0, 0))

    def test_negative(self) -> None:
        term = t("not foo 1.0.0")
        assert term.positive is False
        assert term.versions == VersionSet.exact(Version(1, 0, 0))

    def test_missing_constraint_means_any(self) -> None:
        assert t("foo").versions.is_universal()

    def test_compound_constraint(self) -> None:
        assert t("foo >=1.0.0, <2.0.0").versions == parse_constraint(">=1.0.0, <2.0.0")

    def test_bad_constraint_rejected(self) -> None:
        with pytest.raises(ConstraintParseError):
            t("foo latest")

    def test_empty_rejected(self) -> None:
        with pytest.raises(ConstraintParseError):
            t("   ")

    def test_str(self) -> None:
        assert str(t("not foo 1.0.0")) == "not foo 1.0.0"
        assert str(t("foo")) == "foo *"


class TestTermIntersect:
    """The four polarity cases of ``Term.intersect``."""

    def test_positive_positive(self) -> None:
        assert t("foo >=1.0.0").intersect(t("foo <2.0.0")) == t("foo >=1.0.0, <2.0.0")

    def test_positive_negative(self) -> None:
        result = t("foo ^1.0.0").intersect(t("not foo 1.0.0"))
        assert result.positive
        assert Version(1, 0, 0) not in result.versions
        assert Version(1, 5, 0) in result.versions

    def test_negative_positive(self) -> None:
        result = t("not foo 1.0.0").intersect(t("foo ^1.0.0"))
        assert result == t("foo ^1.0.0").intersect(t("not foo 1.0.0"))

    def test_negative_negative_is_union(self) -> None:
        result = t("not foo 1.0.0").intersect(t("not foo 2.0.0"))
        assert result.positive is False
        assert result.versions == parse_constraint("1.0.0").union(parse_constraint("2.0.0"))

    def test_different_packages_rejected(self) -> None:
        with pytest.raises(ValueError):
            t("foo").intersect(t("bar"))

    def test_negate_round_trip(self) -> None:
        term = t("foo ^1.0.0")
        assert term.negate().negate() == term
        assert term.negate().positive is False


class TestTermDifference:
    """Tests for ``Term.difference``."""

    def test_nothing_left_is_none(self) -> None:
        assert t("foo ^1.0.0").difference(t("foo >=1.0.0")) is None

    def test_remainder(self) -> None:
        assert t("foo >=1.0.0").difference(t("foo ^1.0.0")) == t("foo >=2.0.0")

    def test_negative_remainder_is_kept(self) -> None:
        result = t("not foo 1.0.0").difference(t("foo ^2.0.0"))
        assert result is not None
        assert result.positive is False


class TestTermRelation:
    """Each row of the relation table."""

    @pytest.mark.parametrize(
        ("known", "other", "expected"),
        [
            # positive / positive
            ("foo ^1.0.0", "foo >=1.0.0", TermRelation.SATISFIES),
            ("foo ^1.0.0", "foo ^2.0.0", TermRelation.CONTRADICTS),
            ("foo >=1.0.0", "foo ^1.0.0", TermRelation.INCONCLUSIVE),
            # positive / negative
            ("foo ^1.0.0", "not foo ^2.0.0", TermRelation.SATISFIES),
            ("foo 1.0.0", "not foo ^1.0.0", TermRelation.CONTRADICTS),
            ("foo ^1.0.0", "not foo 1.0.0", TermRelation.INCONCLUSIVE),
            # negative / positive
            ("not foo ^1.0.0", "foo 1.0.0", TermRelation.CONTRADICTS),
            ("not foo 1.0.0", "foo ^1.0.0", TermRelation.INCONCLUSIVE),
            ("not foo ^1.0.0", "foo ^2.0.0", TermRelation.INCONCLUSIVE),
            # negative / negative
            ("not foo ^1.0.0", "not foo 1.0.0", TermRelation.SATISFIES),
            ("not foo 1.0.0", "not foo ^1.0.0", TermRelation.INCONCLUSIVE),
        ],
    )
    def test_relation(self, known: str, other: str, expected: TermRelation) -> None:
        assert t(known).relation(t(other)) is expected

    def test_negative_never_satisfies_positive(self) -> None:
        """``not foo 1.0.0`` still allows foo to be unselected."""
        assert t("not foo 1.0.0").relation(t("foo *")) is TermRelation.INCONCLUSIVE

    def test_satisfies_helper(self) -> None:
        assert t("foo 1.0.0").satisfies(t("foo ^1.0.0"))
        assert not t("foo ^1.0.0").satisfies(t("foo 1.0.0"))

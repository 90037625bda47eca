"""Tests for the rewriting step and the engine's incremental history."""

import pytest

import lsys_engine
from lsys_engine import LSystem, LSystemState, lsys_reconcile, lsys_step
from lsys_rules import Rule


def _generations(axiom, rules, count):
    out = []
    s = axiom
    for _ in range(count):
        s = lsys_step(s, rules)
        out.append(s)
    return out


def test_simple_generate() -> None:
    rules = [Rule("a", "B")]
    assert _generations("a", rules, 2) == ["B", "B"]


def test_multiple_application_of_one_rule() -> None:
    assert lsys_step("aa", [Rule("a", "b")]) == "bb"


def test_multi_char_predecessor() -> None:
    assert lsys_step("ab", [Rule("ab", "C")]) == "C"


def test_recursive_generate() -> None:
    assert _generations("a", [Rule("a", "aB")], 3) == ["aB", "aBB", "aBBB"]


def test_analytical_expansion() -> None:
    assert _generations("Y", [Rule("Y", "XYX")], 3) == ["XYX", "XXYXX", "XXXYXXX"]


def test_two_rule_expansion() -> None:
    rules = [Rule("A", "AB"), Rule("B", "A")]
    assert _generations("B", rules, 5) == ["A", "AB", "ABA", "ABAAB", "ABAABABA"]


def test_rules_apply_in_order_within_a_step() -> None:
    """Text produced by an earlier rule is not rewritten again in the same step."""
    rules = [Rule("a", "aC"), Rule("aC", "CC")]
    assert lsys_step("aB", rules) == "aCB"


def test_earlier_rule_wins_overlap() -> None:
    rules = [Rule("ab", "X"), Rule("b", "Y")]
    assert lsys_step("abb", rules) == "XY"


def test_rule_that_never_matches_is_a_no_op() -> None:
    assert lsys_step("F[+F]X", [Rule("Q", "QQ")]) == "F[+F]X"


def test_no_rules() -> None:
    assert lsys_step("FX", []) == "FX"


def test_predecessor_is_literal_text() -> None:
    assert lsys_step("F+F", [Rule("+", "-")]) == "F-F"
    assert lsys_step("F+F", [Rule(".", "X")]) == "F+F"
    assert lsys_step("F[F]", [Rule("[F]", "G")]) == "FG"


def test_empty_predecessor_never_matches() -> None:
    assert lsys_step("F", [Rule("", "X")]) == "F"


def test_whitespace_is_stripped() -> None:
    assert lsys_step("F F", [Rule("F", "G")]) == "GG"
    assert lsys_step(" F\tF ", []) == "FF"


def test_attribute_round_trip() -> None:
    rules = [Rule("F(i=0.1)", "F(i=0.2)")]
    assert _generations("F(i=0.1)", rules, 2) == ["F(i=0.2)", "F(i=0.2)"]


def test_attribute_greater_than() -> None:
    assert lsys_step("F(i=0.1)", [Rule("F(i>0)", "F(i=0.2)")]) == "F(i=0.2)"


def test_conditional_gated_arithmetic() -> None:
    assert lsys_step("F(i=0.1)", [Rule("F(i>0)", "F(i+0.1)")]) == "F(i=0.2)"


def test_failed_conditional_skips_match() -> None:
    rules = [Rule("F(i>1)", "G")]
    assert lsys_step("F(i=0)F(i=2)", rules) == "F(i=0)G"


def test_attribute_dropped_without_arithmetic() -> None:
    assert lsys_step("F(i=1)", [Rule("F", "G")]) == "G"


def test_bare_symbol_ignores_conditional() -> None:
    assert lsys_step("F", [Rule("F(i>0)", "G")]) == "G"


def test_unclosed_bracket_rejects_match() -> None:
    assert lsys_step("F(i=1", [Rule("F", "G")]) == "F(i=1"


def test_attribute_overlapping_earlier_rewrite_is_skipped() -> None:
    rules = [Rule("i", "j"), Rule("A", "B")]
    assert lsys_step("A(i=1)", rules) == "A(j=1)"


def test_parametric_stem_terminates() -> None:
    rules = [Rule("A(n>4)", "F"), Rule("A", "FA(n+1)")]
    gens = _generations("A(n=0)", rules, 7)
    assert gens[0] == "FA(n=1)"
    assert gens[4] == "FFFFFA(n=5)"
    assert gens[5] == "FFFFFF"
    assert gens[6] == "FFFFFF"


def test_default_engine() -> None:
    lsys = LSystem()
    assert lsys.axiom == "F"
    assert lsys.angle == 15
    assert lsys.rules == [Rule("F", "F[+F]F[-F]F[/F]F[*F]")]
    assert lsys.step_count == 3
    assert len(lsys.results) == 4
    assert lsys.results[0] == "F"
    assert lsys.results[1] == "F[+F]F[-F]F[/F]F[*F]"
    assert lsys.result == lsys.results[-1]
    assert lsys.result.count("F") == 8 ** 3


def test_state_property() -> None:
    lsys = LSystem("Y", [Rule("Y", "XYX")], 90)
    assert lsys.state == LSystemState("Y", [Rule("Y", "XYX")], 90, 3)


@pytest.fixture
def counted_steps(monkeypatch):
    """Record every call the engine makes to lsys_step."""
    calls = []
    real_step = lsys_engine.lsys_step

    def step(lstring, rules):
        calls.append(lstring)
        return real_step(lstring, rules)

    monkeypatch.setattr(lsys_engine, "lsys_step", step)
    return calls


def test_reconcile_shrink_truncates_without_stepping(counted_steps) -> None:
    lsys = LSystem("Y", [Rule("Y", "XYX")], 90)
    lsys.set_state(LSystemState("Y", [Rule("Y", "XYX")], 90, 5))
    assert lsys.step_count == 5
    kept = lsys.results[:3]
    del counted_steps[:]

    lsys.set_state(LSystemState("Y", [Rule("Y", "XYX")], 90, 2))

    assert counted_steps == []
    assert len(lsys.results) == 3
    assert all(a is b for a, b in zip(lsys.results, kept))
    assert lsys.result == "XXYXX"


def test_reconcile_grow_extends_history(counted_steps) -> None:
    lsys = LSystem("Y", [Rule("Y", "XYX")], 90)
    before = list(lsys.results)
    del counted_steps[:]

    lsys.set_state(LSystemState("Y", [Rule("Y", "XYX")], 90, 5))

    assert len(counted_steps) == 2
    assert counted_steps[0] == before[-1]
    assert all(a is b for a, b in zip(lsys.results, before))
    assert len(lsys.results) == 6
    assert lsys.result == "XXXXXYXXXXX"


def test_reconcile_unchanged_does_nothing(counted_steps) -> None:
    lsys = LSystem()
    before = list(lsys.results)
    del counted_steps[:]

    lsys.set_state(lsys.state)

    assert counted_steps == []
    assert lsys.results == before


@pytest.mark.parametrize(
    "axiom, rules, angle",
    [
        ("F", [Rule("F", "F[+F]F[-F]F[/F]F[*F]")], 30),
        ("FF", [Rule("F", "F[+F]F[-F]F[/F]F[*F]")], 15),
        ("F", [Rule("F", "FF")], 15),
        ("F", [Rule("F", "F[+F]F[-F]F[/F]F[*F]"), Rule("X", "F")], 15),
        ("F", [], 15),
    ],
)
def test_reconcile_recomputes_on_config_change(counted_steps, axiom, rules, angle) -> None:
    lsys = LSystem()
    del counted_steps[:]

    lsys_reconcile(lsys, axiom, rules, angle, 2)

    assert len(counted_steps) == 2
    assert counted_steps[0] == axiom
    assert lsys.axiom == axiom
    assert lsys.rules == rules
    assert lsys.angle == angle
    assert lsys.results == [axiom] + _generations(axiom, rules, 2)


def test_reconcile_to_zero_steps() -> None:
    lsys = LSystem()
    lsys.set_state(LSystemState("FX", [Rule("X", "F")], 15, 0))
    assert lsys.results == ["FX"]
    assert lsys.result == "FX"
    assert lsys.step_count == 0


def test_reconcile_negative_step_count_is_clamped() -> None:
    lsys = LSystem()
    lsys.set_state(LSystemState("F", lsys.rules, lsys.angle, -2))
    assert lsys.results == ["F"]


def test_incremental_path_keeps_new_rules_object() -> None:
    lsys = LSystem("Y", [Rule("Y", "XYX")], 90)
    new_rules = [Rule("Y", "XYX")]
    lsys.set_state(LSystemState("Y", new_rules, 90, 4))
    assert lsys.rules == new_rules
    assert lsys.results[-1] == "XXXXYXXXX"


def test_reconcile_accepts_text_pairs() -> None:
    from_pairs = LSystem()
    from_pairs.set_state(LSystemState("F", [("F", "FF"), ("X(i>0)", "X(i+1)")], 15, 2))

    from_rules = LSystem()
    from_rules.set_state(LSystemState("F", [Rule("F", "FF"), Rule("X(i>0)", "X(i+1)")], 15, 2))

    assert from_pairs.rules == [Rule("F", "FF"), Rule("X(i>0)", "X(i+1)")]
    assert all(isinstance(rule, Rule) for rule in from_pairs.rules)
    assert from_pairs.results == from_rules.results == ["F", "FF", "FFFF"]


def test_engine_constructor_accepts_text_pairs() -> None:
    lsys = LSystem("Y", [("Y", "XYX")], 90)
    assert lsys.rules == [Rule("Y", "XYX")]
    assert lsys.result == "XXXYXXX"

"""test_fmt.py — Number formatting used by the HUD and the logs.

Run: python test_fmt.py      (or: pytest test_fmt.py)
"""
from __future__ import annotations
import sys, traceback

from core.fmt import format_number, format_delta, INFINITY_SENTINEL

passed = 0
failed = 0


def ok(label: str):
    global passed
    passed += 1
    print(f"  [PASS] {label}")


def fail(label: str, detail: str = ""):
    global failed
    failed += 1
    print(f"  [FAIL] {label}")
    if detail:
        for line in detail.strip().splitlines():
            print(f"         {line}")


# ════════════════════════════════════════════════════════════════════════
#  Small values
# ════════════════════════════════════════════════════════════════════════

def test_small_values_round_to_integers():
    assert format_number(0) == "0"
    assert format_number(12.4) == "12"
    assert format_number(12.6) == "13"
    assert format_number(9999) == "9999"
    assert format_number(-42.2) == "-42"
    ok("Values below 10 000 print as integers")


# ════════════════════════════════════════════════════════════════════════
#  Suffixes
# ════════════════════════════════════════════════════════════════════════

def test_large_values_use_suffixes():
    assert format_number(10_000) == "10.00K"
    assert format_number(15_300) == "15.30K"
    assert format_number(1_234_567) == "1.23M"
    assert format_number(2_500_000_000) == "2.50B"
    assert format_number(-15_300) == "-15.30K"
    ok("Large values scale to K / M / B with two decimals")


def test_huge_values_stop_at_last_suffix():
    assert format_number(1e36) == "1000.00Dc"
    ok("Values past the table reuse the largest suffix")


# ════════════════════════════════════════════════════════════════════════
#  Non-finite input
# ════════════════════════════════════════════════════════════════════════

def test_non_finite_renders_infinity():
    assert format_number(float("nan")) == INFINITY_SENTINEL
    assert format_number(float("inf")) == INFINITY_SENTINEL
    assert format_number(float("-inf")) == INFINITY_SENTINEL
    assert format_number("lots") == INFINITY_SENTINEL
    assert format_number(None) == INFINITY_SENTINEL
    ok("NaN, infinities and junk render as ∞")


def test_format_delta():
    assert format_delta(1.5) == "+1.5"
    assert format_delta(-0.5) == "-0.5"
    assert format_delta(0) == "+0.0"
    assert format_delta(float("nan")) == INFINITY_SENTINEL
    ok("Signed deltas keep one decimal")


if __name__ == "__main__":
    SECTIONS = [
        ("Small values", test_small_values_round_to_integers),
        ("Suffixes", test_large_values_use_suffixes),
        ("Suffix ceiling", test_huge_values_stop_at_last_suffix),
        ("Non-finite input", test_non_finite_renders_infinity),
        ("Deltas", test_format_delta),
    ]
    for title, fn in SECTIONS:
        print(f"\n=== {title} ===")
        try:
            fn()
        except AssertionError:
            fail(title, traceback.format_exc())
        except Exception:
            failed += 1
            print(f"  [CRASH] {title}")
            traceback.print_exc()

    print(f"\n{'═' * 50}")
    print(f"  Results: {passed} passed, {failed} failed")
    print(f"{'═' * 50}")
    sys.exit(1 if failed else 0)

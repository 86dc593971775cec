import pytest

from ua_rules import Capture, Fixed, Key, Remap, Rewrite, Rule, match


WINDOWS = {
    "XP": ["NT 5.1", "NT 5.2"],
    "7": ["NT 6.1"],
    "10": ["NT 6.4", "NT 10.0"],
}


def apply(extractor, text):
    fields = {}
    extractor.apply(fields, text)
    return fields


def test_capture_trims() -> None:
    assert apply(Capture(Key.NAME), "  Firefox \n") == {Key.NAME: "Firefox"}


@pytest.mark.parametrize("text", [None, "", "   ", "\t\n"])
def test_capture_ignores_blank(text) -> None:
    assert apply(Capture(Key.NAME), text) == {}


@pytest.mark.parametrize("text", [None, "", "anything"])
def test_fixed_ignores_group(text) -> None:
    assert apply(Fixed(Key.VENDOR, "apple"), text) == {Key.VENDOR: "apple"}


def test_rewrite_replaces_then_lowercases() -> None:
    assert apply(Rewrite(Key.NAME, "_", " "), "Comodo_Dragon") == {Key.NAME: "comodo dragon"}


def test_rewrite_backreferences_own_groups() -> None:
    extractor = Rewrite(Key.NAME, r"(.+(?:g|us))(.+)/", r"\g<1> \g<2>")
    assert apply(extractor, "SamsungBrowser/") == {Key.NAME: "samsung browser"}


def test_rewrite_without_match_still_lowercases() -> None:
    assert apply(Rewrite(Key.ARCH, "ower", ""), " PPC ") == {Key.ARCH: "ppc"}


def test_rewrite_to_nothing_assigns_nothing() -> None:
    assert apply(Rewrite(Key.MODEL, ".+", ""), "gone") == {}


def test_rewrite_absent_group() -> None:
    assert apply(Rewrite(Key.VERSION, "_", "."), None) == {}


def test_rewrite_malformed_pattern_keeps_text() -> None:
    assert apply(Rewrite(Key.NAME, "(unclosed", "x"), "Some_Name") == {Key.NAME: "Some_Name"}


def test_rewrite_bad_template_keeps_text() -> None:
    assert apply(Rewrite(Key.NAME, "(a)", r"\g<3>"), "Banana") == {Key.NAME: "Banana"}


def test_rewrite_unknown_named_group_keeps_text() -> None:
    extractor = Rewrite(Key.NAME, "(a)", r"\g<missing>")
    assert apply(extractor, "Banana") == {Key.NAME: "Banana"}
    rule = Rule.compile(["(comodo_dragon)"], [extractor])
    assert match("Comodo_Dragon", [rule]) == {Key.NAME: "Comodo_Dragon"}


def test_remap_first_entry_wins() -> None:
    mapping = {"first": ["AB"], "second": ["ABC"]}
    assert apply(Remap(Key.VERSION, mapping), "xabcx") == {Key.VERSION: "first"}


def test_remap_is_case_insensitive_containment() -> None:
    assert apply(Remap(Key.VERSION, WINDOWS), "nt 6.1") == {Key.VERSION: "7"}
    assert apply(Remap(Key.VERSION, WINDOWS), "NT 10.0") == {Key.VERSION: "10"}
    assert apply(Remap(Key.VERSION, {"Fire Phone": ["sd"]}), "SD") == {Key.VERSION: "Fire Phone"}


def test_remap_falls_back_to_raw_text() -> None:
    assert apply(Remap(Key.VERSION, WINDOWS), "8.0 beta") == {Key.VERSION: "8.0 beta"}


@pytest.mark.parametrize("text", [None, ""])
def test_remap_empty_group_assigns_nothing(text) -> None:
    assert apply(Remap(Key.MODEL, {"Fire Phone": ["SD", "KF"]}), text) == {}


def test_rule_requires_patterns() -> None:
    with pytest.raises(ValueError):
        Rule.compile([], [Capture(Key.NAME)])


def test_rule_patterns_ignore_case() -> None:
    rule = Rule.compile([r"(chrome)\/([\w\.]+)"], [Capture(Key.NAME), Capture(Key.VERSION)])
    assert match("CHROME/1.2", [rule]) == {Key.NAME: "CHROME", Key.VERSION: "1.2"}


def test_first_alternative_wins_without_merging() -> None:
    rule = Rule.compile(
        [r"(foo)", r"(foo)\/(\d+)"],
        [Capture(Key.NAME), Capture(Key.VERSION)],
    )
    assert match("foo/42", [rule]) == {Key.NAME: "foo"}


def test_first_rule_wins() -> None:
    first = Rule.compile([r"(chrome)"], [Fixed(Key.NAME, "first")])
    second = Rule.compile([r"(chrome)\/(\d+)"], [Capture(Key.NAME), Capture(Key.VERSION)])
    assert match("Chrome/10", [first, second]) == {Key.NAME: "first"}
    assert match("Chrome/10", [second, first]) == {Key.NAME: "Chrome", Key.VERSION: "10"}


def test_extractors_beyond_groups_are_absent() -> None:
    rule = Rule.compile(
        [r"(mobile)"],
        [Capture(Key.TYPE), Capture(Key.VENDOR), Remap(Key.MODEL, {"x": ["MOBILE"]}), Fixed(Key.NAME, "n")],
    )
    assert match("a mobile b", [rule]) == {Key.TYPE: "mobile", Key.NAME: "n"}


def test_pattern_without_groups_supplies_no_text() -> None:
    rule = Rule.compile([r"crkey"], [Capture(Key.MODEL), Fixed(Key.VENDOR, "google")])
    assert match("CrKey armv7l", [rule]) == {Key.VENDOR: "google"}


def test_unparticipating_group_is_absent() -> None:
    rule = Rule.compile([r"(rekonq)\/?([\w\.]+)*"], [Capture(Key.NAME), Capture(Key.VERSION)])
    assert match("rekonq", [rule]) == {Key.NAME: "rekonq"}


def test_empty_field_map_keeps_scanning() -> None:
    empty = Rule.compile([r"(\s*)x"], [Capture(Key.NAME)])
    fallback = Rule.compile([r"x"], [Fixed(Key.NAME, "fallback")])
    assert match(" x", [empty, fallback]) == {Key.NAME: "fallback"}
    assert match(" x", [empty]) is None


def test_no_match() -> None:
    rule = Rule.compile([r"(chrome)"], [Capture(Key.NAME)])
    assert match("curl/7.64.1", [rule]) is None
    assert match("anything", []) is None


def test_match_returns_fresh_maps() -> None:
    rule = Rule.compile([r"(chrome)"], [Capture(Key.NAME)])
    first = match("chrome", [rule])
    first[Key.VERSION] = "mutated"
    assert match("chrome", [rule]) == {Key.NAME: "chrome"}


def test_extractors_and_rules_hash() -> None:
    assert hash(Remap(Key.MODEL, {"a": ["b"]})) == hash(Remap(Key.MODEL, {"a": ("b",)}))
    rule = Rule.compile([r"(nt [\d\.]+)"], [Remap(Key.VERSION, WINDOWS)])
    assert rule in {rule}

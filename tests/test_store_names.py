from store_names import DEFAULT_STORES, StoreNameNormalizer, normalize_store_name


def test_ah_alias_and_full_name_match():
    assert StoreNameNormalizer.normalize("AH") == "albert heijn"
    assert StoreNameNormalizer.normalize("Albert Heijn") == "albert heijn"
    assert StoreNameNormalizer.normalize("Albert Heijn XL") == "albert heijn"
    assert StoreNameNormalizer.same_store("AH", "albert heijn")


def test_ah_is_exact_match_only():
    assert StoreNameNormalizer.normalize("Aha Market") == "aha market"


def test_dekamarkt_variants():
    assert normalize_store_name("Deka") == "dekamarkt"
    assert normalize_store_name("DekaMarkt") == "dekamarkt"


def test_chain_substrings():
    assert normalize_store_name("Jumbo Foodmarkt") == "jumbo"
    assert normalize_store_name("ALDI Nord") == "aldi"
    assert normalize_store_name("Dirk van den Broek") == "dirk"


def test_unknown_name_falls_through_lowercased():
    assert normalize_store_name("  Spar City ") == "spar city"
    assert normalize_store_name("") == ""


def test_normalization_is_idempotent():
    for name in DEFAULT_STORES + ["AH", "Deka", "Spar"]:
        once = normalize_store_name(name)
        assert normalize_store_name(once) == once


def test_canonical_set_sorted_and_deduplicated():
    names = ["Jumbo", "AH", "Albert Heijn", "", "jumbo"]
    assert StoreNameNormalizer.canonical_set(names) == ["albert heijn", "jumbo"]

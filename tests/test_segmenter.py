from __future__ import annotations

import pytest

from storefront.catalog import Category
from storefront.segmenter import PRODUCT, TEXT, TextSegment, claim_spans, segment


def joined(segments):
    return "".join(item.text for item in segments)


def test_single_mention_splits_into_three_fragments(catalog):
    result = segment("Try the Aura Seamless Leggings today", catalog)

    assert result == [
        TextSegment(TEXT, "Try the "),
        TextSegment(PRODUCT, "Aura Seamless Leggings", "2"),
        TextSegment(TEXT, " today"),
    ]


def test_matching_ignores_case_but_keeps_original_text(catalog):
    result = segment("the ZEN flow yoga SET is lovely", catalog)

    products = [item for item in result if item.is_product]
    assert products == [TextSegment(PRODUCT, "ZEN flow yoga SET", "3")]


def test_repeated_mentions_and_several_products(catalog):
    text = (
        "Pair the Urban Oversized Blazer with the Midnight Silk Wrap Dress; "
        "the urban oversized blazer layers well."
    )
    result = segment(text, catalog)

    assert joined(result) == text
    assert [(item.text, item.product_id) for item in result if item.is_product] == [
        ("Urban Oversized Blazer", "4"),
        ("Midnight Silk Wrap Dress", "1"),
        ("urban oversized blazer", "4"),
    ]


def test_mention_at_boundaries_produces_no_empty_text(catalog):
    text = "Active Tech BodysuitActive Tech Bodysuit"
    result = segment(text, catalog)

    assert result == [
        TextSegment(PRODUCT, "Active Tech Bodysuit", "8"),
        TextSegment(PRODUCT, "Active Tech Bodysuit", "8"),
    ]


@pytest.mark.parametrize("text", ["", "No product names here at all."])
def test_text_without_mentions_is_a_single_plain_segment(catalog, text):
    assert segment(text, catalog) == [TextSegment(TEXT, text)]


def test_earlier_catalog_product_claims_nested_name(product_factory):
    long_name = product_factory("10", "Active Tech Bodysuit", Category.JUMPSUITS)
    short_name = product_factory("11", "Tech Bodysuit", Category.JUMPSUITS)

    result = segment("Grab the Active Tech Bodysuit or a Tech Bodysuit.", [long_name, short_name])

    assert [(item.text, item.product_id) for item in result if item.is_product] == [
        ("Active Tech Bodysuit", "10"),
        ("Tech Bodysuit", "11"),
    ]


def test_later_product_cannot_match_inside_claimed_span(product_factory):
    short_name = product_factory("11", "Tech Bodysuit")
    long_name = product_factory("10", "Active Tech Bodysuit")

    result = segment("Grab the Active Tech Bodysuit.", [short_name, long_name])

    assert result == [
        TextSegment(TEXT, "Grab the Active "),
        TextSegment(PRODUCT, "Tech Bodysuit", "11"),
        TextSegment(TEXT, "."),
    ]


def test_partial_word_matches_are_linked(product_factory):
    cap = product_factory("20", "Cap")

    result = segment("A capsule wardrobe", [cap])

    assert result == [
        TextSegment(TEXT, "A "),
        TextSegment(PRODUCT, "cap", "20"),
        TextSegment(TEXT, "sule wardrobe"),
    ]


def test_regex_metacharacters_in_names_are_literal(product_factory):
    odd = product_factory("30", "Tee (Limited) + More")

    result = segment("Try Tee (Limited) + More now, not Tee Limited More.", [odd])

    assert [item.text for item in result if item.is_product] == ["Tee (Limited) + More"]


def test_claims_never_overlap(catalog):
    text = "Satin Muse Slip Gown, Satin Muse Slip Gown and Celine Belted Jumpsuit"
    claims = claim_spans(text, catalog)

    for (_, end, _), (start, _, _) in zip(claims, claims[1:]):
        assert end <= start


@pytest.mark.parametrize(
    "text",
    [
        "Ethereal Lace Bralette Set and ethereal lace bralette set",
        "   leading spaces then Zen Flow Yoga Set",
        "Unicode ✨ Satin Muse Slip Gown ✨ sparkle",
        "Celine Belted JumpsuitCeline",
    ],
)
def test_concatenation_reproduces_input(catalog, text):
    assert joined(segment(text, catalog)) == text

"""Tests for revision request parsing."""

import pytest

from formal_photo_bot.config import BotConfig
from formal_photo_bot.domain.sessions import RevisionUpdate
from formal_photo_bot.services.revision_parser import (
    ParameterNormalizer,
    RevisionParser,
    is_valid_revision,
)


@pytest.fixture
def parser(bot_config: BotConfig) -> RevisionParser:
    return RevisionParser(bot_config)


def test_change_background_sets_only_background(parser: RevisionParser) -> None:
    update = parser.parse("change background to red")

    assert update.as_dict() == {"background_color": "red"}


def test_wear_black_shirt_sets_type_and_color(parser: RevisionParser) -> None:
    update = parser.parse("wear a black shirt")

    assert update.as_dict() == {
        "clothing_type": "formal shirt",
        "clothing_color": "black",
    }


def test_independent_fields_without_clothing_type(parser: RevisionParser) -> None:
    update = parser.parse("white background black shirt")

    assert update.background_color == "white"
    assert update.clothing_color == "black"
    assert update.clothing_type is None


@pytest.mark.parametrize(
    "text",
    ["", "hello there", "thanks, looks great!", "can you make it nicer?"],
)
def test_text_without_triggers_is_empty(parser: RevisionParser, text: str) -> None:
    update = parser.parse(text)

    assert update == RevisionUpdate()
    assert not is_valid_revision(update)


def test_none_text_is_empty(parser: RevisionParser) -> None:
    assert parser.parse(None) == RevisionUpdate()


def test_synonyms_are_normalized(parser: RevisionParser) -> None:
    update = parser.parse("Switch the backdrop to GREY and put on a navy blazer")

    assert update.background_color == "gray"
    assert update.clothing_type == "blazer"
    assert update.clothing_color == "navy blue"


def test_unknown_color_passes_through_lowercased(parser: RevisionParser) -> None:
    update = parser.parse("background: Turquoise")

    assert update.as_dict() == {"background_color": "turquoise"}


def test_generic_clothes_change_picks_garment(parser: RevisionParser) -> None:
    update = parser.parse("change clothes to a polo")

    assert update.as_dict() == {"clothing_type": "polo shirt"}


def test_clothes_color_change(parser: RevisionParser) -> None:
    update = parser.parse("change clothes to maroon")

    assert update.as_dict() == {"clothing_color": "maroon"}


def test_garment_color_phrase(parser: RevisionParser) -> None:
    update = parser.parse("suit in beige please")

    assert update.clothing_color == "beige"


def test_multi_word_garment_and_hyphen(parser: RevisionParser) -> None:
    assert parser.parse("wear a white t-shirt").as_dict() == {
        "clothing_type": "t-shirt",
        "clothing_color": "white",
    }
    assert parser.parse("wear a dress shirt").clothing_type == "formal shirt"


def test_all_three_fields(parser: RevisionParser) -> None:
    update = parser.parse("blue background and wear a black suit")

    assert update.as_dict() == {
        "background_color": "blue",
        "clothing_type": "suit jacket",
        "clothing_color": "black",
    }


def test_lexicons_come_from_config() -> None:
    config = BotConfig(
        color_lexicon={"merah": "red"},
        clothing_lexicon={"kemeja": "formal shirt"},
    )
    parser = RevisionParser(config)

    update = parser.parse("merah background, wear kemeja")

    assert update.background_color == "red"
    assert update.clothing_type == "formal shirt"


def test_normalizer(bot_config: BotConfig) -> None:
    normalizer = ParameterNormalizer(bot_config)

    assert normalizer.color("  Crimson ") == "red"
    assert normalizer.color("teal") == "teal"
    assert normalizer.clothing_type("Jacket") == "suit jacket"
    assert normalizer.is_clothing_noun("polo")
    assert not normalizer.is_clothing_noun("red")


@pytest.mark.parametrize(
    ("text", "color"),
    [
        ("make the shirt black", "black"),
        ("turn my suit navy", "navy blue"),
        ("white background shirt black", "black"),
    ],
)
def test_garment_followed_by_color(
    parser: RevisionParser, text: str, color: str
) -> None:
    update = parser.parse(text)

    assert update.clothing_color == color
    assert update.clothing_type is None


def test_separate_background_and_garment_clauses(parser: RevisionParser) -> None:
    update = parser.parse("change the background to red and the shirt to white")

    assert update.as_dict() == {
        "background_color": "red",
        "clothing_color": "white",
    }


@pytest.mark.parametrize(
    "text",
    ["change the background to", "background color to", "shirt colour to"],
)
def test_dangling_connector_is_not_a_color(parser: RevisionParser, text: str) -> None:
    assert parser.parse(text) == RevisionUpdate()

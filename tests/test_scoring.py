import math

import pytest

from fuzzy_browse.exceptions import ConfigurationError
from fuzzy_browse.scoring import DEFAULT_SCORE_MODEL, ScoreModel


def test_default_weights() -> None:
    assert DEFAULT_SCORE_MODEL == ScoreModel(
        adjacency_bonus=5.0,
        camel_bonus=10.0,
        separator_bonus=20.0,
        leading_letter_penalty=-3.0,
        max_leading_letter_penalty=-9.0,
        unmatched_letter_penalty=-1.0,
    )


def test_weaker_max_leading_penalty_is_rejected() -> None:
    with pytest.raises(ConfigurationError, match="max_leading_letter_penalty"):
        ScoreModel(leading_letter_penalty=-3.0, max_leading_letter_penalty=-1.0)


def test_equal_leading_penalties_are_allowed() -> None:
    model = ScoreModel(leading_letter_penalty=-4.0, max_leading_letter_penalty=-4.0)

    assert model.leading_penalty(3) == -4.0


@pytest.mark.parametrize("value", [math.nan, math.inf, "5", True])
def test_invalid_weight_values_are_rejected(value: object) -> None:
    with pytest.raises(ConfigurationError):
        ScoreModel(adjacency_bonus=value)  # type: ignore[arg-type]


def test_configuration_error_is_a_value_error() -> None:
    assert issubclass(ConfigurationError, ValueError)


def test_integer_weights_are_stored_as_floats() -> None:
    model = ScoreModel(camel_bonus=12)

    assert model.camel_bonus == 12.0
    assert isinstance(model.camel_bonus, float)


def test_model_is_immutable() -> None:
    with pytest.raises(AttributeError):
        DEFAULT_SCORE_MODEL.camel_bonus = 1.0  # type: ignore[misc]


def test_leading_penalty_accumulates_up_to_floor() -> None:
    model = ScoreModel()

    assert model.leading_penalty(0) == 0.0
    assert model.leading_penalty(1) == -3.0
    assert model.leading_penalty(2) == -6.0
    assert model.leading_penalty(3) == -9.0
    assert model.leading_penalty(50) == -9.0


def test_from_options_keeps_defaults_for_none() -> None:
    model = ScoreModel.from_options(
        adjacency_bonus=None,
        separator_bonus=15.0,
        max_leading_letter_penalty=-6.0,
    )

    assert model.adjacency_bonus == 5.0
    assert model.separator_bonus == 15.0
    assert model.max_leading_letter_penalty == -6.0


def test_from_options_rejects_unknown_names() -> None:
    with pytest.raises(ConfigurationError, match="first_letter_bonus"):
        ScoreModel.from_options(first_letter_bonus=3.0)


def test_option_names() -> None:
    assert ScoreModel.option_names() == (
        "adjacency_bonus",
        "camel_bonus",
        "separator_bonus",
        "leading_letter_penalty",
        "max_leading_letter_penalty",
        "unmatched_letter_penalty",
    )

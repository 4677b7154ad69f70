import pytest

from expedition_sim.engine import Card, CardType, Hazard, ConfigurationError


def test_treasure_card_keeps_value_and_id():
    card = Card.treasure(7, 3)
    assert card.card_type is CardType.TREASURE
    assert card.value == 7
    assert card.treasure_id == 3
    assert card.is_treasure and not card.is_hazard and not card.is_artifact


def test_hazard_and_artifact_cards():
    snake = Card.hazard_card(Hazard.SNAKE)
    assert snake.is_hazard
    assert snake.hazard is Hazard.SNAKE

    idol = Card.artifact(2)
    assert idol.is_artifact
    assert idol.artifact_id == 2


def test_cards_are_immutable_values():
    card = Card.treasure(5, 0)
    with pytest.raises(AttributeError):
        card.value = 9
    assert Card.treasure(5, 0) == card
    assert Card.hazard_card(Hazard.FIRE) == Card.hazard_card(Hazard.FIRE)


@pytest.mark.parametrize("factory", [
    lambda: Card.treasure(-1, 0),
    lambda: Card.treasure(1, -1),
    lambda: Card.artifact(-1),
])
def test_negative_card_values_are_rejected(factory):
    with pytest.raises(ConfigurationError):
        factory()


def test_five_hazard_kinds():
    assert len(list(Hazard)) == 5

"""Tests for the animal food and rescue team catalog services."""

import pytest

import models.schemas as schemas
import repositories.db_models as db_models
from helpers.pagination import make_page_params
from models.exceptions import ValidationException
from services.animal_food_service import AnimalFoodService
from services.rescue_team_service import RescueTeamService


@pytest.fixture
def food_service(db_session) -> AnimalFoodService:
    return AnimalFoodService(db_session)


@pytest.fixture
def team_service(db_session) -> RescueTeamService:
    return RescueTeamService(db_session)


def food(**overrides) -> dict:
    data = {"foodName": "Crunchy Bites", "price": "$12.99", "brand": "Acme"}
    data.update(overrides)
    return data


def team(**overrides) -> dict:
    data = {"teamName": "River Rescue", "teamAddress": "1 Dock Road", "phone": "5551234"}
    data.update(overrides)
    return data


@pytest.mark.parametrize(
    "price, expected",
    [
        ("$12.99", 12.99),
        ("12", 12.0),
        ("USD 7.50 / bag", 7.5),
        ("free", None),
    ],
)
def test_parse_price(price, expected):
    assert schemas.parse_price(price) == expected


class TestAnimalFood:
    def test_defaults_and_numeric_price(self, food_service, admin_user):
        item = food_service.create(food(), admin_user.id)

        assert item.price == "$12.99"
        assert item.price_numeric == 12.99
        assert item.currency == "USD"
        assert item.category == db_models.FoodCategory.DOG_FOOD
        assert item.age_group == db_models.AgeGroup.ALL_AGES
        assert item.in_stock is True
        assert item.stock_quantity == 0

    def test_price_update_refreshes_numeric_price(self, food_service, admin_user):
        item = food_service.create(food(), admin_user.id)
        item = food_service.update(item.id, {"price": "$3.50"}, admin_user.id)
        assert item.price_numeric == 3.5

    def test_price_range_filter(self, food_service, admin_user):
        food_service.create(food(foodName="Cheap", price="$2"), admin_user.id)
        food_service.create(food(foodName="Mid", price="$10"), admin_user.id)
        food_service.create(food(foodName="Pricey", price="$40"), admin_user.id)

        filters = schemas.AnimalFoodFilter(min_price=5, max_price=20).to_filter()
        items, _ = food_service.list(filters, make_page_params())
        assert [item.food_name for item in items] == ["Mid"]

    def test_category_filter(self, food_service, admin_user):
        food_service.create(food(foodName="Kibble"), admin_user.id)
        food_service.create(food(foodName="Seeds", category="Bird Food"), admin_user.id)

        filters = schemas.AnimalFoodFilter(category="Bird Food").to_filter()
        items, _ = food_service.list(filters, make_page_params())
        assert [item.food_name for item in items] == ["Seeds"]

    def test_nutritional_info_round_trips(self, food_service, admin_user):
        item = food_service.create(
            food(nutritionalInfo={"protein": "26%", "fat": "14%"}), admin_user.id
        )
        assert item.nutritional_info["protein"] == "26%"
        assert item.nutritional_info["fiber"] is None

    def test_negative_stock_is_rejected(self, food_service, admin_user):
        with pytest.raises(ValidationException):
            food_service.create(food(stockQuantity=-1), admin_user.id)


class TestRescueTeam:
    def test_defaults(self, team_service, admin_user):
        item = team_service.create(team(), admin_user.id)
        assert item.availability == db_models.RescueAvailability.BUSINESS_HOURS
        assert item.specialization == []

    def test_specialization_filter(self, team_service, admin_user):
        team_service.create(team(teamName="Wings", specialization=["Birds"]), admin_user.id)
        team_service.create(
            team(teamName="Shore", specialization=["Marine Life", "Wildlife"]),
            admin_user.id,
        )

        filters = schemas.RescueTeamFilter(specialization="Wildlife").to_filter()
        items, _ = team_service.list(filters, make_page_params())
        assert [item.team_name for item in items] == ["Shore"]

    def test_unknown_specialization_is_rejected(self, team_service, admin_user):
        with pytest.raises(ValidationException):
            team_service.create(team(specialization=["Dragons"]), admin_user.id)

    def test_team_size_bounds(self, team_service, admin_user):
        with pytest.raises(ValidationException):
            team_service.create(team(teamSize=51), admin_user.id)

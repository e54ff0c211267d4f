"""Tests for configuration selection, startup checks and content schemas."""

from datetime import timedelta

import pytest
from marshmallow import ValidationError

from api import create_app
from api.config import DevelopmentConfig, ProductionConfig, TestingConfig, get_config
from models.schemas.common import slugify
from models.schemas.trek import TrekCreateSchema
from utils.errors import ConfigError


class TestConfig:
    @pytest.mark.parametrize(
        "name,expected",
        [("prod", ProductionConfig), ("production", ProductionConfig), ("testing", TestingConfig), ("dev", DevelopmentConfig)],
    )
    def test_get_config_by_name(self, name, expected):
        assert get_config(name) is expected

    def test_app_env_fallback(self, monkeypatch):
        monkeypatch.setenv("APP_ENV", "production")
        assert get_config(None) is ProductionConfig

    def test_app_env_names_the_config(self):
        assert TestingConfig.APP_ENV == "testing"
        assert ProductionConfig.APP_ENV == "production"

    def test_token_lifetimes(self):
        assert TestingConfig.ACCESS_TOKEN_EXPIRES == timedelta(minutes=15)
        assert TestingConfig.REFRESH_TOKEN_EXPIRES == timedelta(days=7)

    def test_secure_cookie_only_in_production(self):
        assert ProductionConfig.COOKIE_SECURE is True
        assert DevelopmentConfig.COOKIE_SECURE is False

    def test_app_refuses_to_start_without_refresh_secret(self, monkeypatch):
        monkeypatch.setattr(TestingConfig, "REFRESH_SECRET", None)
        with pytest.raises(ConfigError):
            create_app("testing")

    def test_app_refuses_to_start_without_access_secret(self, monkeypatch):
        monkeypatch.setattr(TestingConfig, "JWT_SECRET", "")
        with pytest.raises(ConfigError):
            create_app("testing")


class TestSlugify:
    @pytest.mark.parametrize(
        "name,slug",
        [("Annapurna Region", "annapurna-region"), ("  Mardi   Himal Trek ", "mardi-himal-trek"), ("EBC", "ebc")],
    )
    def test_slugify(self, name, slug):
        assert slugify(name) == slug


def _trek(**overrides):
    data = {
        "name": "  Mardi Himal  ",
        "description": "Short and steep.",
        "image": "https://res.cloudinary.com/c/image/upload/trekking/mardi.jpg",
    }
    data.update(overrides)
    return data


class TestTrekSchema:
    schema = TrekCreateSchema()

    def test_defaults_and_trimming(self):
        data = self.schema.load(_trek(keywords=[" nepal "], inclusions=[" permits "]))
        assert data["name"] == "Mardi Himal"
        assert data["keywords"] == ["nepal"]
        assert data["inclusions"] == ["permits"]
        assert data["gallery"] == []
        assert data["faqs"] == []

    def test_required_top_level_fields(self):
        with pytest.raises(ValidationError) as exc:
            self.schema.load({"name": "   "})
        assert set(exc.value.messages) >= {"name", "description", "image"}

    def test_overview_items_need_every_field(self):
        with pytest.raises(ValidationError) as exc:
            self.schema.load(_trek(overview=[{"icon": "mountain", "heading": "Altitude"}]))
        assert "overview" in exc.value.messages

    @pytest.mark.parametrize(
        "tier",
        [
            {"minPersons": 0, "maxPersons": 2, "price": 100},
            {"minPersons": 3, "maxPersons": 2, "price": 100},
            {"minPersons": 1, "maxPersons": 2, "price": -1},
            {"minPersons": 1, "maxPersons": 2},
        ],
    )
    def test_invalid_pricing(self, tier):
        with pytest.raises(ValidationError) as exc:
            self.schema.load(_trek(pricing=[tier]))
        assert "pricing" in exc.value.messages

    def test_valid_pricing_keeps_wire_keys(self):
        data = self.schema.load(_trek(pricing=[{"minPersons": 1, "maxPersons": 4, "price": 650}]))
        assert data["pricing"] == [{"minPersons": 1, "maxPersons": 4, "price": 650.0}]

    def test_blank_keyword_rejected(self):
        with pytest.raises(ValidationError) as exc:
            self.schema.load(_trek(keywords=["ok", "  "]))
        assert "keywords" in exc.value.messages

"""Tests for configuration loading and validation."""

from decimal import Decimal

import pytest

from inbox_ledger.config import (
    ConfigValidationError,
    LexiconExtensions,
    ParserConfig,
    PlausibilityConfig,
    ReviewThresholds,
    create_default_config,
    load_config,
)
from inbox_ledger.lexicon import DEFAULT_LEXICON
from inbox_ledger.parser import EmailTransactionParser

ENV_VARS = (
    "INBOX_LEDGER_DEFAULT_CURRENCY",
    "INBOX_LEDGER_AUTO_CONFIRM_THRESHOLD",
    "INBOX_LEDGER_MAX_PLAUSIBLE_AMOUNT",
    "INBOX_LEDGER_YEAR_LIKE_AMOUNTS",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestLoadConfig:
    """Tests for YAML loading and environment overrides."""

    def test_missing_file_yields_defaults(self, tmp_path):
        config = load_config(tmp_path / "missing.yaml")

        assert config == ParserConfig()
        assert config.default_currency == "CLP"
        assert config.plausibility.max_amount == Decimal("2000000")
        assert config.review.auto_confirm_threshold == 0.8

    def test_empty_file_yields_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")

        assert load_config(path) == ParserConfig()

    def test_yaml_values(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            """
default_currency: usd
zero_decimal_currencies: []
snippet_length: 200
date_dayfirst: false
plausibility:
  min_amount: 1
  max_amount: 50000
  year_like_amounts: [2026, 2027]
review:
  auto_confirm_threshold: 0.9
lexicon:
  service_providers: [gasco]
  category_keywords:
    Salud: [farmacia, cruz verde]
"""
        )

        config = load_config(path)

        assert config.default_currency == "USD"
        assert config.zero_decimal_currencies == ()
        assert config.snippet_length == 200
        assert config.date_dayfirst is False
        assert config.plausibility.min_amount == Decimal("1")
        assert config.plausibility.max_amount == Decimal("50000")
        assert config.plausibility.year_like_amounts == (2026, 2027)
        assert config.review.auto_confirm_threshold == 0.9
        assert config.lexicon.service_providers == ("gasco",)
        assert config.lexicon.category_keywords == {"Salud": ("farmacia", "cruz verde")}

    def test_env_overrides(self, tmp_path, monkeypatch):
        path = tmp_path / "config.yaml"
        path.write_text("default_currency: CLP\n")
        monkeypatch.setenv("INBOX_LEDGER_DEFAULT_CURRENCY", "brl")
        monkeypatch.setenv("INBOX_LEDGER_AUTO_CONFIRM_THRESHOLD", "0.75")
        monkeypatch.setenv("INBOX_LEDGER_MAX_PLAUSIBLE_AMOUNT", "999999")
        monkeypatch.setenv("INBOX_LEDGER_YEAR_LIKE_AMOUNTS", "2025, 2026,2027")

        config = load_config(path)

        assert config.default_currency == "BRL"
        assert config.review.auto_confirm_threshold == 0.75
        assert config.plausibility.max_amount == Decimal("999999")
        assert config.plausibility.year_like_amounts == (2025, 2026, 2027)

    def test_unsupported_currency_rejected(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("default_currency: XYZ\n")

        with pytest.raises(ConfigValidationError, match="default_currency"):
            load_config(path)

    def test_non_numeric_amount_rejected(self, tmp_path, monkeypatch):
        monkeypatch.setenv("INBOX_LEDGER_MAX_PLAUSIBLE_AMOUNT", "lots")

        with pytest.raises(ConfigValidationError, match="max_amount"):
            load_config(tmp_path / "missing.yaml")

    def test_non_numeric_threshold_rejected(self, tmp_path, monkeypatch):
        monkeypatch.setenv("INBOX_LEDGER_AUTO_CONFIRM_THRESHOLD", "high")

        with pytest.raises(ConfigValidationError, match="auto_confirm_threshold"):
            load_config(tmp_path / "missing.yaml")

    def test_bad_years_rejected(self, tmp_path, monkeypatch):
        monkeypatch.setenv("INBOX_LEDGER_YEAR_LIKE_AMOUNTS", "2025,next")

        with pytest.raises(ConfigValidationError, match="year_like_amounts"):
            load_config(tmp_path / "missing.yaml")

    @pytest.mark.parametrize(
        "content, key",
        [
            ("lexicon:\n  service_providers: falabella\n", "service_providers"),
            ("lexicon:\n  category_keywords:\n    Viajes: latam\n", "Viajes"),
            ("lexicon:\n  category_keywords: [latam]\n", "category_keywords"),
            ("zero_decimal_currencies: CLP\n", "zero_decimal_currencies"),
        ],
    )
    def test_scalar_where_list_expected_rejected(self, tmp_path, content, key):
        """A bare string is not split into one-letter keywords."""
        path = tmp_path / "config.yaml"
        path.write_text(content)

        with pytest.raises(ConfigValidationError, match=key):
            load_config(path)

    @pytest.mark.parametrize(
        "content, key",
        [
            ("snippet_length: abc\n", "snippet_length"),
            ("snippet_length: true\n", "snippet_length"),
            ("date_dayfirst: maybe\n", "date_dayfirst"),
            ("plausibility: 5\n", "plausibility"),
            ("review: high\n", "review"),
            ("lexicon: [gasco]\n", "lexicon"),
        ],
    )
    def test_wrong_types_rejected(self, tmp_path, content, key):
        path = tmp_path / "config.yaml"
        path.write_text(content)

        with pytest.raises(ConfigValidationError, match=key):
            load_config(path)

    def test_scalar_provider_rejected_end_to_end(self, tmp_path):
        """A bad provider list never reaches the parser."""
        path = tmp_path / "config.yaml"
        path.write_text("lexicon:\n  service_providers: falabella\n")

        with pytest.raises(ConfigValidationError):
            EmailTransactionParser(config=load_config(path))

    def test_top_level_must_be_mapping(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- just\n- a list\n")

        with pytest.raises(ConfigValidationError):
            load_config(path)

    def test_default_config_round_trip(self, tmp_path):
        """The generated file loads back to the built-in defaults."""
        path = tmp_path / "nested" / "config.yaml"

        create_default_config(path)

        assert path.exists()
        assert load_config(path) == ParserConfig()


class TestValidate:
    """Tests for configuration consistency checks."""

    def test_defaults_valid(self):
        assert ParserConfig().validate() == []

    def test_inverted_bounds(self):
        config = ParserConfig(
            plausibility=PlausibilityConfig(min_amount=Decimal("100"), max_amount=Decimal("10"))
        )

        errors = config.validate()

        assert any("min_amount" in e for e in errors)

    def test_threshold_out_of_range(self):
        config = ParserConfig(review=ReviewThresholds(auto_confirm_threshold=1.5))

        assert any("auto_confirm_threshold" in e for e in config.validate())

    def test_fallback_category_reserved(self):
        config = ParserConfig(lexicon=LexiconExtensions(category_keywords={"Otros": ("x",)}))

        assert any("Otros" in e for e in config.validate())

    def test_string_extensions_reported(self):
        config = ParserConfig(
            lexicon=LexiconExtensions(
                service_providers="falabella",
                category_keywords={"Viajes": "latam"},
            )
        )

        errors = config.validate()

        assert any("service_providers" in e for e in errors)
        assert any("Viajes" in e for e in errors)

    def test_hashable(self):
        assert hash(ParserConfig()) == hash(ParserConfig())

    def test_extensions_read_only(self):
        extensions = LexiconExtensions(category_keywords={"Salud": ("farmacia",)})

        with pytest.raises(TypeError):
            extensions.category_keywords["Viajes"] = ("latam",)

    def test_multiple_errors_reported(self):
        config = ParserConfig(default_currency="XYZ", snippet_length=-1)

        assert len(config.validate()) == 2


class TestPlausibility:
    """Tests for the amount plausibility filter."""

    @pytest.fixture
    def bounds(self):
        return PlausibilityConfig()

    @pytest.mark.parametrize("value", ["11", "12500", "1999999", "2022"])
    def test_plausible(self, bounds, value):
        assert bounds.is_plausible(Decimal(value)) is True

    @pytest.mark.parametrize("value", ["0", "1.99", "10", "2000000", "2025", "2026"])
    def test_implausible(self, bounds, value):
        """Bounds are exclusive and bare years are excluded."""
        assert bounds.is_plausible(Decimal(value)) is False


class TestBuildLexicon:
    """Tests for merging lexicon extensions."""

    def test_no_extensions_returns_base(self):
        assert ParserConfig().build_lexicon() is DEFAULT_LEXICON

    def test_extensions_merged(self):
        config = ParserConfig(
            lexicon=LexiconExtensions(
                service_providers=("Gasco",),
                category_keywords={"Salud": ("farmacia",), "Compras": ("sodimac",)},
            )
        )

        lexicon = config.build_lexicon()

        assert "gasco" in lexicon.service_providers
        assert "sodimac" in lexicon.category_keywords["Compras"]
        assert lexicon.categories[-2:] == ("Salud", "Otros")

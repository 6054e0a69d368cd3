"""
Configuration management (SSOT).

This module defines ALL tunables of the extraction engine. The defaults
reproduce the behaviour tuned for the primary deployment locale (Chile,
CLP); other deployments override them from YAML or the environment.

Key invariants:
- Defaults are safe: a missing config file yields a working parser
- Loaded configuration is immutable once handed to a parser
"""

import os
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

import yaml

from .lexicon import DEFAULT_LEXICON, FALLBACK_CATEGORY, Lexicon

SUPPORTED_CURRENCIES = ("CLP", "USD", "BRL", "EUR", "GBP", "ARS", "MXN")


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""

    pass


@dataclass(frozen=True)
class PlausibilityConfig:
    """Bounds used to discard numbers that are unlikely to be the amount paid.

    The upper bound and the year list are tuned to CLP amounts and the
    current years; adjust both per deployment.
    """

    # Candidates must be strictly greater than this
    min_amount: Decimal = Decimal("10")
    # Candidates must be strictly lower than this
    max_amount: Decimal = Decimal("2000000")
    # Bare years show up next to dates and statement periods
    year_like_amounts: tuple[int, ...] = (2023, 2024, 2025, 2026)

    def is_plausible(self, value: Decimal) -> bool:
        """Check whether a candidate may be the amount of a personal expense."""
        return (
            self.min_amount < value < self.max_amount
            and value not in self.year_like_amounts
        )


@dataclass(frozen=True)
class ReviewThresholds:
    """Thresholds for review status determination."""

    # Strictly above this: record is confirmed without review
    auto_confirm_threshold: float = 0.8


@dataclass(frozen=True)
class LexiconExtensions:
    """Extra lookup-table entries merged into the built-in lexicon."""

    service_providers: tuple[str, ...] = ()
    category_keywords: Mapping[str, tuple[str, ...]] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        # Read-only view over a private copy
        object.__setattr__(
            self, "category_keywords", MappingProxyType(dict(self.category_keywords))
        )


@dataclass(frozen=True)
class ParserConfig:
    """Extraction engine configuration (SSOT)."""

    # Currency assumed when an email carries no currency marker
    default_currency: str = "CLP"
    # Currencies written without decimals, where "." and "," group thousands
    zero_decimal_currencies: tuple[str, ...] = ("CLP",)
    # Characters of the body kept on the record for auditing
    snippet_length: int = 500
    # Read "05/01/2026" as 5 January (Latin American convention)
    date_dayfirst: bool = True
    plausibility: PlausibilityConfig = field(default_factory=PlausibilityConfig)
    review: ReviewThresholds = field(default_factory=ReviewThresholds)
    lexicon: LexiconExtensions = field(default_factory=LexiconExtensions)

    def validate(self) -> list[str]:
        """Validate configuration completeness and consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors: list[str] = []

        if self.default_currency not in SUPPORTED_CURRENCIES:
            errors.append(
                f"default_currency must be one of {', '.join(SUPPORTED_CURRENCIES)}, "
                f"got {self.default_currency!r}"
            )

        unknown = [c for c in self.zero_decimal_currencies if c not in SUPPORTED_CURRENCIES]
        if unknown:
            errors.append(f"zero_decimal_currencies has unknown codes: {', '.join(unknown)}")

        if self.snippet_length < 0:
            errors.append("snippet_length must be >= 0")

        if self.plausibility.min_amount >= self.plausibility.max_amount:
            errors.append("plausibility.min_amount must be < plausibility.max_amount")

        if not 0.0 <= self.review.auto_confirm_threshold <= 1.0:
            errors.append("review.auto_confirm_threshold must be within [0, 1]")

        if not _is_string_list(self.zero_decimal_currencies):
            errors.append("zero_decimal_currencies must be a list of currency codes")

        if not _is_string_list(self.lexicon.service_providers):
            errors.append("lexicon.service_providers must be a list of strings")

        for name, words in self.lexicon.category_keywords.items():
            if not isinstance(name, str) or not _is_string_list(words):
                errors.append(f"lexicon.category_keywords.{name} must be a list of strings")

        if FALLBACK_CATEGORY in self.lexicon.category_keywords:
            errors.append(f"lexicon.category_keywords may not define {FALLBACK_CATEGORY!r}")

        return errors

    def build_lexicon(self, base: Lexicon = DEFAULT_LEXICON) -> Lexicon:
        """Merge configured lexicon extensions into a base lexicon."""
        if not self.lexicon.service_providers and not self.lexicon.category_keywords:
            return base
        return base.extend(
            service_providers=list(self.lexicon.service_providers),
            category_keywords={
                name: list(words) for name, words in self.lexicon.category_keywords.items()
            },
        )


def _is_string_list(value: Any) -> bool:
    return isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value)


def _section(data: dict, key: str) -> dict:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigValidationError(f"{key} must be a mapping, got {value!r}")
    return value


def _string_list(value: Any, key: str) -> tuple[str, ...]:
    # A bare scalar would otherwise be split into single characters
    if value is None:
        return ()
    if not _is_string_list(value):
        raise ConfigValidationError(f"{key} must be a list of strings, got {value!r}")
    return tuple(value)


def _to_int(value: Any, key: str) -> int:
    if isinstance(value, bool):
        raise ConfigValidationError(f"{key} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigValidationError(f"{key} must be an integer, got {value!r}") from None


def _to_decimal(value: Any, key: str) -> Decimal:
    try:
        return Decimal(str(value))
    except InvalidOperation:
        raise ConfigValidationError(f"{key} must be a number, got {value!r}") from None


def _parse_years(value: Any, key: str) -> tuple[int, ...]:
    if isinstance(value, str):
        value = [part for part in value.split(",") if part.strip()]
    try:
        return tuple(int(str(v).strip()) for v in value)
    except (TypeError, ValueError):
        raise ConfigValidationError(f"{key} must be a list of years, got {value!r}") from None


def load_config(config_path: Path) -> ParserConfig:
    """
    Load configuration from YAML file.

    A missing file yields the defaults. Environment variables override
    config values:
    - INBOX_LEDGER_DEFAULT_CURRENCY
    - INBOX_LEDGER_AUTO_CONFIRM_THRESHOLD
    - INBOX_LEDGER_MAX_PLAUSIBLE_AMOUNT
    - INBOX_LEDGER_YEAR_LIKE_AMOUNTS (comma-separated)

    Raises:
        ConfigValidationError: If a value has the wrong type or the
            resulting configuration is inconsistent
    """
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    else:
        data = {}

    if not isinstance(data, dict):
        raise ConfigValidationError(f"{config_path} must contain a mapping at top level")

    defaults = ParserConfig()

    # Plausibility filter
    plaus_data = _section(data, "plausibility")
    max_amount = os.environ.get(
        "INBOX_LEDGER_MAX_PLAUSIBLE_AMOUNT",
        plaus_data.get("max_amount", defaults.plausibility.max_amount),
    )
    year_like = os.environ.get(
        "INBOX_LEDGER_YEAR_LIKE_AMOUNTS",
        plaus_data.get("year_like_amounts", defaults.plausibility.year_like_amounts),
    )
    plausibility = PlausibilityConfig(
        min_amount=_to_decimal(
            plaus_data.get("min_amount", defaults.plausibility.min_amount),
            "plausibility.min_amount",
        ),
        max_amount=_to_decimal(max_amount, "plausibility.max_amount"),
        year_like_amounts=_parse_years(year_like, "plausibility.year_like_amounts"),
    )

    # Review thresholds
    review_data = _section(data, "review")
    threshold = os.environ.get(
        "INBOX_LEDGER_AUTO_CONFIRM_THRESHOLD",
        review_data.get("auto_confirm_threshold", defaults.review.auto_confirm_threshold),
    )
    try:
        review = ReviewThresholds(auto_confirm_threshold=float(threshold))
    except (TypeError, ValueError):
        raise ConfigValidationError(
            f"review.auto_confirm_threshold must be a number, got {threshold!r}"
        ) from None

    # Lexicon extensions
    lexicon_data = _section(data, "lexicon")
    category_data = _section(lexicon_data, "category_keywords")
    lexicon = LexiconExtensions(
        service_providers=_string_list(
            lexicon_data.get("service_providers"), "lexicon.service_providers"
        ),
        category_keywords={
            str(name): _string_list(words, f"lexicon.category_keywords.{name}")
            for name, words in category_data.items()
        },
    )

    date_dayfirst = data.get("date_dayfirst", defaults.date_dayfirst)
    if not isinstance(date_dayfirst, bool):
        raise ConfigValidationError(f"date_dayfirst must be true or false, got {date_dayfirst!r}")

    config = ParserConfig(
        default_currency=str(
            os.environ.get(
                "INBOX_LEDGER_DEFAULT_CURRENCY",
                data.get("default_currency", defaults.default_currency),
            )
        ).upper(),
        zero_decimal_currencies=tuple(
            c.upper()
            for c in _string_list(
                data.get("zero_decimal_currencies", defaults.zero_decimal_currencies),
                "zero_decimal_currencies",
            )
        ),
        snippet_length=_to_int(
            data.get("snippet_length", defaults.snippet_length), "snippet_length"
        ),
        date_dayfirst=date_dayfirst,
        plausibility=plausibility,
        review=review,
        lexicon=lexicon,
    )

    errors = config.validate()
    if errors:
        raise ConfigValidationError("; ".join(errors))

    return config


def create_default_config(config_path: Path) -> None:
    """Create a default configuration file."""
    default_config = """# Email transaction extraction configuration (inbox-ledger)
#
# Defaults are tuned for Chilean inboxes (CLP, no decimals).

default_currency: "CLP"          # Used when an email has no currency marker
zero_decimal_currencies:         # "." and "," are thousands separators here
  - "CLP"
snippet_length: 500              # Body characters kept for auditing
date_dayfirst: true              # 05/01/2026 -> 5 January

# Numbers outside these bounds are not taken as the paid amount
plausibility:
  min_amount: 10
  max_amount: 2000000
  year_like_amounts: [2023, 2024, 2025, 2026]

review:
  auto_confirm_threshold: 0.8    # Strictly above this: confirmed without review

# Extra lookup-table entries (lower-case keywords)
lexicon:
  service_providers: []
  category_keywords: {}
"""

    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "w", encoding="utf-8") as f:
        f.write(default_config)

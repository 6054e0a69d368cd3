"""
Lookup tables for email transaction extraction.

All keyword lists used by the extractors live here as plain data.
Extractors never embed keywords in their control flow, so the taxonomy
can be extended or localized by building a new Lexicon.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

# Sentinel values
UNKNOWN_MERCHANT = "Desconocido"
FALLBACK_CATEGORY = "Otros"

# Utilities/telecom billers recognized by sender name or subject
SERVICE_PROVIDERS = (
    "enel",
    "aguas andinas",
    "metrogas",
    "vtr",
    "movistar",
    "entel",
    "claro",
    "chilquinta",
    "cge",
    "essbio",
    "esval",
    "sencillito",
    "servipag",
    "unired",
)

# Ordered: the first category with a matching keyword wins
CATEGORY_KEYWORDS: dict[str, tuple[str, ...]] = {
    "Servicios": (
        "enel", "agua", "gas", "luz", "metrogas", "chilquinta", "cge", "essbio", "esval",
        "vtr", "movistar", "entel", "claro", "internet", "telefonía", "electricidad",
        "sencillito", "servipag",
    ),
    "Suscripciones": (
        "netflix", "spotify", "google", "apple", "disney", "hbo", "amazon prime",
        "youtube", "linkedin", "canva", "midjourney", "openai",
    ),
    "Alimentación": (
        "pedidosya", "uber eats", "rappi", "jumbo", "lider", "unimarc", "tottus",
        "supermercado", "restaurant", "cafe", "mcdonald",
    ),
    "Transporte": (
        "uber", "cabify", "didi", "gasolinera", "shell", "copec", "terpel", "metro", "bip",
    ),
    "Finanzas": (
        "banco", "santander", "itau", "scotiabank", "bci", "estado", "transferencia",
        "pago tarjeta", "falabella",
    ),
    "Compras": (
        "mercadolibre", "amazon", "falabella", "ripley", "paris", "aliexpress", "ebay",
        "h&m", "zara",
    ),
}

CATEGORIES = (*CATEGORY_KEYWORDS.keys(), FALLBACK_CATEGORY)

# Phrases typical of utility bills and payment receipts
BILL_KEYWORDS = (
    "vencimiento",
    "factura",
    "boleta",
    "nro de cliente",
    "cuenta no",
    "servicio",
    "suministro",
    "pago de cuenta",
    "total a pagar",
    "fecha de emisión",
    "detalle de cobros",
    "consumo",
    "valor a pagar",
    "monto pagado",
    "comprobante de pago",
)

# Checked before expense markers
INCOME_KEYWORDS = (
    "abonado",
    "recibido",
    "depósito",
    "deposit",
    "received",
    "transferencia recibida",
    "abono",
    "pix",
    "devolución",
    "pago recibido",
)

EXPENSE_KEYWORDS = (
    "pago",
    "compra",
    "confirmación de orden",
    "factura",
    "boleta",
    "cargo",
    "cobro",
    "vencimiento",
    "debitado",
)

# "<verb preposition> <name>" shapes found in notification subjects
MERCHANT_SUBJECT_PATTERNS = (
    r"pago a ([\w\s]+)",
    r"recibo de ([\w\s]+)",
    r"comprobante de ([\w\s]+)",
    r"transferido a ([\w\s]+)",
    r"notificación de ([\w\s]+)",
)


@dataclass(frozen=True)
class Lexicon:
    """
    Immutable bundle of every lookup table the extractors consult.

    Keywords are stored lower-cased. Category order is preserved and
    determines classification priority.
    """

    service_providers: tuple[str, ...] = SERVICE_PROVIDERS
    category_keywords: Mapping[str, tuple[str, ...]] = field(
        default_factory=lambda: dict(CATEGORY_KEYWORDS), hash=False
    )
    bill_keywords: tuple[str, ...] = BILL_KEYWORDS
    income_keywords: tuple[str, ...] = INCOME_KEYWORDS
    expense_keywords: tuple[str, ...] = EXPENSE_KEYWORDS
    merchant_patterns: tuple[str, ...] = MERCHANT_SUBJECT_PATTERNS

    def __post_init__(self):
        # Shared by every parser, so the table must not change in place
        object.__setattr__(
            self,
            "category_keywords",
            MappingProxyType(
                {name: tuple(words) for name, words in self.category_keywords.items()}
            ),
        )

    def extend(
        self,
        service_providers: Optional[list[str]] = None,
        category_keywords: Optional[Mapping[str, list[str]]] = None,
    ) -> "Lexicon":
        """
        Return a new Lexicon with extra providers and category keywords.

        Keywords for an existing category are appended to it. Unknown
        categories are added after the built-in ones, still ahead of the
        fallback category.
        """
        providers = list(self.service_providers)
        for provider in service_providers or []:
            provider = provider.strip().lower()
            if provider and provider not in providers:
                providers.append(provider)

        categories = {name: list(words) for name, words in self.category_keywords.items()}
        for name, words in (category_keywords or {}).items():
            if name == FALLBACK_CATEGORY:
                continue
            bucket = categories.setdefault(name, [])
            for word in words:
                word = word.strip().lower()
                if word and word not in bucket:
                    bucket.append(word)

        return Lexicon(
            service_providers=tuple(providers),
            category_keywords=categories,
            bill_keywords=self.bill_keywords,
            income_keywords=self.income_keywords,
            expense_keywords=self.expense_keywords,
            merchant_patterns=self.merchant_patterns,
        )

    @property
    def categories(self) -> tuple[str, ...]:
        """Every label this lexicon can produce, fallback last."""
        return (*self.category_keywords.keys(), FALLBACK_CATEGORY)


DEFAULT_LEXICON = Lexicon()

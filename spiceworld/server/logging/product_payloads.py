from decimal import Decimal
from typing import Any

from babel.numbers import format_currency, get_currency_precision

from ...config import get_settings
from ...core.canonical.entities import Product, Variant

_DEFAULT_DESCRIPTION_LIMITS = {
    "low": 80,
    "medium": 160,
    "high": 240,
}
_SUPPORTED_VERBOSITIES = {"low", "medium", "high", "extrahigh"}


def _truncate_description(value: str | None, *, limit: int) -> str:
    text = str(value or "").strip()
    if len(text) <= limit:
        return text
    return f"{text[:limit].rstrip()}... [truncated]"


def _normalize_verbosity(verbosity: str) -> str:
    normalized = str(verbosity or "").strip().lower()
    if normalized in _SUPPORTED_VERBOSITIES:
        return normalized
    return "medium"


def _format_price(minor_units: int | None, currency: str | None) -> str:
    """Render an integer amount of minor units, e.g. ``1250 EUR`` -> ``€12.50``."""
    if minor_units is None:
        return ""
    currency_code = str(currency or "").upper()
    if not currency_code:
        return str(minor_units)
    try:
        amount = Decimal(minor_units).scaleb(-get_currency_precision(currency_code))
        return format_currency(amount, currency_code, locale="en_US")
    except Exception:
        return f"{minor_units} {currency_code}"


def _price_range(variants: list[Variant]) -> str:
    if not variants:
        return ""
    cheapest = min(variants, key=lambda variant: variant.price)
    dearest = max(variants, key=lambda variant: variant.price)
    low = _format_price(cheapest.price, cheapest.currency)
    high = _format_price(dearest.price, dearest.currency)
    return low if low == high else f"{low} - {high}"


def _build_normal_variants(variants: list[Variant]) -> list[dict[str, Any]]:
    return [
        {
            "sku": variant.sku,
            "price": _format_price(variant.price, variant.currency),
            "stock": variant.stock,
            "attribute_values": len(variant.attribute_value_ids),
        }
        for variant in variants
    ]


def product_result_to_loggable(
    product: Product,
    *,
    verbosity: str | None = None,
    debug_enabled: bool | None = None,
) -> dict[str, Any] | None:
    settings = get_settings()
    if debug_enabled is None:
        debug_enabled = settings.debug

    if not debug_enabled:
        return None

    resolved_verbosity = verbosity if verbosity is not None else settings.log_verbosity
    level = _normalize_verbosity(resolved_verbosity)
    data = product.to_dict()
    if level == "extrahigh":
        return data

    if level == "high":
        data["description"] = _truncate_description(
            data.get("description"), limit=_DEFAULT_DESCRIPTION_LIMITS["high"]
        )
        return data

    thumbnail = product.thumbnail
    summary = {
        "id": product.id,
        "name": product.name,
        "slug": product.slug,
        "status": product.status,
        "version": product.version,
        "category_id": product.category_id,
        "description": _truncate_description(
            product.description, limit=_DEFAULT_DESCRIPTION_LIMITS["medium"]
        ),
        "price": _price_range(product.variants),
        "images": {
            "count": len(product.images),
            "thumbnail": thumbnail.url if thumbnail is not None else None,
        },
        "variants_count": len(product.variants),
        "variants": _build_normal_variants(product.variants),
    }

    if level == "low":
        return {
            "id": summary["id"],
            "name": summary["name"],
            "status": summary["status"],
            "version": summary["version"],
            "price": summary["price"],
            "images": {"count": len(product.images)},
            "variants_count": summary["variants_count"],
        }

    return summary

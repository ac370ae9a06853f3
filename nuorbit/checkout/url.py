"""Checkout URL construction."""

from __future__ import annotations

import math
from urllib.parse import parse_qsl, urlencode, urljoin, urlsplit, urlunsplit

from nuorbit.config import ConfigurationError
from nuorbit.models.checkout import CheckoutOptions


def origin_of(url: str) -> str:
    parts = urlsplit(url)
    return f"{parts.scheme}://{parts.netloc}"


def resolve_base_url(base_url: str | None, *, origin: str, href: str) -> str:
    """Resolve the checkout base against the parent location.

    No base means the parent's origin. A base that does not resolve to an
    absolute http(s) location is a configuration error; there is no
    silent fallback.
    """
    if not base_url:
        return origin
    try:
        resolved = urljoin(href, base_url)
        parts = urlsplit(resolved)
        parts.port  # noqa: B018 - raises ValueError on a malformed port
    except ValueError as exc:
        raise ConfigurationError(
            f"Invalid base_url provided to NuOrbit checkout launcher: {base_url}"
        ) from exc
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise ConfigurationError(
            f"Invalid base_url provided to NuOrbit checkout launcher: {base_url}"
        )
    return resolved


def stringify_price(price: float | int | str | None) -> str | None:
    """Render a price query value. Numbers must be finite."""
    if price is None:
        return None
    if isinstance(price, bool):
        raise ConfigurationError("price_usd must be a number or string.")
    if isinstance(price, (int, float)):
        if not math.isfinite(price):
            raise ConfigurationError("price_usd must be a finite number.")
        if isinstance(price, float) and price.is_integer():
            return str(int(price))
        return str(price)
    return price


def checkout_query(options: CheckoutOptions) -> dict[str, str]:
    """Query parameters for the checkout page; absent values are omitted."""
    flow_mode = options.flow_mode.value if options.flow_mode is not None else None
    candidates = (
        ("price", stringify_price(options.price_usd)),
        ("payTo", options.pay_to),
        ("description", options.description),
        ("prefillNetwork", options.prefill_network),
        ("flowMode", flow_mode),
        ("prefillStable", options.prefill_stable),
    )
    return {key: value for key, value in candidates if value}


def resolve_checkout_target(options: CheckoutOptions, *, origin: str, href: str) -> tuple[str, str]:
    """Return the resolved base and the full checkout URL.

    Parameters already present in the path's query are kept; checkout
    parameters replace same-named ones. A fragment in the path is kept.
    """
    base = resolve_base_url(options.base_url, origin=origin, href=href)
    path = options.path if options.path.startswith("/") else f"/{options.path}"
    target = urlsplit(urljoin(base, path))
    params = dict(parse_qsl(target.query, keep_blank_values=True))
    params.update(checkout_query(options))
    url = urlunsplit(
        (target.scheme, target.netloc, target.path, urlencode(params), target.fragment)
    )
    return base, url


def build_checkout_url(options: CheckoutOptions, *, origin: str, href: str) -> str:
    """Build the full checkout URL the popup is navigated to."""
    return resolve_checkout_target(options, origin=origin, href=href)[1]

import re
from typing import Optional

from fastapi import Request

from .core import decode_body, validate_creation, validate_update
from .database import ProductStore
from .errors import Result

# This file contains the request logic for all product endpoints.
# Each function takes the guard's decision first and returns a Result.

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_positive_int(raw: Optional[str], default: int) -> int:
    # reads a leading integer like "2abc" -> 2; anything else falls back
    if raw is None:
        return default
    match = _LEADING_INT.match(raw)
    if not match:
        return default
    value = int(match.group(1))
    return value if value > 0 else default


def page_window(page: Optional[str], limit: Optional[str], max_limit: Optional[int] = None):
    page_n = parse_positive_int(page, 1)
    limit_n = parse_positive_int(limit, 10)
    if max_limit is not None:
        limit_n = min(limit_n, max_limit)
    return page_n, limit_n


async def _read_json(request: Request) -> Result:
    return decode_body(await request.body())


# Product endpoints
async def list_products_logic(
    auth: Result,
    store: ProductStore,
    category: Optional[str] = None,
    page: Optional[str] = None,
    limit: Optional[str] = None,
    max_limit: Optional[int] = None,
) -> Result:
    if not auth.ok:
        return auth
    page_n, limit_n = page_window(page, limit, max_limit)
    return Result.success(store.list_products(category, page_n, limit_n))


async def search_products_logic(auth: Result, store: ProductStore, q: Optional[str] = None) -> Result:
    return auth.then(lambda _: Result.success(store.search(q)))


async def product_stats_logic(auth: Result, store: ProductStore) -> Result:
    return auth.then(lambda _: Result.success(store.stats()))


async def get_product_logic(auth: Result, store: ProductStore, product_id: str) -> Result:
    return auth.then(lambda _: store.get(product_id))


async def create_product_logic(auth: Result, store: ProductStore, request: Request) -> Result:
    if not auth.ok:
        return auth
    payload = await _read_json(request)
    return payload.then(validate_creation).then(lambda p: Result.success(store.insert(p)))


async def update_product_logic(auth: Result, store: ProductStore, request: Request, product_id: str) -> Result:
    if not auth.ok:
        return auth
    payload = await _read_json(request)
    return payload.then(validate_update).then(lambda u: store.update(product_id, u))


async def delete_product_logic(auth: Result, store: ProductStore, product_id: str) -> Result:
    return auth.then(lambda _: store.remove(product_id))

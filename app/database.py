import threading
import uuid
from collections import Counter
from typing import Any, Dict, Iterable, List, Optional

from .core import ProductCreate, ProductUpdate, _make_product
from .errors import NotFoundError, Result
from .models import Product, ProductPage

# This file holds the in-memory product collection and its lock.

SEED_PRODUCTS: List[Dict[str, Any]] = [
    {
        "id": "1",
        "name": "Laptop",
        "description": "High-performance laptop with 16GB RAM",
        "price": 1200,
        "category": "electronics",
        "inStock": True,
    },
    {
        "id": "2",
        "name": "Smartphone",
        "description": "Latest model with 128GB storage",
        "price": 800,
        "category": "electronics",
        "inStock": True,
    },
    {
        "id": "3",
        "name": "Coffee Maker",
        "description": "Programmable coffee maker with timer",
        "price": 50,
        "category": "kitchen",
        "inStock": False,
    },
]


def _not_found() -> Result:
    return Result.failure(NotFoundError("Product not found"))


class ProductStore:
    """
    Owns one product collection. Every public method runs under the
    store lock, so each call is atomic even when handlers run on
    worker threads.
    """

    def __init__(self, seed: Iterable[Dict[str, Any]] = SEED_PRODUCTS):
        self._lock = threading.RLock()
        # dicts keep insertion order, which is the listing order
        self._products: Dict[str, Product] = {}
        self._issued_ids = set()
        for record in seed:
            product = Product.model_validate(record)
            self._products[product.id] = product
            self._issued_ids.add(product.id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._products)

    def _new_id(self) -> str:
        pid = uuid.uuid4().hex
        while pid in self._issued_ids:
            pid = uuid.uuid4().hex
        self._issued_ids.add(pid)
        return pid

    def list_products(self, category: Optional[str] = None, page: int = 1, limit: int = 10) -> ProductPage:
        with self._lock:
            out = [p for p in self._products.values() if not category or p.category == category]
        start = (page - 1) * limit
        return ProductPage(page=page, limit=limit, total=len(out), products=out[start:start + limit])

    def get(self, product_id: str) -> Result:
        with self._lock:
            product = self._products.get(product_id)
        if product is None:
            return _not_found()
        return Result.success(product)

    def insert(self, payload: ProductCreate) -> Product:
        with self._lock:
            product = _make_product(self._new_id(), payload)
            self._products[product.id] = product
            return product

    def update(self, product_id: str, payload: ProductUpdate) -> Result:
        with self._lock:
            current = self._products.get(product_id)
            if current is None:
                return _not_found()
            updated = current.model_copy(update=payload.changes())
            self._products[product_id] = updated
            return Result.success(updated)

    def remove(self, product_id: str) -> Result:
        with self._lock:
            if self._products.pop(product_id, None) is None:
                return _not_found()
            return Result.success()

    def search(self, term: Optional[str] = None) -> List[Product]:
        term = (term or "").lower()
        with self._lock:
            return [p for p in self._products.values() if term in p.name.lower()]

    def stats(self) -> Dict[str, int]:
        with self._lock:
            return dict(Counter(p.category for p in self._products.values()))

# app/core.py
import json
from typing import Annotated, Any, Dict, Optional, Union

from pydantic import BaseModel, Field, StrictBool, StrictFloat, StrictInt, StrictStr
from pydantic import ValidationError as PydanticValidationError

from .errors import Result, ValidationError
from .models import Product

# Input schemas and the two field-validation rules (creation / update).

# NaN and Infinity parse from JSON but cannot be serialized back
Number = Union[StrictInt, Annotated[StrictFloat, Field(allow_inf_nan=False)]]


class ProductCreate(BaseModel):
    name: StrictStr = Field(min_length=1)
    description: StrictStr = Field(min_length=1)
    price: Number
    category: StrictStr = Field(min_length=1)
    in_stock: StrictBool = Field(alias="inStock")


class ProductUpdate(BaseModel):
    name: Optional[StrictStr] = Field(default=None, min_length=1)
    description: Optional[StrictStr] = Field(default=None, min_length=1)
    price: Optional[Number] = None
    category: Optional[StrictStr] = Field(default=None, min_length=1)
    in_stock: Optional[StrictBool] = Field(default=None, alias="inStock")

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True)


UPDATE_MESSAGES = {
    "name": "Name must be a non-empty string",
    "description": "Description must be a non-empty string",
    "price": "Price must be a number",
    "category": "Category must be a non-empty string",
    "inStock": "inStock must be a boolean",
}


def _field_issues(exc: PydanticValidationError):
    return [
        {"field": ".".join(str(part) for part in err["loc"]), "issue": err["msg"]}
        for err in exc.errors()
    ]


def _is_absent(err: Dict[str, Any]) -> bool:
    if err["type"] in ("missing", "string_too_short"):
        return True
    return err.get("input", ...) is None


def validate_creation(payload: Dict[str, Any]) -> Result:
    try:
        product = ProductCreate.model_validate(payload)
    except PydanticValidationError as exc:
        details = {"fields": _field_issues(exc)}
        if any(_is_absent(err) for err in exc.errors()):
            return Result.failure(ValidationError("All fields are required", details))
        return Result.failure(ValidationError("Invalid data types", details))
    return Result.success(product)


def validate_update(payload: Dict[str, Any]) -> Result:
    # explicit nulls would erase a field, pydantic's Optional would let them through
    for field, message in UPDATE_MESSAGES.items():
        if field in payload and payload[field] is None:
            return Result.failure(ValidationError(message, {"fields": [{"field": field, "issue": "null"}]}))
    try:
        update = ProductUpdate.model_validate(payload)
    except PydanticValidationError as exc:
        first = str(exc.errors()[0]["loc"][0])
        message = UPDATE_MESSAGES.get(first, "Invalid data types")
        return Result.failure(ValidationError(message, {"fields": _field_issues(exc)}))
    return Result.success(update)


def decode_body(raw: bytes) -> Result:
    """Decode a request body into a JSON object; an empty body counts as {}."""
    if not raw.strip():
        return Result.success({})
    try:
        payload = json.loads(raw)
    except (UnicodeDecodeError, ValueError):
        return Result.failure(ValidationError("Request body must be a JSON object", {"body": "malformed JSON"}))
    if not isinstance(payload, dict):
        return Result.failure(ValidationError("Request body must be a JSON object", {"body": type(payload).__name__}))
    return Result.success(payload)


def _make_product(product_id: str, p: ProductCreate) -> Product:
    return Product(id=product_id, **p.model_dump())

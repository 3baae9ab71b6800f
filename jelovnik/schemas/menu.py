from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer

# Prices travel as JSON numbers but are kept as Decimal in Python.
Price = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class MenuField(str, Enum):
    """Every column of the jelovnik table that the admin surface reads or writes."""

    EXTERNAL_ID = "external_id"
    COLLECTION = "collection"
    PRODUCT_NAME = "product_name"
    PRICE = "price"
    PRODUCT_NAME_EN = "product_name_en"
    PRODUCT_NAME_DE = "product_name_de"
    PRODUCT_NAME_TR = "product_name_tr"
    DESCRIPTION_HR = "description_hr"
    DESCRIPTION_EN = "description_en"
    DESCRIPTION_DE = "description_de"
    DESCRIPTION_TR = "description_tr"
    COLLECTION_ORDER = "collection_order"
    SIZE = "size"
    IMAGE = "image"


NUMERIC_FIELDS = frozenset({MenuField.PRICE, MenuField.COLLECTION_ORDER})


class MenuItemSchema(BaseModel):
    """A menu row as the services see it (detached from the ORM session)."""

    model_config = ConfigDict(from_attributes=True)

    external_id: str
    collection: str
    product_name: str
    price: Price = Decimal("0.00")
    product_name_en: Optional[str] = None
    product_name_de: Optional[str] = None
    product_name_tr: Optional[str] = None
    description_hr: Optional[str] = None
    description_en: Optional[str] = None
    description_de: Optional[str] = None
    description_tr: Optional[str] = None
    collection_order: int = 0
    size: Optional[str] = None
    image: Optional[str] = None


FieldAccessor = tuple[Callable[[MenuItemSchema], Any], Callable[[MenuItemSchema, Any], None]]


def _accessor(field: MenuField) -> FieldAccessor:
    name = field.value

    def get(item: MenuItemSchema) -> Any:
        return getattr(item, name)

    def set_(item: MenuItemSchema, value: Any) -> None:
        setattr(item, name, value)

    return get, set_


FIELD_ACCESSORS: dict[MenuField, FieldAccessor] = {field: _accessor(field) for field in MenuField}


def get_field(item: MenuItemSchema, field: MenuField) -> Any:
    return FIELD_ACCESSORS[field][0](item)


def set_field(item: MenuItemSchema, field: MenuField, value: Any) -> None:
    FIELD_ACCESSORS[field][1](item, value)


class MenuItemCreate(BaseModel):
    """POST /api/v1/admin/items body. external_id is generated when omitted."""

    model_config = ConfigDict(str_strip_whitespace=True)

    external_id: Optional[str] = None
    collection: str = Field(min_length=1)
    product_name: str = Field(min_length=1)
    price: Price = Field(default=Decimal("0.00"), ge=0)
    product_name_en: Optional[str] = None
    product_name_de: Optional[str] = None
    product_name_tr: Optional[str] = None
    description_hr: Optional[str] = None
    description_en: Optional[str] = None
    description_de: Optional[str] = None
    description_tr: Optional[str] = None
    collection_order: int = Field(default=0, ge=0)
    size: Optional[str] = None
    image: Optional[str] = None


class MenuItemUpdate(BaseModel):
    """PATCH /api/v1/admin/items/{external_id} body; only set fields are written."""

    model_config = ConfigDict(str_strip_whitespace=True)

    collection: Optional[str] = None
    product_name: Optional[str] = None
    price: Optional[Price] = Field(None, ge=0)
    product_name_en: Optional[str] = None
    product_name_de: Optional[str] = None
    product_name_tr: Optional[str] = None
    description_hr: Optional[str] = None
    description_en: Optional[str] = None
    description_de: Optional[str] = None
    description_tr: Optional[str] = None
    collection_order: Optional[int] = Field(None, ge=0)
    size: Optional[str] = None
    image: Optional[str] = None


class SizeOptionSchema(BaseModel):
    size: str  # Large | Small | Regular
    label: str  # translated
    price: Price
    external_id: str


class ConsolidatedItemSchema(BaseModel):
    external_id: str
    name: str
    description: Optional[str] = None
    image: Optional[str] = None
    show_size_labels: bool
    sizes: list[SizeOptionSchema]


class TypeGroupSchema(BaseModel):
    type: str
    items: list[ConsolidatedItemSchema]


class MenuTabResponse(BaseModel):
    """GET /api/v1/menu/{tab} — consolidated standard and combo groups."""

    tab: str
    title: str
    language: str
    standard: list[TypeGroupSchema] = Field(default_factory=list)
    combo: list[TypeGroupSchema] = Field(default_factory=list)


class TabSchema(BaseModel):
    id: str
    label: str


class AdminStats(BaseModel):
    total_items: int
    categories_count: int
    avg_price: Price

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import List, Optional, Union

class Product(BaseModel):
    """Canonical product record emitted by the catalog converter.

    ``weight`` is kilograms as a string with three decimals and ``condition`` is
    either ``"New"`` or ``"Fairly Used"``.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    name: str = ""
    price: str = ""
    image: str = ""
    description: str = ""
    weight: str = "0"
    inventory: str = "0"
    condition: str = "New"
    main_category: str = ""
    sub_category: str = ""
    upload_status: str = "active"
    additional_images: List[str] = Field(default_factory=list)

class CatalogSubcategory(BaseModel):
    id: Union[str, int]
    name: str

class CatalogCategory(BaseModel):
    id: Union[str, int]
    name: str
    subcategories: List[CatalogSubcategory] = []

class CatalogConversionResult(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    products: List[Product]
    platform: str
    count: int
    file_name: Optional[str] = None

class ProductExportRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    products: List[Product]
    file_name: Optional[str] = None

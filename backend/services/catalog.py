import io
import re
import warnings
from typing import Dict, Iterable, List, Optional

import pandas as pd

from models.product import CatalogCategory, Product
from services.categories import find_matching_category
from services.errors import CatalogParseError, UnsupportedPlatformError
from services.normalization import (
    clean_product_title,
    convert_to_kg,
    extract_main_category,
    html_to_text,
    map_condition,
)

PLATFORMS = ("shopify", "woocommerce", "generic")
UNCATEGORIZED = "Uncategorized"

# Lower-cased header aliases for exports that follow neither Shopify nor WooCommerce
GENERIC_ALIASES = {
    "name": ["product name", "name", "title", "product_name", "product title"],
    "price": ["product main price", "price", "regular price", "regular_price", "sale price"],
    "image": ["product main image", "image", "image src", "images", "image url", "image_url"],
    "description": ["product description", "description", "body (html)", "body", "short description"],
    "weight": ["product weight", "weight", "weight (kg)", "variant grams", "grams"],
    "weight_unit": ["weight unit", "variant weight unit", "unit"],
    "inventory": ["product inventory", "inventory", "stock", "quantity", "qty", "variant inventory qty"],
    "condition": ["product condition", "condition", "google shopping / condition"],
    "main_category": ["product main category", "category", "categories", "product category", "main category"],
    "sub_category": ["product subcategory", "subcategory", "sub category", "type", "tags"],
}


def read_catalog(text: str) -> List[Dict[str, str]]:
    """Parse a catalog export into a list of string-valued records keyed by header.

    Rows with more cells than the header are truncated, short rows are padded
    with empty strings and blank rows are skipped.
    """
    if not text or not text.strip():
        raise CatalogParseError("The file is empty")

    try:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", pd.errors.ParserWarning)
            df = pd.read_csv(
                io.StringIO(text.lstrip("\ufeff")),
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=True,
                engine="python",
                on_bad_lines=lambda line: line,
            )
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise CatalogParseError(f"The CSV file is invalid: {e}") from e

    df = df.fillna("")
    df.columns = [str(col).strip() for col in df.columns]
    records = []
    for row in df.to_dict("records"):
        record = {key: str(value).strip() for key, value in row.items()}
        if any(record.values()):
            records.append(record)

    if not records:
        raise CatalogParseError("The CSV file is empty or invalid")
    return records


def detect_platform(columns: Iterable[str]) -> str:
    names = {c.strip() for c in columns}
    if {"Handle", "Title"} <= names:
        return "shopify"
    if "Name" in names and ("Regular price" in names or "Categories" in names):
        return "woocommerce"
    return "generic"


LEADING_INT = re.compile(r"\s*[+-]?\d+")


def _to_int(value: Optional[str], default: int = 0) -> int:
    """Leading integer of a cell ("12 pcs" -> 12, "2e3" -> 2), default when there is none."""
    match = LEADING_INT.match(value or "")
    return int(match.group(0)) if match else default


def _clean_price(value: str) -> str:
    return re.sub(r"[^\d.]", "", value or "")


def _resolve_categories(
    name: str,
    description: str,
    fallback_main: str,
    fallback_sub: str,
    categories: List[CatalogCategory],
    threshold: int,
):
    main, sub, confidence = find_matching_category(name, description, categories)
    if confidence >= threshold and main:
        return main, sub or UNCATEGORIZED
    return fallback_main or UNCATEGORIZED, fallback_sub or UNCATEGORIZED


def map_shopify(
    records: List[Dict[str, str]],
    categories: Optional[List[CatalogCategory]] = None,
    threshold: int = 40,
) -> List[Product]:
    """Collapse Shopify variant rows into one product per Handle."""
    groups: Dict[str, List[Dict[str, str]]] = {}
    images: Dict[str, List[tuple]] = {}

    for record in records:
        handle = record.get("Handle", "")
        if not handle:
            continue
        groups.setdefault(handle, []).append(record)
        handle_images = images.setdefault(handle, [])
        src = record.get("Image Src", "")
        if src and not any(url == src for url, _ in handle_images):
            handle_images.append((src, _to_int(record.get("Image Position"), 999)))

    products = []
    for handle, group in groups.items():
        main = group[0]
        sorted_images = [url for url, _ in sorted(images[handle], key=lambda img: img[1])]
        name = main.get("Title", "")
        description = html_to_text(main.get("Body (HTML)", ""))
        main_category, sub_category = _resolve_categories(
            name,
            description,
            extract_main_category(main.get("Product Category", "")),
            main.get("Type", ""),
            categories or [],
            threshold,
        )
        products.append(Product(
            name=name,
            price=main.get("Variant Price", ""),
            image=sorted_images[0] if sorted_images else "",
            description=description,
            # Shopify always stores variant weight in grams
            weight=convert_to_kg(main.get("Variant Grams") or "0", "g"),
            inventory=str(sum(_to_int(r.get("Variant Inventory Qty")) for r in group)),
            condition=map_condition(main.get("Google Shopping / Condition", "")),
            main_category=main_category,
            sub_category=sub_category,
            upload_status=main.get("Status") or "active",
            additional_images=sorted_images[1:],
        ))
    return products


def map_woocommerce(
    records: List[Dict[str, str]],
    categories: Optional[List[CatalogCategory]] = None,
    threshold: int = 40,
) -> List[Product]:
    products = []
    for record in records:
        name = record.get("Name") or record.get("name") or record.get("product_name") or ""
        short_desc = record.get("Short description", "")
        full_desc = record.get("Description") or record.get("description") or ""
        combined = f"{short_desc}\n\n{full_desc}" if short_desc and full_desc else (short_desc or full_desc)
        description = html_to_text(combined)

        price = record.get("Sale price") or record.get("Regular price") or record.get("regular_price") or record.get("price") or ""
        image_field = record.get("Images") or record.get("images") or record.get("image") or ""
        image_urls = [url.strip() for url in image_field.split(",") if url.strip()]
        category_field = record.get("Categories") or record.get("categories") or ""
        tags = record.get("Tags") or record.get("tags") or ""

        main_category, sub_category = _resolve_categories(
            name,
            f"{description} {category_field} {tags}".strip(),
            extract_main_category(category_field),
            extract_main_category(tags),
            categories or [],
            threshold,
        )
        weight = record.get("Weight (kg)") or record.get("Weight") or record.get("weight") or ""
        products.append(Product(
            name=name,
            price=_clean_price(price),
            image=image_urls[0] if image_urls else "",
            description=description,
            weight=convert_to_kg(weight, "kg") if weight else "0",
            inventory=record.get("Stock") or record.get("stock") or record.get("inventory") or "0",
            condition=map_condition(record.get("Condition", "")),
            main_category=main_category,
            sub_category=sub_category,
            upload_status=record.get("Status") or record.get("status") or "active",
            additional_images=image_urls[1:],
        ))
    return products


def _lookup(record: Dict[str, str], field: str) -> str:
    lowered = {key.lower(): value for key, value in record.items()}
    for alias in GENERIC_ALIASES[field]:
        if lowered.get(alias):
            return lowered[alias]
    return ""


def map_generic(
    records: List[Dict[str, str]],
    categories: Optional[List[CatalogCategory]] = None,
    threshold: int = 40,
) -> List[Product]:
    products = []
    for record in records:
        name = _lookup(record, "name")
        description = html_to_text(_lookup(record, "description"))
        category_field = _lookup(record, "main_category")
        main_category, sub_category = _resolve_categories(
            name,
            description,
            extract_main_category(category_field),
            _lookup(record, "sub_category"),
            categories or [],
            threshold,
        )
        weight = _lookup(record, "weight")
        products.append(Product(
            name=name,
            price=_clean_price(_lookup(record, "price")),
            image=_lookup(record, "image"),
            description=description,
            weight=convert_to_kg(weight, _lookup(record, "weight_unit") or "g") if weight else "0",
            inventory=_lookup(record, "inventory") or "0",
            condition=map_condition(_lookup(record, "condition")),
            main_category=main_category,
            sub_category=sub_category,
        ))
    return products


def validate_and_clean(products: List[Product]) -> List[Product]:
    """Clean titles, drop duplicate titles and fill required fields."""
    seen = set()
    cleaned = []
    for product in products:
        name = clean_product_title(product.name)
        if name in seen:
            continue
        seen.add(name)
        cleaned.append(product.model_copy(update={
            "name": name,
            "price": product.price or "0",
            "weight": product.weight or "0",
            "inventory": product.inventory or "0",
            "condition": product.condition or "New",
            "main_category": product.main_category or UNCATEGORIZED,
            "sub_category": product.sub_category or UNCATEGORIZED,
        }))
    return cleaned


MAPPERS = {
    "shopify": map_shopify,
    "woocommerce": map_woocommerce,
    "generic": map_generic,
}


def convert_catalog(
    text: str,
    platform: str = "auto",
    categories: Optional[List[CatalogCategory]] = None,
    threshold: int = 40,
):
    """Normalise a catalog export into canonical products.

    Returns ``(products, platform)`` where ``platform`` is the mapper actually used.
    """
    if platform != "auto" and platform not in PLATFORMS:
        raise UnsupportedPlatformError(f"Unsupported platform: {platform}")

    records = read_catalog(text)
    if platform == "auto":
        platform = detect_platform(records[0].keys())

    products = MAPPERS[platform](records, categories, threshold)
    return validate_and_clean(products), platform

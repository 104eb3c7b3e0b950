import pytest

from models.product import CatalogCategory, Product
from services.catalog import (
    convert_catalog,
    detect_platform,
    map_generic,
    read_catalog,
    validate_and_clean,
)
from services.categories import find_matching_category
from services.errors import CatalogParseError, UnsupportedPlatformError


SHOPIFY_CSV = """Handle,Title,Body (HTML),Type,Product Category,Variant Price,Variant Grams,Variant Inventory Qty,Image Src,Image Position,Google Shopping / Condition,Status
linen-shirt,Linen Shirt,<p>Breathable &amp; light</p>,Shirts,Apparel & Accessories > Clothing > Shirts,25.00,300,4,https://cdn.example.com/shirt-2.jpg,2,new,active
linen-shirt,,,,,25.00,300,6,https://cdn.example.com/shirt-1.jpg,1,,
linen-shirt,,,,,25.00,300,x,https://cdn.example.com/shirt-1.jpg,1,,
wool-hat,Wool Hat,Warm hat,Hats,Apparel & Accessories > Clothing Accessories,12.50,150,3,,,used,draft
"""

WOO_CSV = """Name,Short description,Description,Regular price,Sale price,Categories,Tags,Images,Stock,Weight (kg),Condition
Ceramic Mug,Handmade,<b>Holds 350ml</b>,"1,200.00",,Home > Kitchen,mugs,"https://cdn.example.com/mug.jpg, https://cdn.example.com/mug-2.jpg",9,0.4,Used
"""


def test_read_catalog_pads_and_skips_blank_rows():
    records = read_catalog("a,b,c\n1,2\n\n,,\n4,5,6\n")

    assert records == [{"a": "1", "b": "2", "c": ""}, {"a": "4", "b": "5", "c": "6"}]


def test_read_catalog_rejects_empty_input():
    with pytest.raises(CatalogParseError):
        read_catalog("   ")
    with pytest.raises(CatalogParseError):
        read_catalog("a,b,c\n")


def test_detect_platform():
    assert detect_platform(["Handle", "Title", "Variant Price"]) == "shopify"
    assert detect_platform(["Name", "Regular price"]) == "woocommerce"
    assert detect_platform(["product name", "price"]) == "generic"


def test_shopify_variants_collapse_into_one_product():
    products, platform = convert_catalog(SHOPIFY_CSV)

    assert platform == "shopify"
    assert [p.name for p in products] == ["Linen Shirt", "Wool Hat"]

    shirt = products[0]
    assert shirt.price == "25.00"
    assert shirt.description == "Breathable & light"
    assert shirt.weight == "0.300"
    assert shirt.inventory == "10"
    assert shirt.condition == "New"
    assert shirt.main_category == "Apparel & Accessories"
    assert shirt.sub_category == "Shirts"
    assert shirt.image == "https://cdn.example.com/shirt-1.jpg"
    assert shirt.additional_images == ["https://cdn.example.com/shirt-2.jpg"]

    hat = products[1]
    assert hat.condition == "Fairly Used"
    assert hat.image == ""
    assert hat.upload_status == "draft"


def test_shopify_inventory_uses_leading_integer():
    products, _ = convert_catalog("Handle,Title,Variant Inventory Qty\nh,Hat,2e3\nh,,1e400\nh,,-1 left\n")

    assert products[0].inventory == "2"


def test_shopify_image_position_uses_leading_integer():
    csv_text = (
        "Handle,Title,Image Src,Image Position\n"
        "h,Hat,https://cdn.example.com/c.jpg,abc\n"
        "h,,https://cdn.example.com/b.jpg,2e400\n"
        "h,,https://cdn.example.com/a.jpg,1\n"
    )
    products, _ = convert_catalog(csv_text)

    assert products[0].image == "https://cdn.example.com/a.jpg"
    assert products[0].additional_images == ["https://cdn.example.com/b.jpg", "https://cdn.example.com/c.jpg"]


def test_woocommerce_mapping():
    products, platform = convert_catalog(WOO_CSV)

    assert platform == "woocommerce"
    mug = products[0]
    assert mug.name == "Ceramic Mug"
    assert mug.description == "Handmade\n\nHolds 350ml"
    assert mug.price == "1200.00"
    assert mug.weight == "0.400"
    assert mug.inventory == "9"
    assert mug.condition == "Fairly Used"
    assert mug.main_category == "Home"
    assert mug.sub_category == "mugs"
    assert mug.image == "https://cdn.example.com/mug.jpg"
    assert mug.additional_images == ["https://cdn.example.com/mug-2.jpg"]


def test_generic_mapping_uses_header_aliases():
    records = [{"Product Name": "Lamp", "Price": "$30", "Weight": "2", "Weight Unit": "lb", "Category": "Home / Lighting"}]

    product = map_generic(records)[0]

    assert product.name == "Lamp"
    assert product.price == "30"
    assert product.weight == "0.907"
    assert product.main_category == "Home"
    assert product.sub_category == "Uncategorized"


def test_explicit_platform_overrides_detection():
    products, platform = convert_catalog("product name,price\nLamp,30\n", platform="generic")

    assert platform == "generic"
    assert products[0].price == "30"


def test_unsupported_platform():
    with pytest.raises(UnsupportedPlatformError):
        convert_catalog(SHOPIFY_CSV, platform="magento")


def test_validate_and_clean_dedupes_and_fills_defaults():
    products = [
        Product(name="Hat - Default Title", price="", main_category=""),
        Product(name="Hat"),
        Product(name=""),
    ]

    cleaned = validate_and_clean(products)

    assert [p.name for p in cleaned] == ["Hat", "Untitled Product"]
    assert cleaned[0].price == "0"
    assert cleaned[0].main_category == "Uncategorized"
    assert cleaned[0].sub_category == "Uncategorized"


def test_products_are_immutable():
    product = Product(name="Hat")

    with pytest.raises(Exception):
        product.name = "Cap"


CATEGORIES = [
    CatalogCategory(id="1", name="Kitchen Appliances", subcategories=[{"id": "11", "name": "Coffee Makers"}]),
    CatalogCategory(id="2", name="Fashion", subcategories=[{"id": "21", "name": "Shirts"}]),
]


def test_find_matching_category_scores_keywords():
    main, sub, confidence = find_matching_category("Coffee maker", "Compact kitchen coffee appliance", CATEGORIES)

    assert main == "Kitchen Appliances"
    assert sub == "Coffee Makers"
    assert 0 < confidence <= 100


def test_find_matching_category_without_match():
    assert find_matching_category("Garden hose", "", CATEGORIES) == ("", "", 0)
    assert find_matching_category("Anything", "", []) == ("", "", 0)


def test_confident_match_overrides_extracted_category():
    products, _ = convert_catalog(
        "product name,description,category\nFashion Shirt,Shirts,Misc\n",
        categories=CATEGORIES,
        threshold=30,
    )

    assert products[0].main_category == "Fashion"
    assert products[0].sub_category == "Shirts"


def test_weak_match_falls_back_to_extracted_category():
    products, _ = convert_catalog(
        "product name,description,category\nFashion Shirt,Shirts,Misc\n",
        categories=CATEGORIES,
        threshold=40,
    )

    assert products[0].main_category == "Misc"
    assert products[0].sub_category == "Uncategorized"

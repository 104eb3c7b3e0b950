import re
from typing import Optional

KG_FACTORS = {
    "g": 0.001,
    "lb": 0.453592,
    "oz": 0.0283495,
}

HTML_ENTITIES = [
    ("&nbsp;", " "),
    ("&amp;", "&"),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#39;", "'"),
]

CATEGORY_DELIMITERS = re.compile(r"[>/\\,]")
LEADING_NUMBER = re.compile(r"^\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


def parse_number(value: Optional[str]) -> Optional[float]:
    """Parse the leading number of a string ("12.5 g" -> 12.5), None if there is none."""
    if value is None:
        return None
    match = LEADING_NUMBER.match(str(value))
    if not match:
        return None
    return float(match.group(0))


def convert_to_kg(weight_value: Optional[str], weight_unit: Optional[str] = "g") -> str:
    """Convert a weight to kilograms, formatted to three decimal places.

    Known units are g, lb and oz; any other unit is taken to already be kilograms.
    Non-numeric input yields "0".
    """
    weight = parse_number(weight_value)
    if weight is None:
        return "0"
    unit = (weight_unit or "g").strip().lower()
    weight_in_kg = weight * KG_FACTORS.get(unit, 1.0)
    return f"{weight_in_kg:.3f}"


def map_condition(condition: Optional[str]) -> str:
    """Map free-form condition text to "New" or "Fairly Used"."""
    if not condition or not condition.strip():
        return "New"
    if "new" in condition.lower():
        return "New"
    return "Fairly Used"


def _category_segments(category: Optional[str]):
    if not category:
        return []
    return [part.strip() for part in CATEGORY_DELIMITERS.split(category) if part.strip()]


def extract_main_category(category: Optional[str]) -> str:
    segments = _category_segments(category)
    return segments[0] if segments else ""


def extract_sub_category(category: Optional[str]) -> str:
    segments = _category_segments(category)
    return segments[1] if len(segments) > 1 else ""


def html_to_text(html: Optional[str]) -> str:
    if not html:
        return ""
    text = re.sub(r"<[^>]*>", "", html)
    for entity, replacement in HTML_ENTITIES:
        text = text.replace(entity, replacement)
    return text


def clean_product_title(title: Optional[str]) -> str:
    """Drop Shopify "Default Title" artefacts from a product name."""
    if not title:
        return "Untitled Product"
    cleaned = re.sub(r"\s*-\s*Default Title$", "", title, flags=re.IGNORECASE)
    cleaned = re.sub(r"^Default Title\s*-\s*", "", cleaned, flags=re.IGNORECASE)
    cleaned = re.sub(r"^Default Title$", "", cleaned, flags=re.IGNORECASE)
    cleaned = cleaned.strip()
    return cleaned or "Untitled Product"

import httpx
from typing import List, Optional, Tuple

from models.product import CatalogCategory


async def fetch_categories(url: str, transport: Optional[httpx.AsyncBaseTransport] = None) -> List[CatalogCategory]:
    """Fetch the marketplace category tree. Any failure yields an empty list."""
    if not url:
        return []
    try:
        async with httpx.AsyncClient(transport=transport, timeout=15.0) as client:
            response = await client.get(url)
        if response.status_code != 200:
            print(f"Failed to fetch categories: {response.status_code} - {response.text}")
            return []
        return [CatalogCategory(**item) for item in response.json()]
    except Exception as e:
        print(f"Error fetching categories: {e}")
        return []


def _keyword_score(name: str, search_text: str) -> int:
    # longer keywords weigh more; words of two letters or less are ignored
    return sum(len(word) for word in name.lower().split() if len(word) > 2 and word in search_text)


def find_matching_category(
    product_name: str,
    product_description: str,
    categories: List[CatalogCategory],
) -> Tuple[str, str, int]:
    """Score categories by keyword overlap with the product text.

    Returns ``(main_category, sub_category, confidence)`` with confidence in 0-100.
    """
    if not categories:
        return "", "", 0

    search_text = f"{product_name} {product_description}".lower()
    best = None
    for category in categories:
        score = _keyword_score(category.name, search_text)
        sub_name, sub_score = "", 0
        for subcategory in category.subcategories:
            candidate = _keyword_score(subcategory.name, search_text)
            if candidate > sub_score:
                sub_name, sub_score = subcategory.name, candidate
        if best is None or score > best[2]:
            best = (category.name, sub_name, score)

    if best is None or best[2] == 0:
        return "", "", 0

    max_possible = len(product_name) + min(100, len(product_description))
    confidence = min(100, round(best[2] / max_possible * 100)) if max_possible else 0
    return best[0], best[1], confidence

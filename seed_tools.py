import asyncio
from config import settings
from database import Database

TOOLS = [
    {"tool_slug": "csv-converter", "name": "CSV Converter", "description": "Convert CSV text to JSON, arrays or objects"},
    {"tool_slug": "converter", "name": "Product Catalog Converter", "description": "Normalise Shopify and WooCommerce exports"},
    {"tool_slug": "bloggen", "name": "Blog Generator", "description": "AI blog post generation"},
    {"tool_slug": "imagegen", "name": "Image Generator", "description": "AI product image generation"},
    {"tool_slug": "captiongen", "name": "Caption Generator", "description": "AI social caption generation"},
    {"tool_slug": "copygen", "name": "Copy Generator", "description": "AI marketing copy generation"},
]

async def seed_tools():
    db = Database(settings.supabase_url, settings.supabase_key)

    for tool in TOOLS:
        existing = await db.get_tool_by_slug(tool["tool_slug"])
        if existing:
            print(f'Tool already registered: {tool["tool_slug"]} (id {existing["id"]})')
            continue

        created = await db.insert("ai_tools", tool)
        if created:
            print(f'Registered tool {created["tool_slug"]} with id {created["id"]}')
        else:
            print(f'Failed to register tool {tool["tool_slug"]}')

if __name__ == "__main__":
    asyncio.run(seed_tools())

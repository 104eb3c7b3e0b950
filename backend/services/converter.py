import pandas as pd
import json
import io
from typing import Any, Dict, List
from datetime import datetime, timezone

from models.product import Product

EXPORT_COLUMNS = [
    ("Product Name", "name"),
    ("Product Main Price", "price"),
    ("Product Main Image", "image"),
    ("Product Description", "description"),
    ("Product Weight", "weight"),
    ("Product Inventory", "inventory"),
    ("Product Condition", "condition"),
    ("Product Main Category", "main_category"),
    ("Product Subcategory", "sub_category"),
]

EXPORT_FORMATS = ("csv", "json", "excel")


def _quote(value: Any) -> str:
    return '"' + str(value or "").replace('"', '""') + '"'


class DataConverter:
    """Serialises normalised products into downloadable files."""

    def to_csv(self, products: List[Product]) -> str:
        """Fixed 9-column CSV; every data field quoted, rows joined by newline"""
        lines = [",".join(header for header, _ in EXPORT_COLUMNS)]
        for product in products:
            lines.append(",".join(_quote(getattr(product, attr)) for _, attr in EXPORT_COLUMNS))
        return "\n".join(lines)

    def to_json(self, products: List[Product]) -> str:
        """Convert products to formatted JSON"""
        output_data = {
            "products": [p.model_dump(by_alias=True) for p in products],
            "count": len(products),
            "generated_at": datetime.now(timezone.utc).isoformat(),
        }
        return json.dumps(output_data, indent=2, ensure_ascii=False)

    def to_excel(self, products: List[Product]) -> bytes:
        """Convert products to an Excel workbook"""
        rows = [
            {header: getattr(product, attr) for header, attr in EXPORT_COLUMNS}
            for product in products
        ]
        df = pd.DataFrame(rows, columns=[header for header, _ in EXPORT_COLUMNS])

        try:
            excel_buffer = io.BytesIO()
            with pd.ExcelWriter(excel_buffer, engine='openpyxl') as writer:
                df.to_excel(writer, sheet_name='Products', index=False)

                metadata = pd.DataFrame(
                    [
                        ['Generated', datetime.now(timezone.utc).isoformat()],
                        ['Total Products', str(len(products))],
                    ],
                    columns=['Field', 'Value'],
                )
                metadata.to_excel(writer, sheet_name='Metadata', index=False)

            excel_bytes = excel_buffer.getvalue()
            if not excel_bytes.startswith(b'PK'):
                raise ValueError("Generated file does not appear to be a valid Excel file")
            return excel_bytes

        except Exception as e:
            print(f"Error generating Excel file: {str(e)}")
            raise ValueError(f"Failed to generate Excel file: {str(e)}")

    def convert_to_formats(self, products: List[Product], formats: list) -> Dict[str, Any]:
        """Convert products to multiple formats"""
        results = {}

        for fmt in formats:
            if fmt.lower() == 'csv':
                results['csv'] = self.to_csv(products)
            elif fmt.lower() == 'excel':
                results['excel'] = self.to_excel(products)
            elif fmt.lower() == 'json':
                results['json'] = self.to_json(products)

        return results


def get_converter() -> DataConverter:
    """FastAPI dependency providing the export serialiser"""
    return DataConverter()

from fastapi import APIRouter, UploadFile, File, Form, HTTPException, status, Depends
from fastapi.responses import JSONResponse, Response
from typing import Any, Dict, Optional
from config import settings
from database import Database, get_database
from models.product import CatalogConversionResult, ProductExportRequest
from models.user import UserResponse
from services.auth import get_optional_user
from services.catalog import PLATFORMS, convert_catalog
from services.categories import fetch_categories
from services.converter import EXPORT_FORMATS, DataConverter, get_converter
from services.errors import CsvConversionError
from services.operation_logger import with_operation_logging

router = APIRouter(prefix="/api/tools/converter", tags=["product_converter"])

# Upload size limit (10MB)
MAX_UPLOAD_BYTES = 10 * 1024 * 1024


async def run_catalog_conversion(params: Dict[str, Any]) -> Dict[str, Any]:
    categories = await fetch_categories(settings.categories_url)
    products, platform = convert_catalog(
        params["content"],
        params["platform"],
        categories,
        settings.category_confidence_threshold,
    )
    result = CatalogConversionResult(
        products=products,
        platform=platform,
        count=len(products),
        file_name=params["fileName"],
    )
    return result.model_dump(by_alias=True)


def describe_upload(params: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "fileName": params["fileName"],
        "fileSize": len(params["content"]),
        "platform": params["platform"],
    }


@router.post("/upload")
async def upload_catalog(
    file: UploadFile = File(...),
    platform: str = Form("auto"),
    db: Database = Depends(get_database),
    current_user: Optional[UserResponse] = Depends(get_optional_user),
):
    platform = platform.strip().lower()
    if platform != "auto" and platform not in PLATFORMS:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": "Unsupported platform"})

    file_content = await file.read()
    if not file_content:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": "The file is empty"})
    if len(file_content) > MAX_UPLOAD_BYTES:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": "File size must be less than 10MB"})

    try:
        content = file_content.decode("utf-8-sig")
    except UnicodeDecodeError:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": "The file must be UTF-8 encoded text"})

    async def resolve_user():
        return current_user

    convert_with_logging = with_operation_logging(
        "converter",
        run_catalog_conversion,
        store=db,
        get_user=resolve_user,
        create_pending_task=True,
        input_meta=describe_upload,
    )

    try:
        return await convert_with_logging({
            "content": content,
            "platform": platform,
            "fileName": file.filename,
        })
    except CsvConversionError as e:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": str(e)})
    except Exception as e:
        print(f"Error processing CSV: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Failed to process the CSV file"},
        )


@router.post("/export/{format}")
async def export_products(
    format: str,
    export_request: ProductExportRequest,
    converter: DataConverter = Depends(get_converter),
):
    fmt = format.lower()
    if fmt not in EXPORT_FORMATS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid format. Supported: csv, excel, json"
        )

    file_name = f"auqli_formatted_{export_request.file_name or 'products'}"
    try:
        data = converter.convert_to_formats(export_request.products, [fmt])[fmt]
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to generate download: {str(e)}"
        )

    if fmt == "csv":
        return Response(
            content=data,
            media_type="text/csv; charset=utf-8",
            headers={"Content-Disposition": f"attachment; filename={file_name}.csv"}
        )
    elif fmt == "excel":
        return Response(
            content=data,
            media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            headers={"Content-Disposition": f"attachment; filename={file_name}.xlsx"}
        )
    return Response(
        content=data,
        media_type="application/json",
        headers={"Content-Disposition": f"attachment; filename={file_name}.json"}
    )

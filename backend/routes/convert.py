from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from typing import Any, Dict, Optional
from config import settings
from database import Database, get_database
from models.conversion import ConversionOptions, ConversionRequest
from models.user import UserResponse
from services.auth import get_optional_user
from services.csv_parser import convert, validate_input
from services.errors import CsvConversionError
from services.operation_logger import with_operation_logging

router = APIRouter(prefix="/api/tools", tags=["csv_converter"])


async def run_csv_conversion(params: Dict[str, Any]) -> Dict[str, Any]:
    result = convert(params["csvData"], params["targetFormat"], ConversionOptions(**params["options"]))
    return result.model_dump(by_alias=True, mode="json")


def preview_input(params: Dict[str, Any]) -> Dict[str, Any]:
    """Operation metadata keeps only the head of the CSV payload"""
    csv_data = params["csvData"]
    limit = settings.csv_input_preview_chars
    return {
        "csvData": csv_data[:limit] + "..." if len(csv_data) > limit else csv_data,
        "targetFormat": params["targetFormat"],
        "options": params["options"],
    }


def error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.post("/csv-converter")
async def convert_csv_data(
    request: Request,
    db: Database = Depends(get_database),
    current_user: Optional[UserResponse] = Depends(get_optional_user),
):
    try:
        body = await request.json()
        payload = ConversionRequest.model_validate(body if isinstance(body, dict) else {})
    except (ValueError, ValidationError) as e:
        print(f"CSV CONVERTER: invalid request body: {e}")
        return error_response("Invalid request body", status.HTTP_400_BAD_REQUEST)

    if not payload.csv_data:
        return error_response("CSV data is required", status.HTTP_400_BAD_REQUEST)

    target_format = payload.target_format or "json"
    options = payload.options or ConversionOptions()

    try:
        validate_input(payload.csv_data, target_format, options)
    except CsvConversionError as e:
        return error_response(str(e), status.HTTP_400_BAD_REQUEST)

    async def resolve_user():
        return current_user

    convert_with_logging = with_operation_logging(
        "csv-converter",
        run_csv_conversion,
        store=db,
        get_user=resolve_user,
        create_pending_task=True,
        input_meta=preview_input,
    )

    try:
        return await convert_with_logging({
            "csvData": payload.csv_data,
            "targetFormat": target_format,
            "options": options.model_dump(),
        })
    except CsvConversionError as e:
        return error_response(str(e), status.HTTP_400_BAD_REQUEST)
    except Exception as e:
        print(f"Error in CSV converter: {e}")
        return error_response("Failed to process CSV data", status.HTTP_500_INTERNAL_SERVER_ERROR)

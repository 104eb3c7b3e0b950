from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Dict, List, Literal, Optional, Union
from datetime import datetime

TargetFormat = Literal["json", "array", "object"]

class ConversionOptions(BaseModel):
    headers: bool = True
    delimiter: str = ","
    # RFC 4180 quoting; plain split when False
    quoted: bool = False

class ConversionRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    csv_data: Optional[str] = None
    target_format: Optional[TargetFormat] = None
    options: Optional[ConversionOptions] = None

class ConversionResult(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    result: Union[List[Dict[str, str]], List[List[str]]]
    format: TargetFormat
    row_count: int
    original_size: int
    processed_at: datetime
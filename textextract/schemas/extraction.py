import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class ExtractionRequest(BaseModel):
    file_data: str = Field(..., description="Base64 encoded file contents")
    file_name: str = Field(..., min_length=1)
    file_type: str = Field(..., min_length=1)
    openai_api_key: Optional[str] = None
    user_id: Optional[str] = None
    enhance_text: bool = False


class BatchFile(BaseModel):
    file_data: str
    file_name: str = Field(..., min_length=1)
    file_type: str = Field(..., min_length=1)


class BatchExtractionRequest(BaseModel):
    files: list[BatchFile]
    openai_api_key: Optional[str] = None
    user_id: Optional[str] = None
    enhance_text: bool = False


class ExtractionData(BaseModel):
    extracted_text: str
    confidence_score: float
    processing_time: int
    file_name: str
    extraction_id: Optional[uuid.UUID] = None
    extraction_method: Optional[str] = None
    enhanced: bool = False


class BatchItemResult(BaseModel):
    file_name: str
    success: bool
    data: Optional[ExtractionData] = None
    error: Optional[str] = None


class BatchExtractionResponse(BaseModel):
    success: bool = True
    results: list[BatchItemResult]
    total: int
    successful: int
    failed: int


class ExtractionResponse(BaseModel):
    id: uuid.UUID
    user_id: str
    file_name: str
    file_type: str
    file_size_bytes: int
    extracted_text: str
    confidence_score: float
    processing_time_ms: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ExtractionQuery(BaseModel):
    user_id: str = Field(..., min_length=1)
    limit: int = Field(default=10, ge=1, le=100)
    offset: int = Field(default=0, ge=0)
    search: Optional[str] = None
    file_type: Optional[str] = None


class ExtractionListData(BaseModel):
    extractions: list[ExtractionResponse]
    total: int
    page: int
    limit: int


class ExtractionTextUpdate(BaseModel):
    user_id: str = Field(..., min_length=1)
    extracted_text: str


class EnhanceRequest(BaseModel):
    text: str
    context_hint: Optional[str] = None
    openai_api_key: Optional[str] = None
    user_id: Optional[str] = None


class EnhanceData(BaseModel):
    enhanced_text: str
    confidence: float
    enhanced: bool

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError
from typing import List, Optional


REQUIRED_MESSAGES = {
    "resume_text": "Resume text is required.",
    "type": "Analysis type is required.",
}


# Incoming analysis request (camelCase on the wire)
class AnalysisRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    resume_text: Optional[str] = Field(None, alias="resumeText", validate_default=True, description="Plain-text resume. (Mandatory)")
    type: Optional[str] = Field(None, validate_default=True, description="One of jobs, critique or contacts. (Mandatory)")
    location: Optional[str] = Field(None, description="Location filter for job and contact searches. (Optional)")
    date_posted: Optional[str] = Field(None, alias="datePosted", description="Posting-date filter; 'any' means unset. (Optional)")

    @field_validator("resume_text", "type")
    def validate_mandatory_fields(cls, value: Optional[str], info) -> str:
        """Ensure mandatory fields are present and not blank."""
        if value is None or not value.strip():
            raise PydanticCustomError("missing_field", REQUIRED_MESSAGES[info.field_name])
        return value


# A single web source the model grounded its answer on
class Source(BaseModel):
    uri: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)


# Successful response body
class AnalysisResult(BaseModel):
    text: str
    sources: List[Source] = []


# Failure response body
class ErrorResponse(BaseModel):
    error: str

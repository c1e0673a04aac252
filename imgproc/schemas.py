from pydantic import BaseModel, Field
from typing import Literal

class ErrorResponse(BaseModel):
    code: int = Field(description="HTTP status code")
    message: str
    status: Literal["error"] = "error"

class HealthResponse(BaseModel):
    status: str = "ok"

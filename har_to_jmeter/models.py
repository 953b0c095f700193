"""
Pydantic models for HAR to JMeter requests and responses.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Optional, Union
from enum import Enum


class AIProvider(str, Enum):
    """LLM providers able to generate a test plan"""
    OPENAI = "openai"
    GOOGLE = "google"

    @classmethod
    def resolve(cls, value: Optional[str]) -> "AIProvider":
        """Anything other than "google" falls back to OpenAI."""
        if value == cls.GOOGLE.value:
            return cls.GOOGLE
        return cls.OPENAI


class CamelModel(BaseModel):
    """Base model accepting both camelCase aliases and field names"""
    model_config = ConfigDict(populate_by_name=True)


class LoadConfig(CamelModel):
    """Load profile requested by the caller"""
    thread_count: int = Field(alias="threadCount", description="Number of virtual users")
    ramp_up_time: int = Field(alias="rampUpTime", description="Ramp-up period in seconds")
    duration: int = Field(description="Test duration in seconds")
    loop_count: int = Field(alias="loopCount", description="Iterations per thread")


class GenerateRequest(CamelModel):
    """Body of a conversion request"""
    har_content: Union[str, Dict[str, Any]] = Field(
        alias="harContent",
        description="HAR document, either raw JSON text or an already parsed object",
    )
    load_config: Optional[LoadConfig] = Field(default=None, alias="loadConfig")
    test_plan_name: Optional[str] = Field(default="HAR Performance Test", alias="testPlanName")
    ai_provider: Optional[str] = Field(default=AIProvider.OPENAI.value, alias="aiProvider")


# ============================================================================
# RESPONSE MODELS
# ============================================================================

class GenerationMetadata(CamelModel):
    """Where the test plan came from"""
    provider: str = Field(description="Display name of the LLM provider")
    generated_by_ai: bool = Field(default=True, alias="generatedByAI")
    test_plan_name: Optional[str] = Field(alias="testPlanName")


class ResultSummary(CamelModel):
    """Aggregate statistics over the HAR entries"""
    total_requests: int = Field(alias="totalRequests")
    unique_domains: List[str] = Field(alias="uniqueDomains")
    methods_used: List[str] = Field(alias="methodsUsed")
    avg_response_time: Optional[float] = Field(
        alias="avgResponseTime",
        description="Mean entry time in ms, null for an empty HAR",
    )


class GenerateResponse(CamelModel):
    """Successful conversion result"""
    jmx_content: str = Field(alias="jmxContent")
    metadata: GenerationMetadata
    summary: ResultSummary


class ErrorResponse(BaseModel):
    """Failure envelope"""
    error: str
    stack: Optional[str] = None

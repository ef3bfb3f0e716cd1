from pydantic import BaseModel, Field

from models.schemas import AnalysisKind


class TextAnalyzeRequest(BaseModel):
    text: str = Field(..., max_length=20000, description="Raw response text from the vision model")
    analysis_type: AnalysisKind = Field(AnalysisKind.FRESHNESS, description="freshness, species or both")

"""
Pydantic schemas for bias analysis
"""
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional, Union


class BiasAnalysisRequest(BaseModel):
    contextFields: Optional[Dict[str, Any]] = None
    fieldsToAnalyze: Dict[str, Union[str, List[Optional[str]], None]]


class BiasFinding(BaseModel):
    hasBias: bool = False
    biasType: Optional[str] = None
    suggestions: List[str] = Field(default_factory=list)
    explanation: str = ""


class BiasAnalysisResponse(BaseModel):
    success: bool = True
    recommendations: Dict[str, BiasFinding]
    note: Optional[str] = None

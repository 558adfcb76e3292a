"""Schemas for previous-year question paper (PYQ) analysis results."""
from typing import Any, Dict, List

from pydantic import Field, field_validator

from api.schemas.study_materials import CamelModel


class TopicFrequency(CamelModel):
    topic: str
    frequency: float
    percentage: float


class TopicDistribution(CamelModel):
    name: str
    value: float


class Prediction(CamelModel):
    topic: str
    probability: float


class ExamPredictions(CamelModel):
    ct1: List[Prediction] = Field(default_factory=list)
    ct2: List[Prediction] = Field(default_factory=list)
    endsem: List[Prediction] = Field(default_factory=list)


class SubjectAnalysis(CamelModel):
    subject: str
    semester: int
    topic_frequency: List[TopicFrequency]
    topic_distribution: List[TopicDistribution]
    predictions: ExamPredictions
    study_recommendation: str


class YearData(CamelModel):
    year: str
    topics: List[TopicFrequency]

    @field_validator("year", mode="before")
    @classmethod
    def _year_as_text(cls, v):
        return str(v)


class SubjectComparison(CamelModel):
    subject: str
    semester: int
    year_data: List[YearData]


class PyqAnalysisResult(CamelModel):
    subject_analyses: List[SubjectAnalysis]
    comparisons: List[SubjectComparison] = Field(default_factory=list)
    timelines: List[SubjectComparison] = Field(default_factory=list)


class PyqAnalysisResponse(CamelModel):
    success: bool = True
    data: Dict[str, Any]

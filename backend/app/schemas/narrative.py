"""Schemas for the narrative report (JSON wire contract).

Field names on the wire are camelCase; the dashboard reads them as-is.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


TrendDirection = Literal["up", "down", "flat"]
SignalSourceName = Literal["helius", "github", "social"]


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class TopProjectResponse(_WireModel):
    name: str
    description: str = ""
    url: Optional[str] = None
    source: Optional[SignalSourceName] = None


class DataSourcesResponse(_WireModel):
    helius: int = Field(0, ge=0)
    github: int = Field(0, ge=0)
    social: int = Field(0, ge=0)


class NarrativeResponse(_WireModel):
    id: str
    name: str
    description: str
    confidence: float = Field(ge=0.0, le=1.0)
    trending_keywords: list[str] = Field(default_factory=list, alias="trendingKeywords", max_length=8)
    top_projects: list[TopProjectResponse] = Field(default_factory=list, alias="topProjects", max_length=5)
    project_ideas: list[str] = Field(default_factory=list, alias="projectIdeas")
    data_sources: DataSourcesResponse = Field(default_factory=DataSourcesResponse, alias="dataSources")
    last_updated: str = Field(alias="lastUpdated")


class ReportResponse(_WireModel):
    timestamp: str
    total_narratives: int = Field(alias="totalNarratives")
    trending: TrendDirection
    narratives: list[NarrativeResponse]


class NarrativeDefinitionResponse(_WireModel):
    id: str
    name: str
    description: str
    keywords: list[str]

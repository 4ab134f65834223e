from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Dict, Any, List, Literal, Optional


class ColumnProfile(BaseModel):
    """列画像：类型、基数和样例值"""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    type: str
    unique_count: int = Field(alias="uniqueCount")
    sample_values: List[Any] = Field(default_factory=list, alias="sampleValues")


class MetricSummary(BaseModel):
    """数值列的聚合指标"""

    count: int
    sum: float
    average: float
    min: float
    max: float


class ChartSpec(BaseModel):
    """图表描述：类型、标签、数值和标题，与渲染技术无关"""

    type: Literal["pie", "bar"]
    labels: List[str]
    data: List[int]
    title: str

    @model_validator(mode="after")
    def _labels_match_data(self) -> "ChartSpec":
        if len(self.labels) != len(self.data):
            raise ValueError("labels and data must have the same length")
        return self


class AnalysisResult(BaseModel):
    """单个问题的分析结果：确定性计算 + LLM 文字"""

    model_config = ConfigDict(populate_by_name=True)

    type: Literal["metrica", "grafica"]
    ai_response: str = Field(alias="aiResponse")
    calculations: Dict[str, Any] = Field(default_factory=dict)
    chart_data: Optional[ChartSpec] = Field(default=None, alias="chartData")

    def to_response(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class ComprehensiveAnalysis(BaseModel):
    """报告使用的完整分析 (schema + metrics + distributions)"""

    model_config = ConfigDict(populate_by_name=True)

    total_records: int = Field(default=0, alias="totalRecords")
    columns: List[ColumnProfile] = Field(default_factory=list)
    metrics: Dict[str, MetricSummary] = Field(default_factory=dict)
    distributions: Dict[str, Dict[str, int]] = Field(default_factory=dict)

    def to_response(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)

from typing import Dict, Any, Optional, List
import io
import logging

import matplotlib
matplotlib.use("Agg")  # 非交互式后端
import matplotlib.pyplot as plt

from .base_agent import BaseAgent
from ..analysis.question_router import PIE_MAX_CATEGORIES, chart_spec
from ..models.analysis import ChartSpec, ComprehensiveAnalysis

logger = logging.getLogger(__name__)

# 报告中最多插入的图表数量
MAX_REPORT_CHARTS = 3

COLORS = ["#36A2EB", "#FF6384", "#FFCE56", "#4BC0C0", "#9966FF", "#FF9F40", "#C7C7C7"]


def render_chart_png(spec: ChartSpec, width: float = 8.0, height: float = 6.0) -> bytes:
    """把图表描述渲染为PNG字节"""
    fig, ax = plt.subplots(figsize=(width, height))
    try:
        colors = [COLORS[i % len(COLORS)] for i in range(len(spec.data))]
        if spec.type == "pie":
            ax.pie(spec.data, labels=spec.labels, colors=colors, autopct="%1.1f%%", startangle=90)
            ax.axis("equal")
        else:
            ax.bar(spec.labels, spec.data, color=colors, edgecolor="#333333", linewidth=0.5)
            ax.tick_params(axis="x", labelrotation=30)
        ax.set_title(spec.title, fontsize=16)
        fig.tight_layout()

        buffer = io.BytesIO()
        fig.savefig(buffer, format="png", dpi=100, facecolor="white")
        return buffer.getvalue()
    finally:
        plt.close(fig)


class VisualizationAgent(BaseAgent):
    """负责把报告中的分布渲染为图片的智能体"""

    def __init__(self, max_charts: int = MAX_REPORT_CHARTS):
        super().__init__("Visualization")
        self.max_charts = max_charts

    async def process(self, input_data: Dict[str, Any], context: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        为完整分析中的前几个分布生成图表

        Returns:
            {"charts": [{"title": str, "spec": ChartSpec, "image": bytes}, ...]}
        """
        if not await self.validate_input(input_data):
            return {"error": "Invalid input data", "charts": []}

        analysis: ComprehensiveAnalysis = input_data["comprehensive_analysis"]
        charts: List[Dict[str, Any]] = []
        for column in list(analysis.distributions)[:self.max_charts]:
            distribution = analysis.distributions[column]
            kind = "pie" if len(distribution) <= PIE_MAX_CATEGORIES else "bar"
            spec = chart_spec(column, distribution, kind)
            try:
                image = render_chart_png(spec)
            except Exception as e:
                # 图表只是报告的附加内容，渲染失败时跳过
                logger.error(f"Error generating chart for {column}: {str(e)}")
                continue
            charts.append({"title": spec.title, "spec": spec, "image": image})

        logger.info(f"Generated {len(charts)} charts")
        return {"charts": charts}

    async def validate_input(self, input_data: Dict[str, Any]) -> bool:
        return isinstance(input_data.get("comprehensive_analysis"), ComprehensiveAnalysis)

import logging
from typing import Dict, Any, Optional

from .base_agent import BaseAgent
from ..analysis.question_router import build_comprehensive_analysis
from ..data.validator import DataValidator

logger = logging.getLogger(__name__)


class DataUnderstandingAgent(BaseAgent):
    """负责生成数据集完整分析（列画像、指标、分布）的智能体"""

    def __init__(self):
        super().__init__("DataUnderstanding")

    async def process(self, input_data: Dict[str, Any], context: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        分析数据集

        Args:
            input_data: 包含 "dataset"（记录列表）的字典
            context: 可选的上下文信息

        Returns:
            {"comprehensive_analysis": ComprehensiveAnalysis, "validation": 验证详情}
        """
        if not await self.validate_input(input_data):
            logger.error("DataUnderstandingAgent 输入验证失败")
            return {"error": "Invalid input data for DataUnderstandingAgent"}

        dataset = input_data["dataset"]

        _, validation = DataValidator.validate_dataset(dataset)
        for warning in validation["warnings"]:
            logger.warning(f"Data shape anomaly: {warning['message']}")

        analysis = build_comprehensive_analysis(dataset)
        logger.info(
            f"Comprehensive analysis ready: {analysis.total_records} records, "
            f"{len(analysis.metrics)} numeric columns, {len(analysis.distributions)} distributions"
        )

        return {
            "comprehensive_analysis": analysis,
            "validation": validation
        }

    async def validate_input(self, input_data: Dict[str, Any]) -> bool:
        return "dataset" in input_data and input_data["dataset"] is not None

from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence
import json
import logging

from .base_agent import BaseAgent
from ..models.analysis import ComprehensiveAnalysis
from ..models.session import ConversationEntry, render_context
from ..utils.llm_utils import get_llm_response
from ..utils.prompts import ANALYSIS_TEMPLATE, REPORT_TEMPLATE

logger = logging.getLogger(__name__)

LLMCallable = Callable[[str], Awaitable[str]]


def dump_json(value: Any) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False, default=str)


class InterpretationAgent(BaseAgent):
    """负责组装提示并调用LLM生成文字回答和报告正文的智能体"""

    def __init__(self, llm: Optional[LLMCallable] = None):
        super().__init__("Interpretation")
        self.llm = llm if llm is not None else get_llm_response

    async def process(self, input_data: Dict[str, Any], context: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        生成LLM文字

        Args:
            input_data: mode 为 "question" 时需要 question、columns、dataset、sample_rows、history；
                        mode 为 "report" 时需要 columns、dataset、comprehensive_analysis
            context: 可选的上下文信息

        Returns:
            {"text": LLM响应, "prompt": 实际发送的提示}
        """
        if not await self.validate_input(input_data):
            logger.error("InterpretationAgent 输入验证失败")
            return {"error": "Invalid input data for InterpretationAgent"}

        if input_data["mode"] == "report":
            prompt = self.build_report_prompt(
                input_data["columns"],
                input_data["dataset"],
                input_data["comprehensive_analysis"]
            )
        else:
            prompt = self.build_question_prompt(
                input_data["question"],
                input_data["columns"],
                input_data["dataset"],
                input_data.get("sample_rows", 5),
                input_data.get("history", [])
            )

        logger.info(f"Calling LLM ({input_data['mode']}), prompt length {len(prompt)}")
        text = await self.llm(prompt)
        return {"text": text, "prompt": prompt}

    async def validate_input(self, input_data: Dict[str, Any]) -> bool:
        mode = input_data.get("mode")
        if mode == "question":
            return bool(input_data.get("question")) and "dataset" in input_data
        if mode == "report":
            return "comprehensive_analysis" in input_data and "dataset" in input_data
        return False

    @staticmethod
    def build_question_prompt(question: str, columns: List[str], dataset: Sequence[Dict[str, Any]],
                              sample_rows: int, history: List[ConversationEntry]) -> str:
        return ANALYSIS_TEMPLATE.format(
            columns=", ".join(columns),
            totalRows=len(dataset),
            sampleData=dump_json(list(dataset[:sample_rows])),
            question=question,
            conversationHistory=render_context(history)
        )

    @staticmethod
    def build_report_prompt(columns: List[str], dataset: Sequence[Dict[str, Any]],
                            analysis: ComprehensiveAnalysis) -> str:
        return REPORT_TEMPLATE.format(
            totalRows=analysis.total_records,
            columns=", ".join(columns),
            sampleData=dump_json(list(dataset[:3])),
            distributions=dump_json(analysis.distributions),
            metrics=dump_json({column: summary.model_dump() for column, summary in analysis.metrics.items()})
        )

from typing import Dict, Any, List, Optional, Sequence
import asyncio
import logging
import traceback
from datetime import timedelta

from ..agents.data_agent import DataUnderstandingAgent
from ..agents.interpret_agent import InterpretationAgent, LLMCallable
from ..agents.viz_agent import VisualizationAgent
from ..analysis.metrics import MetricPolicy
from ..analysis.question_router import build_response
from ..config import settings
from ..errors import CollaboratorFailure, InputError, NotFoundError
from ..models.analysis import AnalysisResult
from ..models.session import CONTEXT_WINDOW, Session
from ..reports.word_report import render_report_docx
from .session_store import SessionStore

logger = logging.getLogger(__name__)

# 创建全局orchestrator实例
_orchestrator_instance = None

def get_orchestrator() -> "Orchestrator":
    """获取全局orchestrator实例"""
    global _orchestrator_instance
    if _orchestrator_instance is None:
        _orchestrator_instance = Orchestrator()
        logger.info("Created new orchestrator instance")
    return _orchestrator_instance


class Orchestrator:
    """
    协调器：管理会话，并串联分析、LLM和报告渲染 (Coordinates sessions, analysis, LLM and report rendering)
    """

    def __init__(self, store: Optional[SessionStore] = None, llm: Optional[LLMCallable] = None,
                 policy: Optional[MetricPolicy] = None):
        if store is None:
            store = SessionStore(ttl=timedelta(seconds=settings.SESSION_TTL_SECONDS))
        if policy is None:
            policy = MetricPolicy(
                excluded_substrings=tuple(settings.METRIC_EXCLUDED_SUBSTRINGS),
                require_positive_average=settings.METRIC_REQUIRE_POSITIVE_AVERAGE
            )
        self.store = store
        self.policy = policy

        # 初始化智能体
        self.data_agent = DataUnderstandingAgent()
        self.interpret_agent = InterpretationAgent(llm)
        self.viz_agent = VisualizationAgent()
        logger.info("Orchestrator initialized")

    def resolve_session(self, session_id: Optional[str] = None) -> Session:
        """
        查找会话；未提供 session_id 时使用最近创建的有效会话

        Raises:
            NotFoundError: 会话不存在或已过期
        """
        if session_id:
            session = self.store.get(session_id)
        else:
            session = self.store.most_recent_active()

        if session is None:
            logger.warning(f"Session not found: {session_id or '<most recent>'}")
            raise NotFoundError("No hay sesiones activas. Sube un archivo primero.")
        return session

    async def upload(self, dataset: Sequence[Dict[str, Any]],
                     question: Optional[str] = None) -> Dict[str, Any]:
        """
        用上传的数据创建会话，并可选地回答第一个问题

        Args:
            dataset: 解析后的记录列表
            question: 可选的初始问题

        Returns:
            {"session": Session, "initial_response": AnalysisResult | None}
        """
        columns = list(dataset[0].keys()) if dataset else []
        session = self.store.create(dataset, columns)

        initial_response = None
        if question and question.strip():
            try:
                initial_response = await self.ask(session, question, sample_rows=3, with_history=False)
            except CollaboratorFailure as e:
                # 初始问题失败不影响上传本身
                logger.error(f"Error processing initial question: {e.message}")

        return {"session": session, "initial_response": initial_response}

    async def ask(self, session: Session, question: str, sample_rows: int = 5,
                  with_history: bool = True) -> AnalysisResult:
        """
        回答一个问题并写入对话记录

        问题在调用LLM之前写入，回答只在LLM返回之后写入。

        Raises:
            InputError: 问题为空
            NotFoundError: 会话在回答期间过期
            CollaboratorFailure: LLM调用失败
        """
        if not question or not question.strip():
            raise InputError("Question es requerida")

        logger.info(f"Processing question for session {session.id}: {question}")
        self.store.append(session, "question", question)
        history = session.conversation.recent(CONTEXT_WINDOW) if with_history else []

        llm_output = await self._call_interpreter({
            "mode": "question",
            "question": question,
            "columns": session.columns,
            "dataset": session.data,
            "sample_rows": sample_rows,
            "history": history
        })

        analysis = build_response(llm_output["text"], question, session.data, self.policy)
        self.store.append(session, "response", analysis)
        logger.info(f"Question answered ({analysis.type}), conversation length {len(session.conversation)}")
        return analysis

    async def generate_report(self, session: Session) -> str:
        """生成报告正文（JSON接口使用）"""
        data_result = await self.data_agent.process({"dataset": session.data})
        llm_output = await self._call_interpreter({
            "mode": "report",
            "columns": session.columns,
            "dataset": session.data,
            "comprehensive_analysis": data_result["comprehensive_analysis"]
        })
        return llm_output["text"]

    async def generate_word_report(self, session: Session) -> bytes:
        """生成包含图表和指标表的Word报告"""
        logger.info("Generating comprehensive analysis...")
        data_result = await self.data_agent.process({"dataset": session.data})
        analysis = data_result["comprehensive_analysis"]

        llm_output = await self._call_interpreter({
            "mode": "report",
            "columns": session.columns,
            "dataset": session.data,
            "comprehensive_analysis": analysis
        })

        viz_result = await self.viz_agent.process({"comprehensive_analysis": analysis})

        try:
            return await asyncio.to_thread(
                render_report_docx, llm_output["text"], analysis, viz_result["charts"], self.store.clock()
            )
        except Exception as e:
            logger.error(f"Error rendering Word report: {str(e)}")
            logger.error(traceback.format_exc())
            raise CollaboratorFailure("Error generando el reporte en Word", cause=e)

    async def _call_interpreter(self, input_data: Dict[str, Any]) -> Dict[str, Any]:
        try:
            result = await self.interpret_agent.process(input_data)
        except CollaboratorFailure:
            raise
        except Exception as e:
            logger.error(f"LLM collaborator failed: {str(e)}")
            logger.error(traceback.format_exc())
            raise CollaboratorFailure("LLM request failed", cause=e)

        if "error" in result:
            raise CollaboratorFailure(result["error"])
        return result

    def history(self, session: Session) -> List[Dict[str, Any]]:
        return [entry.to_response() for entry in session.conversation.entries()]

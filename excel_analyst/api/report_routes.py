from fastapi import APIRouter, HTTPException, Depends
from fastapi.responses import Response
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
import logging
import traceback

from ..errors import CollaboratorFailure, NotFoundError
from ..orchestrator.orchestrator import Orchestrator, get_orchestrator
from ..reports.word_report import report_filename

logger = logging.getLogger(__name__)

router = APIRouter()

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


class ReportRequest(BaseModel):
    """报告请求模型"""

    model_config = ConfigDict(populate_by_name=True)

    session_id: Optional[str] = Field(default=None, alias="sessionId")


def _require_session(orchestrator: Orchestrator, session_id: Optional[str]):
    # 报告必须指定会话，不回退到最近的会话
    if not session_id:
        raise HTTPException(status_code=404, detail="Sesión no encontrada")
    try:
        return orchestrator.resolve_session(session_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Sesión no encontrada")


@router.post("/generate-report")
async def generate_report(request: ReportRequest, orchestrator: Orchestrator = Depends(get_orchestrator)):
    """生成JSON格式的战略报告"""
    session = _require_session(orchestrator, request.session_id)

    try:
        report_text = await orchestrator.generate_report(session)
    except CollaboratorFailure as e:
        logger.error(f"Error generando reporte: {e.message}")
        raise HTTPException(status_code=500, detail="Error generando el reporte")

    return {
        "sessionId": session.id,
        "reportData": report_text,
        "generatedAt": orchestrator.store.clock().isoformat(),
        "expiresAt": session.expires_at.isoformat()
    }


@router.post("/generate-report-word")
async def generate_report_word(request: ReportRequest, orchestrator: Orchestrator = Depends(get_orchestrator)):
    """生成Word格式的战略报告并作为附件下载"""
    session = _require_session(orchestrator, request.session_id)

    try:
        document = await orchestrator.generate_word_report(session)
    except CollaboratorFailure as e:
        logger.error(f"Error generando reporte Word: {e.message}")
        raise HTTPException(status_code=500, detail="Error generando el reporte en Word")
    except Exception as e:
        logger.error(f"Error generando reporte Word: {str(e)}")
        logger.error(traceback.format_exc())
        raise HTTPException(status_code=500, detail="Error generando el reporte en Word")

    filename = report_filename(orchestrator.store.clock())
    return Response(
        content=document,
        media_type=DOCX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'}
    )

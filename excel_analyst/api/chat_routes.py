from fastapi import APIRouter, HTTPException, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
import logging
import traceback

from ..errors import CollaboratorFailure, NotFoundError
from ..orchestrator.orchestrator import Orchestrator, get_orchestrator

logger = logging.getLogger(__name__)

router = APIRouter()


class ChatRequest(BaseModel):
    """问答请求模型"""

    model_config = ConfigDict(populate_by_name=True)

    question: Optional[str] = None
    session_id: Optional[str] = Field(default=None, alias="sessionId")


@router.post("/chat")
async def chat(request: ChatRequest, orchestrator: Orchestrator = Depends(get_orchestrator)):
    """针对会话中的数据提出自然语言问题；未提供 sessionId 时使用最近的会话"""
    question = request.question
    if not question or not question.strip():
        raise HTTPException(status_code=400, detail="Question es requerida")

    try:
        session = orchestrator.resolve_session(request.session_id)
    except NotFoundError as e:
        return JSONResponse(status_code=404, content={"error": e.message, "needsUpload": True})

    try:
        analysis = await orchestrator.ask(session, question)
    except NotFoundError as e:
        return JSONResponse(status_code=404, content={"error": e.message, "needsUpload": True})
    except CollaboratorFailure as e:
        logger.error(f"Error en chat: {e.message}")
        raise HTTPException(status_code=500, detail="Error procesando la pregunta")
    except Exception as e:
        logger.error(f"Error en chat: {str(e)}")
        logger.error(traceback.format_exc())
        raise HTTPException(status_code=500, detail="Error procesando la pregunta")

    return {
        "sessionId": session.id,
        "question": question,
        "response": analysis.to_response(),
        "expiresAt": session.expires_at.isoformat(),
        "conversationCount": len(session.conversation)
    }

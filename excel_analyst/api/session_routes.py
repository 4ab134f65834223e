from fastapi import APIRouter, HTTPException, Depends

from ..errors import NotFoundError
from ..orchestrator.orchestrator import Orchestrator, get_orchestrator

router = APIRouter()


@router.get("/{session_id}")
async def get_session_info(session_id: str, orchestrator: Orchestrator = Depends(get_orchestrator)):
    """获取会话信息 (Get session information)"""
    try:
        session = orchestrator.resolve_session(session_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Sesión no encontrada")

    # 只返回必要的会话信息，不包括完整的数据
    return session.summary()


@router.get("/{session_id}/history")
async def get_conversation_history(session_id: str, orchestrator: Orchestrator = Depends(get_orchestrator)):
    """获取对话历史"""
    try:
        session = orchestrator.resolve_session(session_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Sesión no encontrada")

    return {
        "sessionId": session.id,
        "history": orchestrator.history(session)
    }

from fastapi import APIRouter, UploadFile, File, Form, HTTPException, Depends
from typing import Optional, Dict, Any
import logging
import traceback

from ..config import settings
from ..data.loader import DataLoader
from ..errors import InputError
from ..orchestrator.orchestrator import Orchestrator, get_orchestrator

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/upload")
async def upload_file(
    file: Optional[UploadFile] = File(None),
    question: Optional[str] = Form(None),
    orchestrator: Orchestrator = Depends(get_orchestrator)
) -> Dict[str, Any]:
    """上传Excel/CSV文件创建会话，可附带一个初始问题"""
    if file is None or not file.filename:
        raise HTTPException(status_code=400, detail="No se subió ningún archivo")

    try:
        logger.info(f"开始处理文件上传: {file.filename}，Content-Type: {file.content_type}")

        # 验证文件类型
        if not file.filename.lower().endswith(tuple(settings.ALLOWED_EXTENSIONS)):
            logger.error(f"不支持的文件类型: {file.filename}")
            raise HTTPException(status_code=400, detail="Solo se aceptan archivos CSV o Excel")

        content = await file.read()
        if len(content) > settings.MAX_UPLOAD_SIZE:
            logger.error(f"文件过大: {file.filename}")
            raise HTTPException(status_code=400, detail="El archivo excede el tamaño máximo permitido")

        try:
            dataset, metadata = DataLoader.load_from_bytes(content, file.filename)
        except InputError as e:
            logger.error(f"文件解析错误: {e.message}")
            raise HTTPException(status_code=400, detail=e.message)

        result = await orchestrator.upload(dataset, question)
        session = result["session"]
        initial_response = result["initial_response"]

        response_data = {
            "message": "Archivo procesado exitosamente",
            "sessionId": session.id,
            "totalRows": len(session.data),
            "columns": session.columns,
            "sampleData": list(session.data[:3]),
            "expiresAt": session.expires_at.isoformat(),
            "validFor": "2 días"
        }
        if initial_response is not None:
            response_data["initialQuestion"] = question
            response_data["initialResponse"] = initial_response.to_response()

        logger.info(f"成功完成上传: session {session.id}, {metadata['rows']} rows")
        return response_data

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"未预期的错误: {str(e)}")
        logger.error(traceback.format_exc())
        raise HTTPException(status_code=500, detail="Error procesando el archivo")

import logging
from typing import Optional

from openai import AsyncOpenAI, OpenAIError

from ..config import settings
from ..errors import CollaboratorFailure

logger = logging.getLogger(__name__)


async def get_llm_response(prompt: str, model: Optional[str] = None) -> str:
    """
    使用OpenAI兼容的API获取LLM响应

    Args:
        prompt: 已渲染完成的提示
        model: 模型名称（可选，默认使用配置中的模型）

    Returns:
        LLM的文本响应

    Raises:
        CollaboratorFailure: API调用失败或超时
    """
    api_key = settings.OPENAI_API_KEY
    model = model or settings.OPENAI_MODEL

    if not api_key:
        # 如果API密钥未设置，返回示例响应
        logger.warning("OPENAI_API_KEY is not configured, returning mock response")
        return _get_mock_response(prompt)

    try:
        async with AsyncOpenAI(
            api_key=api_key,
            base_url=settings.OPENAI_BASE_URL,
            timeout=settings.LLM_TIMEOUT
        ) as client:
            response = await client.chat.completions.create(
                model=model,
                temperature=settings.OPENAI_TEMPERATURE,
                messages=[
                    {
                        "role": "user",
                        "content": prompt
                    }
                ]
            )
    except OpenAIError as e:
        logger.error(f"OpenAI API调用错误: {e}")
        raise CollaboratorFailure("LLM request failed", cause=e)

    content = response.choices[0].message.content
    return (content or "").strip()


def _get_mock_response(prompt: str) -> str:
    """当无法使用真实LLM API时生成模拟响应"""
    if "INFORME ESTRATÉGICO" in prompt:
        return (
            "**RESUMEN EJECUTIVO**\n"
            "Respuesta simulada. Configure OPENAI_API_KEY para generar el informe real.\n"
            "\n"
            "**RECOMENDACIONES ESTRATÉGICAS**\n"
            "1. **Acción Prioritaria:** Configurar el acceso al modelo de lenguaje."
        )
    return "Respuesta simulada. Configure OPENAI_API_KEY para obtener un análisis real."

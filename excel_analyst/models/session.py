import threading
from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, Any, List, Literal, Optional, Tuple, Union
from datetime import datetime

from .analysis import AnalysisResult

# 发送给LLM的最近对话条数（3组问答）
CONTEXT_WINDOW = 6


class ConversationEntry(BaseModel):
    """对话记录中的一条：问题或结构化回答"""

    type: Literal["question", "response"]
    content: Union[str, AnalysisResult]
    timestamp: str

    def content_text(self) -> str:
        # 结构化回答只把LLM文字放进上下文
        if isinstance(self.content, AnalysisResult):
            return self.content.ai_response
        return self.content

    def to_response(self) -> Dict[str, Any]:
        content = self.content.to_response() if isinstance(self.content, AnalysisResult) else self.content
        return {"type": self.type, "content": content, "timestamp": self.timestamp}


class ConversationLog:
    """只追加的对话历史，并发追加不会丢失记录"""

    def __init__(self):
        self._entries: List[ConversationEntry] = []
        self._lock = threading.Lock()

    def append(self, entry_type: str, content: Union[str, AnalysisResult],
               timestamp: Optional[datetime] = None) -> ConversationEntry:
        entry = ConversationEntry(
            type=entry_type,
            content=content,
            timestamp=(timestamp or datetime.now()).isoformat()
        )
        with self._lock:
            self._entries.append(entry)
        return entry

    def entries(self) -> List[ConversationEntry]:
        with self._lock:
            return list(self._entries)

    def recent(self, n: int = CONTEXT_WINDOW) -> List[ConversationEntry]:
        if n <= 0:
            return []
        with self._lock:
            return list(self._entries[-n:])

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


def render_context(entries: List[ConversationEntry]) -> str:
    """把对话记录格式化为 "<type>: <content>" 行"""
    return "\n".join(f"{entry.type}: {entry.content_text()}" for entry in entries)


class Session(BaseModel):
    """会话数据模型：一个上传的数据集及其对话历史"""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    id: str
    data: Tuple[Dict[str, Any], ...]
    columns: List[str]
    created_at: datetime
    expires_at: datetime
    conversation: ConversationLog = Field(default_factory=ConversationLog)

    def is_expired(self, now: datetime) -> bool:
        """惰性淘汰、定期清理和最近会话查找共用的过期判断"""
        return now > self.expires_at

    def summary(self) -> Dict[str, Any]:
        return {
            "sessionId": self.id,
            "totalRows": len(self.data),
            "columns": self.columns,
            "createdAt": self.created_at.isoformat(),
            "expiresAt": self.expires_at.isoformat(),
            "conversationCount": len(self.conversation)
        }

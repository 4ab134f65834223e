import asyncio
import logging
import secrets
import threading
import time
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from ..errors import NotFoundError
from ..models.analysis import AnalysisResult
from ..models.session import ConversationEntry, Session

logger = logging.getLogger(__name__)

SESSION_TTL = timedelta(days=2)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _base36(number: int) -> str:
    digits = "0123456789abcdefghijklmnopqrstuvwxyz"
    encoded = ""
    while number:
        number, remainder = divmod(number, 36)
        encoded = digits[remainder] + encoded
    return encoded or "0"


def generate_session_id() -> str:
    """随机部分 + 毫秒时间戳部分，难以猜测且不会重复"""
    return secrets.token_urlsafe(16) + _base36(time.time_ns() // 1_000_000)


class SessionStore:
    """
    内存中的会话注册表，按到期时间淘汰 (In-memory session registry with time-based expiry)

    所有修改都在同一把锁内完成，定期清理与查找/创建互斥。
    """

    def __init__(self, ttl: timedelta = SESSION_TTL, clock: Clock = utc_now,
                 id_factory: Callable[[], str] = generate_session_id):
        self.ttl = ttl
        self.clock = clock
        self.id_factory = id_factory
        self._sessions: Dict[str, Session] = {}
        self._lock = threading.RLock()

    def create(self, dataset: Sequence[Dict[str, Any]], columns: List[str]) -> Session:
        """创建新会话并注册"""
        with self._lock:
            session_id = self.id_factory()
            while session_id in self._sessions:
                logger.warning("Session id collision, generating a new one")
                session_id = self.id_factory()

            now = self.clock()
            session = Session(
                id=session_id,
                data=tuple(dataset),
                columns=list(columns),
                created_at=now,
                expires_at=now + self.ttl
            )
            self._sessions[session_id] = session

        logger.info(f"Created session {session_id} with {len(session.data)} rows")
        return session

    def get(self, session_id: Optional[str]) -> Optional[Session]:
        """获取会话；已过期的会话在此被惰性淘汰"""
        if not session_id:
            return None
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return None
            if session.is_expired(self.clock()):
                del self._sessions[session_id]
                logger.info(f"Session {session_id} expired and was evicted")
                return None
            return session

    def most_recent_active(self) -> Optional[Session]:
        """未过期会话中创建时间最晚的一个；时间相同时后插入者优先"""
        with self._lock:
            now = self.clock()
            latest = None
            for session in self._sessions.values():
                if session.is_expired(now):
                    continue
                if latest is None or session.created_at >= latest.created_at:
                    latest = session
            return latest

    def delete(self, session_id: str) -> bool:
        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    def append(self, session: Session, entry_type: str, content: Union[str, AnalysisResult]) -> ConversationEntry:
        """
        在会话仍然有效时追加一条对话记录

        与清理共用同一把锁，已被淘汰的会话不会再被写入。

        Raises:
            NotFoundError: 会话已过期或已被移除
        """
        with self._lock:
            now = self.clock()
            if self._sessions.get(session.id) is not session or session.is_expired(now):
                raise NotFoundError("La sesión expiró. Sube el archivo de nuevo.")
            return session.conversation.append(entry_type, content, now)

    def sweep(self) -> int:
        """删除所有已过期的会话，返回删除数量"""
        with self._lock:
            now = self.clock()
            expired = [session_id for session_id, session in self._sessions.items() if session.is_expired(now)]
            for session_id in expired:
                del self._sessions[session_id]
        if expired:
            logger.info(f"Swept {len(expired)} expired sessions")
        return len(expired)

    async def run_sweeper(self, interval: float) -> None:
        """后台定期清理，直到任务被取消"""
        while True:
            await asyncio.sleep(interval)
            try:
                self.sweep()
            except Exception as e:
                logger.error(f"Session sweep failed: {str(e)}")

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        with self._lock:
            return session_id in self._sessions

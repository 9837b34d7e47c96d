from soc_analyst.models.security_event import SecurityEventRecord
from soc_analyst.models.analysis_session import AnalysisSessionRecord
from soc_analyst.models.chat_message import ChatMessageRecord

__all__ = [
    "SecurityEventRecord",
    "AnalysisSessionRecord",
    "ChatMessageRecord",
]

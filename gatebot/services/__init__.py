from .expiry_sweeper import ExpirySweeper
from .platform import AiogramPlatformClient, ChatPlatformClient
from .verification_engine import VerificationEngine

__all__ = [
    "AiogramPlatformClient",
    "ChatPlatformClient",
    "ExpirySweeper",
    "VerificationEngine",
]

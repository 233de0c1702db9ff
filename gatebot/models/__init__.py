from .challenge import ExpiredChallenge, MemberInfo, PendingChallenge, VerificationState
from .outcomes import ChallengeOutcome, ChallengeResult, JoinOutcome, JoinResult, SweepReport

__all__ = [
    "ChallengeOutcome",
    "ChallengeResult",
    "ExpiredChallenge",
    "JoinOutcome",
    "JoinResult",
    "MemberInfo",
    "PendingChallenge",
    "SweepReport",
    "VerificationState",
]

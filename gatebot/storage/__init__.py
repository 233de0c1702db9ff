from .verification_store import VerificationStore

__all__ = ["VerificationStore"]

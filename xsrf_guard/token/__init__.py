"""Anti-forgery token issuance and verification."""

from .issuer import TokenIssuer
from .types import IssuedToken, ValidationResult, VerificationResult
from .verifier import TokenVerifier

__all__ = ["TokenIssuer", "TokenVerifier", "IssuedToken", "ValidationResult", "VerificationResult"]

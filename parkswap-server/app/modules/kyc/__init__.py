"""Identity verification exports"""

from .service import KYC_PROVIDER, KycService, KycSession

__all__ = ["KYC_PROVIDER", "KycService", "KycSession"]

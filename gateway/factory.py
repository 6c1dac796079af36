"""
Gateway Factory

Factory for creating the backend client and route services with proper
dependency injection.
"""

import logging
from typing import Optional

import httpx

from core.backend_client import BackendClient
from core.config import GatewayConfig, get_settings
from core.session_manager import SessionManager
from services.auth_service import AuthService
from services.booking_service import BookingService
from services.campaign_service import CampaignService
from services.homestay_service import HomestayService
from services.onboarding_service import OnboardingService
from services.payment_service import PaymentService
from services.sitemap_service import SitemapService, SitemapCache
from services.verification_service import VerificationService

logger = logging.getLogger(__name__)

NOT_INITIALIZED = "Factory not initialized. Call initialize() first."


class GatewayFactory:
    """Factory for creating gateway components"""

    def __init__(
        self,
        config: Optional[GatewayConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config or get_settings()
        self._transport = transport
        self._backend: Optional[BackendClient] = None
        self._provider_client: Optional[httpx.AsyncClient] = None
        self._session_manager: Optional[SessionManager] = None
        self._auth_service: Optional[AuthService] = None
        self._verification_service: Optional[VerificationService] = None
        self._onboarding_service: Optional[OnboardingService] = None
        self._campaign_service: Optional[CampaignService] = None
        self._booking_service: Optional[BookingService] = None
        self._homestay_service: Optional[HomestayService] = None
        self._payment_service: Optional[PaymentService] = None
        self._sitemap_service: Optional[SitemapService] = None

    async def initialize(self) -> None:
        """Initialize all components"""
        logger.info("Initializing gateway components...")

        backend_config = self.config.backend
        self._backend = BackendClient(
            backend_config.api_base_url,
            timeout=backend_config.default_timeout,
            transport=self._transport,
        )
        # Khalti / eSewa are called directly, not through API_BASE_URL
        self._provider_client = httpx.AsyncClient(
            timeout=backend_config.payment_timeout,
            transport=self._transport,
        )

        session_config = self.config.session
        self._session_manager = SessionManager(
            secret_key=session_config.secret,
            algorithm=session_config.algorithm,
            max_age=session_config.max_age,
            refresh_threshold_seconds=session_config.refresh_threshold_seconds,
            near_expiry_seconds=session_config.near_expiry_seconds,
        )

        self._auth_service = AuthService(self._backend, self._session_manager)
        self._verification_service = VerificationService(self._backend)
        self._onboarding_service = OnboardingService(self._backend, backend_config)
        self._campaign_service = CampaignService(self._backend)
        self._booking_service = BookingService(
            self._backend, confirm_timeout=backend_config.payment_timeout
        )
        self._homestay_service = HomestayService(self._backend)
        self._payment_service = PaymentService(
            self._booking_service,
            self.config.payments,
            provider_client=self._provider_client,
        )
        self._sitemap_service = SitemapService(
            self._backend, SitemapCache(self.config.sitemap_cache_path)
        )

        logger.info(f"Gateway components initialized (backend: {backend_config.api_base_url})")

    async def close(self) -> None:
        """Close all components"""
        logger.info("Closing gateway components...")

        if self._provider_client:
            await self._provider_client.aclose()

        if self._backend:
            await self._backend.close()

        logger.info("Gateway components closed")

    @property
    def backend(self) -> BackendClient:
        """Get backend client"""
        if not self._backend:
            raise RuntimeError(NOT_INITIALIZED)
        return self._backend

    @property
    def session_manager(self) -> SessionManager:
        """Get session manager"""
        if not self._session_manager:
            raise RuntimeError(NOT_INITIALIZED)
        return self._session_manager

    @property
    def auth_service(self) -> AuthService:
        """Get auth service"""
        if not self._auth_service:
            raise RuntimeError(NOT_INITIALIZED)
        return self._auth_service

    @property
    def verification_service(self) -> VerificationService:
        """Get verification service"""
        if not self._verification_service:
            raise RuntimeError(NOT_INITIALIZED)
        return self._verification_service

    @property
    def onboarding_service(self) -> OnboardingService:
        """Get onboarding service"""
        if not self._onboarding_service:
            raise RuntimeError(NOT_INITIALIZED)
        return self._onboarding_service

    @property
    def campaign_service(self) -> CampaignService:
        """Get campaign service"""
        if not self._campaign_service:
            raise RuntimeError(NOT_INITIALIZED)
        return self._campaign_service

    @property
    def booking_service(self) -> BookingService:
        """Get booking service"""
        if not self._booking_service:
            raise RuntimeError(NOT_INITIALIZED)
        return self._booking_service

    @property
    def homestay_service(self) -> HomestayService:
        """Get homestay service"""
        if not self._homestay_service:
            raise RuntimeError(NOT_INITIALIZED)
        return self._homestay_service

    @property
    def payment_service(self) -> PaymentService:
        """Get payment service"""
        if not self._payment_service:
            raise RuntimeError(NOT_INITIALIZED)
        return self._payment_service

    @property
    def sitemap_service(self) -> SitemapService:
        """Get sitemap service"""
        if not self._sitemap_service:
            raise RuntimeError(NOT_INITIALIZED)
        return self._sitemap_service


# Global factory instance
_factory: Optional[GatewayFactory] = None


async def get_factory() -> GatewayFactory:
    """Get or create factory instance"""
    global _factory
    if _factory is None:
        _factory = GatewayFactory()
        await _factory.initialize()
    return _factory


async def close_factory() -> None:
    """Close factory instance"""
    global _factory
    if _factory:
        await _factory.close()
        _factory = None


__all__ = [
    "GatewayFactory",
    "get_factory",
    "close_factory",
]

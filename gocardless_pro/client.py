from __future__ import annotations

from typing import Any, Optional

from .config import ClientConfig, Logger
from .services import CurrencyExchangeRateService, MandateImportService, MandatePdfService
from .transport import HttpTransport


class GoCardlessClient:
    def __init__(self, config: ClientConfig, transport: Optional[HttpTransport] = None) -> None:
        self.config = config
        self.transport = transport or HttpTransport(ssl_context=config.ssl_context)
        self.currency_exchange_rates = CurrencyExchangeRateService(config, self.transport)
        self.mandate_imports = MandateImportService(config, self.transport)
        self.mandate_pdfs = MandatePdfService(config, self.transport)

    @classmethod
    def create(cls, access_token: str, environment: str = "live", **kwargs: Any) -> "GoCardlessClient":
        return cls(ClientConfig.for_environment(access_token, environment, **kwargs))

    @classmethod
    def from_env(cls, logger: Optional[Logger] = None) -> "GoCardlessClient":
        return cls(ClientConfig.from_env(logger=logger))

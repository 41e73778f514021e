from __future__ import annotations

import urllib.parse
from dataclasses import dataclass
from typing import Dict, Optional, Type

from pydantic import BaseModel

from .models import CurrencyExchangeRateListResult, MandateImport, MandatePdf


@dataclass(frozen=True)
class Endpoint:
    resource: str
    action: str
    method: str
    path: str
    envelope_key: str
    result_model: Type[BaseModel]
    body_key: Optional[str] = None
    list_result: bool = False

    @property
    def id(self) -> str:
        return f"{self.resource}.{self.action}"

    @property
    def mutating(self) -> bool:
        return self.method.upper() == "POST"

    def build_path(self, identity: Optional[str] = None) -> str:
        if "{identity}" not in self.path:
            return self.path
        if not identity:
            raise ValueError(f"{self.id} requires an identity")
        return self.path.replace("{identity}", urllib.parse.quote(str(identity), safe=""))


_TABLE = (
    Endpoint(
        resource="currency_exchange_rates",
        action="list",
        method="GET",
        path="/currency_exchange_rates",
        envelope_key="currency_exchange_rates",
        result_model=CurrencyExchangeRateListResult,
        list_result=True,
    ),
    Endpoint(
        resource="mandate_imports",
        action="create",
        method="POST",
        path="/mandate_imports",
        envelope_key="mandate_imports",
        result_model=MandateImport,
        body_key="mandate_imports",
    ),
    Endpoint(
        resource="mandate_imports",
        action="get",
        method="GET",
        path="/mandate_imports/{identity}",
        envelope_key="mandate_imports",
        result_model=MandateImport,
    ),
    Endpoint(
        resource="mandate_imports",
        action="submit",
        method="POST",
        path="/mandate_imports/{identity}/actions/submit",
        envelope_key="mandate_imports",
        result_model=MandateImport,
        body_key="data",
    ),
    Endpoint(
        resource="mandate_imports",
        action="cancel",
        method="POST",
        path="/mandate_imports/{identity}/actions/cancel",
        envelope_key="mandate_imports",
        result_model=MandateImport,
        body_key="data",
    ),
    Endpoint(
        resource="mandate_pdfs",
        action="create",
        method="POST",
        path="/mandate_pdfs",
        envelope_key="mandate_pdfs",
        result_model=MandatePdf,
        body_key="mandate_pdfs",
    ),
)

ENDPOINTS: Dict[str, Endpoint] = {endpoint.id: endpoint for endpoint in _TABLE}

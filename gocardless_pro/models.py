from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class _Params(BaseModel):
    model_config = ConfigDict(extra="forbid")


class Cursors(_Record):
    after: Optional[str] = None
    before: Optional[str] = None


class ListMeta(_Record):
    cursors: Cursors = Field(default_factory=Cursors)
    limit: Optional[int] = None


class CreatedAtFilter(_Params):
    gt: Optional[str] = None
    gte: Optional[str] = None
    lt: Optional[str] = None
    lte: Optional[str] = None


class CurrencyExchangeRate(_Record):
    rate: Optional[str] = None
    source: Optional[str] = None
    target: Optional[str] = None
    time: Optional[str] = None


class CurrencyExchangeRateListParams(_Params):
    after: Optional[str] = None
    before: Optional[str] = None
    created_at: Optional[CreatedAtFilter] = None
    limit: Optional[int] = None
    source: Optional[str] = None
    target: Optional[str] = None


class CurrencyExchangeRateListResult(_Record):
    currency_exchange_rates: List[CurrencyExchangeRate] = Field(default_factory=list)
    meta: Optional[ListMeta] = Field(default_factory=ListMeta)

    @field_validator("currency_exchange_rates", mode="before")
    @classmethod
    def _null_records(cls, value):
        return [] if value is None else value

    @property
    def items(self) -> List[CurrencyExchangeRate]:
        return self.currency_exchange_rates


class MandateImport(_Record):
    id: Optional[str] = None
    created_at: Optional[str] = None
    scheme: Optional[str] = None
    status: Optional[str] = None


class MandateImportCreateParams(_Params):
    scheme: Optional[str] = None


class MandatePdfLinks(_Params):
    mandate: Optional[str] = None


class MandatePdfCreateParams(_Params):
    account_holder_name: Optional[str] = None
    account_number: Optional[str] = None
    bank_code: Optional[str] = None
    bic: Optional[str] = None
    branch_code: Optional[str] = None
    country_code: Optional[str] = None
    iban: Optional[str] = None
    links: Optional[MandatePdfLinks] = None
    mandate_reference: Optional[str] = None
    scheme: Optional[str] = None
    signature_date: Optional[str] = None
    swedish_identity_number: Optional[str] = None


class MandatePdf(_Record):
    url: Optional[str] = None
    expires_at: Optional[str] = None

"""
Contract analysis schema in two tiers.

``AnalysisResult`` and its nested models are the strict tier: every field must
be present with the declared type, enum variant and range. The ``Lenient*``
models describe the same shape with every field optional and back-filled with
a default, so a response that merely omits fields can still be accepted.
Numeric bounds and enum variants are enforced identically in both tiers.
"""

from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import (
    BaseModel, BeforeValidator, ConfigDict, Field, StrictBool, StrictFloat, StrictInt, StrictStr,
    field_validator, model_validator,
)

DEFAULT_DISCLAIMER = "This is an AI analysis, not legal advice."

RiskBadge = Literal["LOW", "MEDIUM", "HIGH"]
RegionLabel = Literal["typical", "unusual"]
KeyDateType = Literal["RENEWAL", "NOTICE_CUTOFF", "PRICE_REVIEW", "OTHER"]
Number = Union[int, float]
StrictNumber = Union[StrictInt, StrictFloat]


def _check_range(value: Number, low: Number, high: Number, name: str) -> Number:
    if isinstance(value, bool) or not low <= value <= high:
        raise ValueError(f"{name} must be between {low} and {high}")
    return value


def _reject_bool(value: Any) -> Any:
    if isinstance(value, bool):
        raise ValueError("expected a number, not a boolean")
    return value


LenientNumber = Annotated[Number, BeforeValidator(_reject_bool)]


class StrictModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", allow_inf_nan=False)


class LenientModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", allow_inf_nan=False)

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        """Treat JSON null in a non-nullable field as a missing field."""
        if not isinstance(data, dict):
            return data
        return {
            key: value for key, value in data.items()
            if value is not None or _is_nullable(cls, key)
        }


def _is_nullable(model: type, name: str) -> bool:
    info = model.model_fields.get(name)
    if info is None:
        return True
    annotation = info.annotation
    return annotation is type(None) or type(None) in getattr(annotation, "__args__", ())


# Strict tier

class Payments(StrictModel):
    amount: Optional[StrictStr]
    frequency: Optional[StrictStr]
    fees: List[StrictStr]


class Term(StrictModel):
    start: Optional[StrictStr]
    end: Optional[StrictStr]
    minimum_term: Optional[StrictStr]


class Renewal(StrictModel):
    auto_renew: StrictBool
    renewal_period: Optional[StrictStr]


class Cancellation(StrictModel):
    how: StrictStr
    notice_period_days: StrictNumber
    penalties: List[StrictStr]


class ContractSummary(StrictModel):
    what_it_is: StrictStr
    payments: Payments
    term: Term
    renewal: Renewal
    cancellation: Cancellation


class RedFlag(StrictModel):
    type: StrictStr
    severity: StrictNumber
    explanation: StrictStr
    where: Optional[StrictStr]
    confidence: StrictNumber

    @field_validator("severity")
    @classmethod
    def check_severity_range(cls, value):
        return _check_range(value, 1, 10, "severity")

    @field_validator("confidence")
    @classmethod
    def check_confidence_range(cls, value):
        return _check_range(value, 0, 100, "confidence")


class RegionComparison(StrictModel):
    topic: StrictStr
    typical_range: StrictStr
    yours: Optional[StrictStr]
    label: RegionLabel


class EmailTemplate(StrictModel):
    subject: StrictStr
    body: StrictStr


class NextActions(StrictModel):
    questions_to_ask: List[StrictStr]
    email_templates: List[EmailTemplate]


class KeyDate(StrictModel):
    type: KeyDateType
    date: StrictStr
    derived_from: Optional[StrictStr]


class AnalysisResult(StrictModel):
    """Validated contract analysis produced by the model."""
    risk_badge: RiskBadge
    key_points: List[StrictStr]
    summary: ContractSummary
    red_flags: List[RedFlag]
    normal_in_region: List[RegionComparison]
    next_actions: NextActions
    key_dates: List[KeyDate]
    obligations: List[StrictStr]
    parties: List[StrictStr]
    disclaimer: StrictStr


# Lenient tier

class LenientPayments(LenientModel):
    amount: Optional[str] = None
    frequency: Optional[str] = None
    fees: List[str] = Field(default_factory=list)


class LenientTerm(LenientModel):
    start: Optional[str] = None
    end: Optional[str] = None
    minimum_term: Optional[str] = None


class LenientRenewal(LenientModel):
    auto_renew: bool = False
    renewal_period: Optional[str] = None


class LenientCancellation(LenientModel):
    how: str = "Not specified"
    notice_period_days: LenientNumber = 0
    penalties: List[str] = Field(default_factory=list)


class LenientContractSummary(LenientModel):
    what_it_is: str = "Contract analysis"
    payments: LenientPayments = Field(default_factory=LenientPayments)
    term: LenientTerm = Field(default_factory=LenientTerm)
    renewal: LenientRenewal = Field(default_factory=LenientRenewal)
    cancellation: LenientCancellation = Field(default_factory=LenientCancellation)


class LenientRedFlag(LenientModel):
    type: str
    severity: LenientNumber
    explanation: str
    where: Optional[str] = None
    confidence: LenientNumber = 50

    @field_validator("severity")
    @classmethod
    def check_severity_range(cls, value):
        return _check_range(value, 1, 10, "severity")

    @field_validator("confidence")
    @classmethod
    def check_confidence_range(cls, value):
        return _check_range(value, 0, 100, "confidence")


class LenientRegionComparison(LenientModel):
    topic: str
    typical_range: str
    yours: Optional[str] = None
    label: RegionLabel


class LenientEmailTemplate(LenientModel):
    subject: str
    body: str


class LenientNextActions(LenientModel):
    questions_to_ask: List[str] = Field(default_factory=list)
    email_templates: List[LenientEmailTemplate] = Field(default_factory=list)


class LenientKeyDate(LenientModel):
    type: KeyDateType
    date: str
    derived_from: Optional[str] = None


class LenientAnalysisResult(LenientModel):
    """Same shape as AnalysisResult with documented defaults for every field."""
    risk_badge: RiskBadge = "MEDIUM"
    key_points: List[str] = Field(default_factory=list)
    summary: LenientContractSummary = Field(default_factory=LenientContractSummary)
    red_flags: List[LenientRedFlag] = Field(default_factory=list)
    normal_in_region: List[LenientRegionComparison] = Field(default_factory=list)
    next_actions: LenientNextActions = Field(default_factory=LenientNextActions)
    key_dates: List[LenientKeyDate] = Field(default_factory=list)
    obligations: List[str] = Field(default_factory=list)
    parties: List[str] = Field(default_factory=list)
    disclaimer: str = DEFAULT_DISCLAIMER

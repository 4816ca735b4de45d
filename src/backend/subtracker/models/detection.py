"""
Models for detected subscriptions.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class DetectionType(str, Enum):
    """Subscription lifecycle event a message describes."""
    TRIAL_SIGNUP = "trial_signup"
    TRIAL_REMINDER = "trial_reminder"
    BILLING_CONFIRMATION = "billing_confirmation"
    SUBSCRIPTION_START = "subscription_start"
    PRICE_CHANGE = "price_change"

    @property
    def is_trial(self) -> bool:
        return self in (DetectionType.TRIAL_SIGNUP, DetectionType.TRIAL_REMINDER)

    @property
    def date_field(self) -> str:
        """Field that receives a date found outside any trial window."""
        return "trial_end_date" if self.is_trial else "next_billing_date"


class BillingCycle(str, Enum):
    """Billing cadence."""
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    SEMI_ANNUALLY = "semi-annually"
    ANNUALLY = "annually"


class DetectedSubscription(BaseModel):
    """One detection per matching detection type per message."""
    service_name: str = Field(alias="serviceName")
    detection_type: DetectionType = Field(alias="detectionType")
    confidence: float = Field(ge=0.0, le=1.0)
    cost: Optional[Decimal] = Field(default=None, gt=0)
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3)
    billing_cycle: Optional[BillingCycle] = Field(default=None, alias="billingCycle")
    trial_end_date: Optional[date] = Field(default=None, alias="trialEndDate")
    next_billing_date: Optional[date] = Field(default=None, alias="nextBillingDate")
    extracted_data: Dict[str, Any] = Field(default_factory=dict, alias="extractedData")

    class Config:
        frozen = True
        populate_by_name = True

    def to_record(self) -> Dict[str, Any]:
        """JSON-safe dict with camelCase keys, as handed to persistence."""
        return self.model_dump(by_alias=True, mode="json")


class DetectionOutcome(str, Enum):
    """How a call to the detector ended."""
    DETECTED = "detected"
    NO_MATCH = "no_match"
    NOISE = "noise"
    UNRESOLVED_SERVICE = "unresolved_service"


@dataclass(frozen=True)
class DetectionResult:
    """Detections plus the outcome that produced them."""
    outcome: DetectionOutcome
    detections: List[DetectedSubscription] = field(default_factory=list)
    service_name: Optional[str] = None


@dataclass(frozen=True)
class BatchItem:
    """Result for one message of a batch."""
    index: int
    success: bool
    detections: List[DetectedSubscription] = field(default_factory=list)
    error: Optional[str] = None

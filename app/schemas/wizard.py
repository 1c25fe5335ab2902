from __future__ import annotations

from pydantic import BaseModel, Field


class WizardOptionRead(BaseModel):
    value: str
    label: str


class WizardStepRead(BaseModel):
    question: str
    options: list[WizardOptionRead]


class WizardAnswers(BaseModel):
    answers: list[str] = Field(default_factory=list)


class WizardDiagnosis(BaseModel):
    answers: list[str]
    diagnosis: str


class BrandRead(BaseModel):
    id: str
    name: str


class DeviceModelRead(BaseModel):
    id: str
    name: str
    brand_id: str | None = None


class DiagnosisRuleSpec(BaseModel):
    step: int = Field(ge=0)
    answer: str = Field(min_length=1)
    fragment: str


class DiagnosisRuleFile(BaseModel):
    header: str | None = None
    footer: str | None = None
    rules: list[DiagnosisRuleSpec]


class EquipmentSelection(BaseModel):
    brand_name: str = Field(min_length=1, max_length=120)
    model_name: str = Field(min_length=1, max_length=120)

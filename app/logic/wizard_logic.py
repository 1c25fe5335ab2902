from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import ValidationError

from app.schemas.wizard import DiagnosisRuleFile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WizardOption:
    value: str
    label: str


@dataclass(frozen=True)
class WizardStep:
    question: str
    options: tuple[WizardOption, ...]

    def has_option(self, value: str) -> bool:
        return any(option.value == value for option in self.options)


WIZARD_STEPS: tuple[WizardStep, ...] = (
    WizardStep(
        question="What type of issue are you experiencing?",
        options=(
            WizardOption("heating", "No heating"),
            WizardOption("cooling", "No cooling"),
            WizardOption("noise", "Unusual noise"),
            WizardOption("leak", "Water leak"),
            WizardOption("error", "Error code displayed"),
        ),
    ),
    WizardStep(
        question="When did the problem start?",
        options=(
            WizardOption("sudden", "Suddenly/immediately"),
            WizardOption("gradual", "Gradually over time"),
            WizardOption("intermittent", "Comes and goes"),
            WizardOption("startup", "After installation/startup"),
        ),
    ),
    # Collected but not referenced by any built-in rule.
    WizardStep(
        question="Have you checked the basics?",
        options=(
            WizardOption("power", "Power supply is on"),
            WizardOption("thermostat", "Thermostat set correctly"),
            WizardOption("filters", "Filters are clean"),
            WizardOption("breaker", "Circuit breaker not tripped"),
        ),
    ),
)


@dataclass(frozen=True)
class DiagnosisRule:
    """Append ``fragment`` when the answer to ``step`` equals ``answer``."""

    step: int
    answer: str
    fragment: str

    def matches(self, answers: list[str]) -> bool:
        return self.step < len(answers) and answers[self.step] == self.answer


DIAGNOSIS_HEADER = "Based on your answers:\n\n"
DIAGNOSIS_FOOTER = "\n• Recommended: Contact certified technician if issue persists"

DIAGNOSIS_RULES: tuple[DiagnosisRule, ...] = (
    DiagnosisRule(
        0,
        "heating",
        "• Check outdoor unit for ice buildup\n"
        "• Verify refrigerant levels\n"
        "• Inspect compressor operation\n",
    ),
    DiagnosisRule(
        0,
        "cooling",
        "• Check air filters\n"
        "• Verify outdoor unit operation\n"
        "• Check refrigerant pressure\n",
    ),
    DiagnosisRule(
        0,
        "noise",
        "• Inspect fan blades for damage\n"
        "• Check mounting bolts\n"
        "• Verify compressor operation\n",
    ),
    DiagnosisRule(
        0,
        "leak",
        "• Inspect condensate drain\n"
        "• Check pipe connections\n"
        "• Verify pressure relief valve\n",
    ),
    DiagnosisRule(
        1,
        "sudden",
        "\n• Priority: Check for electrical issues\n"
        "• Look for recent system changes\n",
    ),
)


@dataclass(frozen=True)
class DiagnosisRuleTable:
    rules: tuple[DiagnosisRule, ...] = DIAGNOSIS_RULES
    header: str = DIAGNOSIS_HEADER
    footer: str = DIAGNOSIS_FOOTER

    def diagnose(self, answers: list[str]) -> str:
        parts = [self.header]
        parts.extend(rule.fragment for rule in self.rules if rule.matches(answers))
        parts.append(self.footer)
        return "".join(parts)


def load_rule_table(path: str | Path | None) -> DiagnosisRuleTable:
    """Load rules from a JSON file, falling back to the built-in table."""
    if not path:
        return DiagnosisRuleTable()
    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
        spec = DiagnosisRuleFile.model_validate(raw)
    except (OSError, ValueError, ValidationError) as exc:
        logger.error("wizard_rules_load_failed path=%s error=%s", path, exc)
        return DiagnosisRuleTable()
    return DiagnosisRuleTable(
        rules=tuple(DiagnosisRule(r.step, r.answer, r.fragment) for r in spec.rules),
        header=DIAGNOSIS_HEADER if spec.header is None else spec.header,
        footer=DIAGNOSIS_FOOTER if spec.footer is None else spec.footer,
    )


@dataclass
class WizardSession:
    """Linear questionnaire state: step index, answers so far, diagnosis."""

    steps: tuple[WizardStep, ...] = WIZARD_STEPS
    rule_table: DiagnosisRuleTable = field(default_factory=DiagnosisRuleTable)
    current_step: int = 0
    answers: list[str] = field(default_factory=list)
    diagnosis: str = ""

    @property
    def is_last_step(self) -> bool:
        return self.current_step == len(self.steps) - 1

    @property
    def current_answer(self) -> str | None:
        if self.current_step < len(self.answers):
            return self.answers[self.current_step] or None
        return None

    @property
    def can_advance(self) -> bool:
        return self.current_answer is not None

    def select(self, value: str) -> None:
        step = self.steps[self.current_step]
        if not step.has_option(value):
            raise ValueError(f"Unknown option {value!r} for step {self.current_step + 1}")
        while len(self.answers) <= self.current_step:
            self.answers.append("")
        self.answers[self.current_step] = value

    def next(self) -> bool:
        if not self.can_advance:
            return False
        if self.is_last_step:
            self.diagnosis = self.rule_table.diagnose(self.answers)
        else:
            self.current_step += 1
        return True

    def back(self) -> None:
        if self.current_step > 0:
            self.current_step -= 1

    def reset(self) -> None:
        self.current_step = 0
        self.answers = []
        self.diagnosis = ""


def run_wizard(answers: list[str], rule_table: DiagnosisRuleTable | None = None) -> WizardSession:
    """Replay answers through a fresh session, stopping at the first gap."""
    session = WizardSession(rule_table=rule_table or DiagnosisRuleTable())
    for value in answers:
        session.select(value)
        if not session.next():
            break
        if session.diagnosis:
            break
    return session

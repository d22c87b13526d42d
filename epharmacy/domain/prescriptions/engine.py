"""
Rule-based recommendation engine

Maps a symptom report to a diagnosis line, advice sentences and a list of
catalog medications. Pure: the catalog is passed in as a snapshot and nothing
is read from or written to the database here.

Diagnosis text is assembled as

    [severity adjective] [duration adjective] <rule label>[ with <additional>]

Rules are evaluated in table order and the first rule whose keyword occurs in
the main symptom wins. An unmatched symptom falls through to DEFAULT_RULE, so
every report produces a diagnosis and at least one advice sentence.
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional, Protocol, Sequence, Tuple


class CatalogMedication(Protocol):
    id: int
    name: str


class MedicationLookup(Protocol):
    def list_medications(self) -> Sequence[CatalogMedication]:
        ...


@dataclass(frozen=True)
class SymptomReport:
    main_symptom: str
    duration: str
    severity: int
    additional_symptoms: Tuple[str, ...] = ()
    details: Optional[str] = None


@dataclass(frozen=True)
class MedicationRule:
    """Selects the first catalog medication whose name contains `name_contains`"""
    name_contains: str
    instructions: str
    quantity: int = 1


@dataclass(frozen=True)
class SymptomRule:
    keywords: Tuple[str, ...]
    label: str
    advice: Tuple[str, ...]
    medications: Tuple[MedicationRule, ...]

    def matches(self, main_symptom: str) -> bool:
        return any(keyword in main_symptom for keyword in self.keywords)


@dataclass(frozen=True)
class RecommendedMedication:
    medication: CatalogMedication
    instructions: str
    quantity: int


@dataclass(frozen=True)
class Diagnosis:
    text: str
    recommendations: Tuple[str, ...]
    medications: Tuple[RecommendedMedication, ...] = ()
    # rules that found no catalog match
    unresolved: Tuple[MedicationRule, ...] = field(default=())

    @property
    def additional_recommendations(self) -> str:
        return ". ".join(self.recommendations) + "."

    @property
    def unresolved_count(self) -> int:
        return len(self.unresolved)


ACETAMINOPHEN_FOR_PAIN = MedicationRule(
    "Acetaminophen", "Take 1 tablet every 6 hours as needed for pain"
)
ACETAMINOPHEN_FOR_FEVER = MedicationRule(
    "Acetaminophen", "Take 1 tablet every 4-6 hours as needed for fever"
)
ACETAMINOPHEN_FOR_FEVER_OR_PAIN = MedicationRule(
    "Acetaminophen", "Take 1 tablet every 6 hours as needed for fever or pain"
)
DEXTROMETHORPHAN_FOR_COUGH = MedicationRule(
    "Dextromethorphan", "Take 1-2 teaspoons every 4 hours as needed for cough"
)
IBUPROFEN_FOR_THROAT_PAIN = MedicationRule(
    "Ibuprofen", "Take 1 tablet every 6-8 hours with food as needed for pain"
)
LORATADINE_FOR_ALLERGY = MedicationRule(
    "Loratadine", "Take 1 tablet daily for allergy symptoms"
)
PHENYLEPHRINE_FOR_CONGESTION = MedicationRule(
    "Phenylephrine", "Use 1-2 sprays in each nostril every 4 hours as needed for congestion"
)


RULES: Tuple[SymptomRule, ...] = (
    SymptomRule(
        keywords=("Headache",),
        label="Tension headache",
        advice=(
            "Rest in a quiet, dark room",
            "Apply cold or warm compress to the forehead",
            "Stay hydrated",
        ),
        medications=(ACETAMINOPHEN_FOR_PAIN,),
    ),
    SymptomRule(
        keywords=("Fever",),
        label="Viral fever",
        advice=(
            "Rest and stay hydrated",
            "Use a light blanket if chills occur",
            "Take lukewarm baths to reduce fever",
        ),
        medications=(ACETAMINOPHEN_FOR_FEVER,),
    ),
    SymptomRule(
        keywords=("Cough",),
        label="Acute bronchitis",
        advice=(
            "Stay hydrated",
            "Use a humidifier",
            "Avoid irritants like smoke",
        ),
        medications=(DEXTROMETHORPHAN_FOR_COUGH,),
    ),
    SymptomRule(
        keywords=("Sore throat",),
        label="Pharyngitis",
        advice=(
            "Gargle with warm salt water",
            "Stay hydrated",
            "Rest your voice",
        ),
        medications=(IBUPROFEN_FOR_THROAT_PAIN,),
    ),
    SymptomRule(
        keywords=("Runny nose", "Sneezing"),
        label="Allergic rhinitis",
        advice=(
            "Avoid allergens when possible",
            "Use a nasal saline spray",
            "Keep indoor air clean",
        ),
        medications=(LORATADINE_FOR_ALLERGY,),
    ),
    SymptomRule(
        keywords=("Congestion",),
        label="Nasal congestion",
        advice=(
            "Use a humidifier",
            "Stay hydrated",
            "Apply a warm compress to your face",
        ),
        medications=(PHENYLEPHRINE_FOR_CONGESTION,),
    ),
)

DEFAULT_RULE = SymptomRule(
    keywords=(),
    label="Common cold",
    advice=(
        "Rest and stay hydrated",
        "Use a humidifier if available",
        "Gargle with warm salt water for sore throat relief",
    ),
    medications=(ACETAMINOPHEN_FOR_FEVER_OR_PAIN, PHENYLEPHRINE_FOR_CONGESTION),
)

DURATION_ADJECTIVES = {
    "Less than 24 hours": "acute",
    "1-3 days": "short-term",
    "4-7 days": "persistent",
    "1-2 weeks": "prolonged",
    "More than 2 weeks": "chronic",
}

SEVERE_THRESHOLD = 8
MILD_THRESHOLD = 3

ESCALATION_ADVICE = "Consider consulting with a healthcare provider if symptoms worsen"
FATIGUE_ADVICE = "Get plenty of rest and limit activities"

NASAL_SYMPTOMS = ("Runny nose", "Congestion")


class CatalogSnapshot:
    """Read-only view over a list of medications loaded once per request"""

    def __init__(self, medications: Iterable[CatalogMedication]):
        self._medications = tuple(medications)

    def list_medications(self) -> Sequence[CatalogMedication]:
        return self._medications


def select_rule(main_symptom: str) -> SymptomRule:
    for rule in RULES:
        if rule.matches(main_symptom):
            return rule
    return DEFAULT_RULE


def severity_adjective(severity: int) -> Optional[str]:
    if severity >= SEVERE_THRESHOLD:
        return "Severe"
    if severity <= MILD_THRESHOLD:
        return "Mild"
    return None


def resolve_medication(
    rule: MedicationRule, medications: Sequence[CatalogMedication]
) -> Optional[CatalogMedication]:
    for medication in medications:
        if rule.name_contains in medication.name:
            return medication
    return None


def recommend(report: SymptomReport, catalog: MedicationLookup) -> Diagnosis:
    rule = select_rule(report.main_symptom)
    recommendations = list(rule.advice)

    words = []
    adjective = severity_adjective(report.severity)
    if adjective:
        words.append(adjective)
    duration = DURATION_ADJECTIVES.get(report.duration)
    if duration:
        words.append(duration)
    words.append(rule.label)
    text = " ".join(words)

    if adjective == "Severe":
        recommendations.append(ESCALATION_ADVICE)

    additional = report.additional_symptoms
    if additional:
        text += " with "
        if any(symptom in additional for symptom in NASAL_SYMPTOMS):
            text += "nasal congestion"
        if "Fatigue" in additional:
            recommendations.append(FATIGUE_ADVICE)

    medications = catalog.list_medications()
    resolved = []
    unresolved = []
    for medication_rule in rule.medications:
        medication = resolve_medication(medication_rule, medications)
        if medication is None:
            unresolved.append(medication_rule)
            continue
        resolved.append(RecommendedMedication(
            medication=medication,
            instructions=medication_rule.instructions,
            quantity=medication_rule.quantity,
        ))

    return Diagnosis(
        text=text,
        recommendations=tuple(recommendations),
        medications=tuple(resolved),
        unresolved=tuple(unresolved),
    )

"""CDI improvement contract sent to the completion service for Stage D."""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..entities.chart import CDI_FIELD_KEYS, normalize_field_map
from ..entities.patient import PatientInfo

CLARIFICATION_MARKER = "[NEEDS CLARIFICATION: reason]"

CDI_SYSTEM_PROMPT = f"""You are a Clinical Documentation Improvement (CDI) specialist. Review clinical documentation and enhance it so it meets CDI best practices and compliance standards.

## CDI Best Practices to Apply:

1. **Specificity**: Document diagnoses with maximum specificity (e.g. "Type 2 diabetes mellitus with diabetic chronic kidney disease" rather than "diabetes").
2. **Clinical Indicators**: Add clinical indicators that support each diagnosis (lab values, vital signs, exam findings).
3. **Severity & Acuity**: Document severity (mild, moderate, severe) and acuity (acute, chronic, acute-on-chronic).
4. **Cause and Effect**: Make relationships between conditions explicit (e.g. "hypertensive heart disease").
5. **Present on Admission (POA)**: Clarify whether conditions were present on admission.
6. **Risk Adjustment**: Support accurate risk adjustment and severity of illness.
7. **Medical Necessity**: Document medical necessity for procedures and treatments.
8. **Comorbidities & Complications**: Capture comorbidities and complications that affect treatment.
9. **ICD-10 Alignment**: Use terminology aligned with ICD-10 coding requirements.
10. **Completeness**: Fill gaps with clinically appropriate language based on the context provided.

## Your Task:

Enhance each section following these practices:
- Improve specificity and clinical accuracy
- Add supporting clinical indicators where appropriate
- Use proper medical terminology
- Preserve factual content; do not invent information that the original does not support
- Flag ambiguous areas inline with {CLARIFICATION_MARKER}

Return the enhanced documentation in the exact JSON structure requested."""

# storage key -> prompt key
PROMPT_KEYS: Dict[str, str] = {
    "chief_complaint": "chief_complaint",
    "history_of_illness": "history_of_present_illness",
    "history": "medical_history",
    "ros": "review_of_systems",
    "physical_exam": "physical_exam",
    "vital_signs": "vital_signs",
    "diagnosis": "diagnosis",
    "plan": "plan",
    "assessment": "assessment",
    "clinical_impression": "clinical_impression",
}

NOTES_KEY = "cdi_notes"

_OUTPUT_SHAPE = """{
  "chief_complaint": "enhanced text",
  "history_of_present_illness": "enhanced text",
  "medical_history": "enhanced text",
  "review_of_systems": "enhanced text",
  "physical_exam": "enhanced text",
  "vital_signs": "enhanced text",
  "diagnosis": "enhanced text with ICD-10 alignment",
  "plan": "enhanced text",
  "assessment": "enhanced text",
  "clinical_impression": "enhanced text",
  "cdi_notes": "Summary of improvements made and any areas needing clarification"
}"""


@dataclass
class CdiImprovement:
    """Result of one improvement pass: untouched original, improved fields, notes."""

    original_data: Dict[str, str]
    improved_data: Dict[str, str]
    cdi_notes: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)


def patient_phrase(patient_info: Optional[PatientInfo]) -> Optional[str]:
    """E.g. "a 45-year-old female patient"; None when nothing is known."""
    if patient_info is None:
        return None
    age = patient_info.age
    gender = (patient_info.gender or "").strip()
    if age in (None, "") and not gender:
        return None
    words = ["a"]
    if age not in (None, ""):
        words.append(f"{age}-year-old")
    if gender:
        words.append(gender)
    words.append("patient")
    return " ".join(words)


def demographics_block(patient_info: Optional[PatientInfo]) -> str:
    phrase = patient_phrase(patient_info)
    if phrase is None:
        return ""
    age = patient_info.age if patient_info.age not in (None, "") else "Unknown"
    gender = patient_info.gender or "Unknown"
    return (
        "\n## Patient Demographics:\n"
        f"- Age: {age}\n"
        f"- Gender: {gender}\n\n"
        "Use these demographics to reference the patient in every documentation field. "
        f'Refer to the patient as "the patient" or "{phrase}". '
        'Do NOT use placeholders like "[NEEDS CLARIFICATION: age and gender]"; '
        "use the demographics provided above.\n"
    )


def to_prompt_payload(original: Mapping[str, Any]) -> Dict[str, str]:
    fields = normalize_field_map(original)
    return {PROMPT_KEYS[key]: fields[key] for key in CDI_FIELD_KEYS}


def build_cdi_messages(
    original: Mapping[str, Any], patient_info: Optional[PatientInfo] = None
) -> List[Dict[str, str]]:
    payload = json.dumps(to_prompt_payload(original), indent=2)
    user_content = (
        "Please review and enhance the following clinical documentation to be CDI-compliant. "
        "Return the improved version in JSON format with the same field names.\n"
        f"{demographics_block(patient_info)}"
        "Current Clinical Documentation:\n"
        f"{payload}\n\n"
        "Return a JSON object with these exact fields:\n"
        f"{_OUTPUT_SHAPE}"
    )
    return [
        {"role": "system", "content": CDI_SYSTEM_PROMPT},
        {"role": "user", "content": user_content},
    ]


def map_cdi_response(payload: Mapping[str, Any]) -> Tuple[Dict[str, str], str]:
    """Map prompt keys back to storage keys; absent values become ""."""
    improved = {}
    for key in CDI_FIELD_KEYS:
        value = payload.get(PROMPT_KEYS[key])
        improved[key] = value if isinstance(value, str) else ""
    notes = payload.get(NOTES_KEY)
    return improved, notes if isinstance(notes, str) else ""

"""
StructuredNote normalization of extraction responses.
"""

from chartscribe.domain.entities.structured_note import (
    VITALS_PLACEHOLDER,
    DiagnosisEntry,
    StructuredNote,
    Vitals,
)


def test_sparse_response_is_filled_to_a_complete_note():
    note = StructuredNote.from_dict(
        {
            "chief_complaint": "Headache",
            "history": {"social_history": "Drinks socially"},
            "vitals": {"bp": "130/85"},
        }
    )

    assert note.chief_complaint == "Headache"
    assert note.history_of_present_illness == ""
    assert note.history.past_medical_history == ""
    assert note.history.social_history == "Drinks socially"
    assert note.vitals.bp == "130/85"
    assert note.vitals.height == VITALS_PLACEHOLDER
    assert note.vitals.weight == VITALS_PLACEHOLDER
    assert note.vitals.bmi == VITALS_PLACEHOLDER
    assert note.diagnosis == [DiagnosisEntry()]
    assert note.extra_info == ""


def test_every_leaf_is_a_string():
    note = StructuredNote.from_dict(
        {
            "chief_complaint": None,
            "plan": 12,
            "history": "not an object",
            "vitals": {"height": None, "weight": 70},
            "diagnosis": [{"diagnosis_name": None, "treatment": "Rest"}],
        }
    )

    assert all(isinstance(value, str) for value in note.leaf_values())
    assert note.plan == "12"
    assert note.vitals.height == VITALS_PLACEHOLDER
    assert note.vitals.weight == "70"
    assert note.diagnosis[0].diagnosis_name == ""
    assert note.diagnosis[0].treatment == "Rest"


def test_empty_or_missing_diagnosis_becomes_one_placeholder():
    assert StructuredNote.from_dict({"diagnosis": []}).diagnosis == [DiagnosisEntry()]
    assert StructuredNote.from_dict({}).diagnosis == [DiagnosisEntry()]
    assert StructuredNote(diagnosis=[]).diagnosis == [DiagnosisEntry()]


def test_plain_string_diagnosis_entries_keep_their_name():
    note = StructuredNote.from_dict({"diagnosis": ["Migraine", {"diagnosis_name": "Anemia"}]})

    assert [d.diagnosis_name for d in note.diagnosis] == ["Migraine", "Anemia"]
    assert note.diagnosis[0].treatment == ""


def test_non_mapping_response_gives_blank_note():
    blank = StructuredNote(vitals=Vitals.unknown())
    assert StructuredNote.from_dict(None) == blank
    assert StructuredNote.from_dict(["a", "b"]) == blank


def test_copy_is_independent():
    note = StructuredNote.from_dict({"diagnosis": [{"diagnosis_name": "Asthma"}]})
    clone = note.copy()
    clone.diagnosis[0].diagnosis_name = "Changed"
    clone.history.family_history = "Changed"

    assert note.diagnosis[0].diagnosis_name == "Asthma"
    assert note.history.family_history == ""

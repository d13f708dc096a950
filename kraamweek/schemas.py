# schemas.py
"""
marshmallow schemas for the AppData document and for record input.

Two kinds of schema live here:
- document schemas. AppDataShapeSchema decides whether a stored or imported
  document is usable at all (an object holding the five collection lists).
  AppDataSchema and its nested entity schemas go further and report single
  entities with a missing id, type or timestamp. Those are logged, never
  dropped: one odd entity must not cost the rest of the document.
- input schemas (BabyRecordInputSchema, MotherRecordInputSchema) check a new
  record, including plausible ranges per record type. Forms call them before
  saving; DataService.add_baby_record/add_mother_record log what they find
  and store the record anyway.

Only `validate()` is used; documents are stored exactly as parsed.
"""

from __future__ import annotations

from typing import Any, Dict

from marshmallow import INCLUDE, Schema, ValidationError, fields, validate, validates_schema

from .models import (
    ALERT_CATEGORIES,
    ALERT_TYPES,
    BABY_RECORD_TYPES,
    BREAST_SIDES,
    DIAPER_AMOUNTS,
    DIAPER_TYPES,
    FAMILY_OBSERVATION_CATEGORIES,
    FEEDING_TYPES,
    MOODS,
    MOTHER_RECORD_TYPES,
    NOTE_CATEGORIES,
    ROLE_ALIASES,
    SEXES,
    TASK_ASSIGNEES,
    TASK_CATEGORIES,
    TASK_PRIORITIES,
    TASK_STATUSES,
    as_number,
    iso_to_dt,
)


def _iso_timestamp(value: str) -> None:
    try:
        iso_to_dt(value)
    except ValueError:
        raise ValidationError("Geen geldige ISO-8601 datum/tijd.")


# =============================================================================
# Document schemas
# =============================================================================
class _EntitySchema(Schema):
    class Meta:
        unknown = INCLUDE

    id = fields.Str(required=True)


class BabyRecordSchema(_EntitySchema):
    timestamp = fields.Str(required=True, validate=_iso_timestamp)
    type = fields.Str(required=True, validate=validate.OneOf(BABY_RECORD_TYPES))


class MotherRecordSchema(_EntitySchema):
    timestamp = fields.Str(required=True, validate=_iso_timestamp)
    type = fields.Str(required=True, validate=validate.OneOf(MOTHER_RECORD_TYPES))


class FamilyObservationSchema(_EntitySchema):
    timestamp = fields.Str(required=True, validate=_iso_timestamp)
    category = fields.Str(required=True, validate=validate.OneOf(FAMILY_OBSERVATION_CATEGORIES))
    observation = fields.Str()
    concerns = fields.List(fields.Str())
    recommendations = fields.List(fields.Str())


class TaskSchema(_EntitySchema):
    title = fields.Str(required=True)
    status = fields.Str(required=True, validate=validate.OneOf(TASK_STATUSES))
    priority = fields.Str(validate=validate.OneOf(TASK_PRIORITIES))
    category = fields.Str(validate=validate.OneOf(TASK_CATEGORIES))
    assignedTo = fields.Str(validate=validate.OneOf(TASK_ASSIGNEES))


class AlertSchema(_EntitySchema):
    timestamp = fields.Str(validate=_iso_timestamp)
    type = fields.Str(required=True, validate=validate.OneOf(ALERT_TYPES))
    category = fields.Str(required=True, validate=validate.OneOf(ALERT_CATEGORIES))
    message = fields.Str(required=True)
    acknowledged = fields.Bool()


class BabyProfileSchema(_EntitySchema):
    # "" is an unfilled form field
    geslacht = fields.Str(validate=validate.OneOf(SEXES + [""]))
    geboortedatum = fields.Str()
    geboortgewicht = fields.Float(allow_none=True)


class AppDataShapeSchema(Schema):
    class Meta:
        unknown = INCLUDE

    babyRecords = fields.List(fields.Dict(), required=True)
    motherRecords = fields.List(fields.Dict(), required=True)
    familyObservations = fields.List(fields.Dict(), required=True)
    tasks = fields.List(fields.Dict(), required=True)
    alerts = fields.List(fields.Dict(), required=True)
    babyProfile = fields.Dict(allow_none=True)


class AppDataSchema(Schema):
    class Meta:
        unknown = INCLUDE

    babyRecords = fields.List(fields.Nested(BabyRecordSchema), required=True)
    motherRecords = fields.List(fields.Nested(MotherRecordSchema), required=True)
    familyObservations = fields.List(fields.Nested(FamilyObservationSchema), required=True)
    tasks = fields.List(fields.Nested(TaskSchema), required=True)
    alerts = fields.List(fields.Nested(AlertSchema), required=True)
    babyProfile = fields.Nested(BabyProfileSchema, allow_none=True)


class UserSchema(Schema):
    class Meta:
        unknown = INCLUDE

    name = fields.Str()
    role = fields.Str(required=True, validate=validate.OneOf(list(ROLE_ALIASES)))


# =============================================================================
# Input schemas
# =============================================================================
class BabyRecordInputSchema(Schema):
    class Meta:
        unknown = INCLUDE

    timestamp = fields.Str(required=True, validate=_iso_timestamp)
    type = fields.Str(required=True, validate=validate.OneOf(BABY_RECORD_TYPES))
    value = fields.Raw(allow_none=True)
    notes = fields.Str(allow_none=True, validate=validate.Length(max=1000))
    duration = fields.Float(validate=validate.Range(min=1, max=1440, error="Duur moet tussen {min} en {max} minuten liggen."))
    amount = fields.Float(validate=validate.Range(min=1, max=500, error="Hoeveelheid moet tussen {min} en {max} ml liggen."))
    weight = fields.Float(validate=validate.Range(min=500, max=10000, error="Gewicht moet tussen {min} en {max} gram liggen."))
    feedingType = fields.Str(validate=validate.OneOf(FEEDING_TYPES))
    diaperType = fields.Str(validate=validate.OneOf(DIAPER_TYPES))
    diaperAmount = fields.Str(validate=validate.OneOf(DIAPER_AMOUNTS))
    jaundiceLevel = fields.Int(validate=validate.Range(min=1, max=5))
    breastSide = fields.Str(validate=validate.OneOf(BREAST_SIDES))
    noteCategory = fields.Str(validate=validate.OneOf(NOTE_CATEGORIES))

    @validates_schema
    def validate_by_type(self, data, **kwargs):
        """Fields a record type cannot do without."""
        record_type = data.get("type")

        if record_type == "temperature":
            temp = as_number(data.get("value"))
            if temp is None:
                raise ValidationError("Temperatuur moet een geldig getal zijn.", "value")
            if not 30 <= temp <= 45:
                raise ValidationError("Temperatuur moet tussen 30 en 45 °C liggen.", "value")
        elif record_type == "weight" and data.get("weight") is None:
            raise ValidationError("Gewicht is verplicht.", "weight")
        elif record_type == "jaundice" and data.get("jaundiceLevel") is None:
            raise ValidationError("Geelzien niveau is verplicht.", "jaundiceLevel")
        elif record_type == "sleep" and data.get("duration") is None:
            raise ValidationError("Duur is verplicht.", "duration")
        elif record_type == "note" and not (data.get("notes") or "").strip():
            raise ValidationError("Notitie mag niet leeg zijn.", "notes")


class BloodPressureSchema(Schema):
    systolic = fields.Int(required=True, validate=validate.Range(min=40, max=300))
    diastolic = fields.Int(required=True, validate=validate.Range(min=40, max=300))


class MotherRecordInputSchema(Schema):
    class Meta:
        unknown = INCLUDE

    timestamp = fields.Str(required=True, validate=_iso_timestamp)
    type = fields.Str(required=True, validate=validate.OneOf(MOTHER_RECORD_TYPES))
    value = fields.Raw(allow_none=True)
    notes = fields.Str(allow_none=True, validate=validate.Length(max=1000))
    duration = fields.Float(validate=validate.Range(min=1, max=1440))
    bloodPressure = fields.Nested(BloodPressureSchema)
    painLevel = fields.Int(validate=validate.Range(min=1, max=10))
    mood = fields.Str(validate=validate.OneOf(MOODS))

    @validates_schema
    def validate_by_type(self, data, **kwargs):
        record_type = data.get("type")

        if record_type == "temperature":
            temp = as_number(data.get("value"))
            if temp is None:
                raise ValidationError("Temperatuur moet een geldig getal zijn.", "value")
            if not 30 <= temp <= 45:
                raise ValidationError("Temperatuur moet tussen 30 en 45 °C liggen.", "value")
        elif record_type == "blood_pressure" and not data.get("bloodPressure"):
            raise ValidationError("Bloeddruk is verplicht.", "bloodPressure")
        elif record_type == "pain" and data.get("painLevel") is None:
            raise ValidationError("Pijnniveau is verplicht.", "painLevel")
        elif record_type == "mood" and not data.get("mood"):
            raise ValidationError("Stemming is verplicht.", "mood")


def validate_app_data(doc: Any) -> Dict[str, Any]:
    """Structural errors of an AppData document ({} when the document is usable)."""
    return AppDataShapeSchema().validate(doc)


def entity_errors(doc: Dict[str, Any]) -> Dict[str, Any]:
    """Per-entity problems of a usable document, keyed by collection and index."""
    return AppDataSchema().validate(doc)


def validate_baby_record(data: Dict[str, Any]) -> Dict[str, Any]:
    return BabyRecordInputSchema().validate(data)


def validate_mother_record(data: Dict[str, Any]) -> Dict[str, Any]:
    return MotherRecordInputSchema().validate(data)

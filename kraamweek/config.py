# config.py
# Settings + medical thresholds (the kraamhulp or midwife can tweak these easily)

from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

DATA_DIR = Path(os.getenv("KRAAMWEEK_DATA_DIR", "data"))
LOG_LEVEL = os.getenv("KRAAMWEEK_LOG_LEVEL", "INFO").upper()

STORAGE_KEY = "kraamweek-data"
USER_KEY = "kraamweek-user"

THRESHOLDS = {
    # Baby temperature (°C)
    "baby_temp_low": 36.0,
    "baby_temp_high": 37.5,
    "baby_temp_critical_low": 35.0,
    "baby_temp_critical_high": 38.0,

    # Jaundice scale 1 (mild) - 5 (severe)
    "jaundice_warning": 4,
    "jaundice_critical": 5,

    # Newborns should not go longer than this between feedings
    "feeding_gap_hours": 4.0,

    # Mother temperature (°C)
    "mother_fever": 38.0,
    "mother_fever_critical": 38.5,

    # Mother blood pressure (mmHg)
    "bp_sys_high": 140,
    "bp_dia_high": 90,
    "bp_sys_low": 90,
    "bp_dia_low": 60,
    "bp_sys_critical_high": 160,
    "bp_dia_critical_high": 100,
    "bp_sys_critical_low": 80,

    # Mother pain scale 1-10
    "pain_warning": 8,
}

TASKS = {
    "question_prefix": "Vraag beantwoorden: ",
    "todo_prefix": "Verzoek uitvoeren: ",
    "title_max_chars": 50,
    "ellipsis": "...",
}

BIRTH_WEIGHT_NOTE = "Geboortegewicht"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = LOG_LEVEL) -> None:
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)

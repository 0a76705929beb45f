"""
Fee schedule tables for entry and nationals fees.

All amounts are whole Rand. The tables are plain data so that fee
calculation stays a pure lookup; changing a tier means editing this module.

Regular entry fees are keyed by (age category, performance type). Both keys
are matched case-insensitively by FeeService.
"""

from typing import Dict


# Age brackets used on EODSA event sheets, plus the named divisions
# some regional events still advertise.
AGE_CATEGORIES = [
    "All Ages",
    "4 & Under",
    "6 & Under",
    "7-9",
    "10-12",
    "13-14",
    "15-17",
    "18-24",
    "25-39",
    "40+",
    "60+",
    "Mini",
    "Junior",
    "Teen",
    "Senior",
    "Adult",
]

PERFORMANCE_TYPES = ["Solo", "Duet", "Trio", "Group"]

MASTERY_LEVELS = [
    "Water (Competitive)",
    "Fire (Advanced)",
]

# Per-entry fee for regular (non-nationals) events, identical across brackets.
_STANDARD_ENTRY_FEES: Dict[str, int] = {
    "Solo": 400,
    "Duet": 280,
    "Trio": 280,
    "Group": 220,
}

FEE_SCHEDULE: Dict[str, Dict[str, int]] = {
    age_category: dict(_STANDARD_ENTRY_FEES) for age_category in AGE_CATEGORIES
}


# Nationals

REGISTRATION_FEE_PER_DANCER = 300

# Solo package price by number of solos entered (the fifth solo is free).
SOLO_PACKAGES: Dict[int, int] = {
    1: 400,
    2: 750,
    3: 1000,
    4: 1200,
    5: 1200,
}
SOLO_PACKAGE_MAX = 5
ADDITIONAL_SOLO_FEE = 100

DUET_TRIO_FEE_PER_DANCER = 280
SMALL_GROUP_FEE_PER_DANCER = 220
LARGE_GROUP_FEE_PER_DANCER = 190
LARGE_GROUP_MIN_DANCERS = 10

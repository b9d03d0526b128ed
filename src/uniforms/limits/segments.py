"""Per-item maximum order quantities by cohort segment.

Segments are keyed by ``(education level, student type, gender)``. Item names
from the catalogue are folded to a canonical *item key* first, so that
"PE Jersey", "Jersey (Preschool)" and "jersey" all count as the same item.
"""

import re

ALL_EDUCATION_LEVELS = "All Education Levels"

EDUCATION_LEVELS = (
    "Kindergarten",
    "Elementary",
    "Junior High School",
    "Senior High School",
    "College",
)

# Levels that share another level's rules
LEVEL_FOLDS = {
    "Preschool": "Kindergarten",
    "Prekindergarten": "Kindergarten",
    "Vocational": "College",
}

GENDERS = ("Female", "Male")

_COHORT_SUFFIX = re.compile(
    r"\s*(?:\(|-\s*)(kindergarten|preschool|prekindergarten|elementary|junior high school|"
    r"senior high school|college|vocational)\)?$"
)

ITEM_ALIASES = {
    "shorts": "short",
    "pe jersey": "jersey",
    "necktie (girls)": "necktie girls",
    "necktie (boys)": "necktie boys",
    "number patch (grade level)": "number patch",
    "number patch (per grade)": "number patch",
    "elementary skirt": "elem skirt",
    "elementary blouse": "elem blouse",
    "junior high skirt": "jhs skirt",
    "junior high blouse": "jhs blouse",
    "senior high skirt": "shs skirt",
    "senior high blouse": "shs blouse",
    "senior high pants": "shs pants",
    "senior high long-sleeve": "shs long-sleeve",
}


def normalize_item_name(name: str | None) -> str:
    """Lowercase, trim and collapse internal whitespace."""
    if not name:
        return ""
    return " ".join(name.lower().split())


def resolve_item_key(name: str | None) -> str:
    """Fold a catalogue item name to the key used for slots and per-item limits."""
    normalized = normalize_item_name(name)
    if not normalized:
        return ""
    if "jogging pants" in normalized:
        return "jogging pants"
    if "new logo patch" in normalized:
        return "new logo patch"
    if "logo patch" in normalized:
        return "logo patch"
    if normalized in ITEM_ALIASES:
        return ITEM_ALIASES[normalized]

    stripped = _COHORT_SUFFIX.sub("", normalized)
    return ITEM_ALIASES.get(stripped, stripped)


def effective_level(education_level: str | None) -> str:
    level = (education_level or "").strip()
    return LEVEL_FOLDS.get(level, level)


def segment_key(education_level: str | None, student_type: str | None, gender: str | None) -> str:
    return f"{effective_level(education_level)}_{(student_type or 'new').lower()}_{(gender or '').strip()}"


_NEW_FEMALE_COMMON = {"jersey": 1, "jogging pants": 1, "id lace": 1, "logo patch": 3}
_NEW_MALE_COMMON = {"jersey": 1, "jogging pants": 1, "id lace": 1, "logo patch": 3}
_OLD_BASIC = {"new logo patch": 3}
_OLD_WITH_NUMBER = {"new logo patch": 3, "number patch": 3}

SEGMENT_RULES: dict[str, dict[str, int]] = {
    "Kindergarten_new_Female": {"kinder dress": 1, "kinder necktie": 1, **_NEW_FEMALE_COMMON},
    "Kindergarten_new_Male": {"short": 1, "polo jacket": 1, **_NEW_MALE_COMMON},
    "Kindergarten_old_Female": dict(_OLD_BASIC),
    "Kindergarten_old_Male": dict(_OLD_BASIC),
    "Elementary_new_Female": {
        "elem skirt": 1,
        "elem blouse": 1,
        "ordinary necktie (garter)": 1,
        **_NEW_FEMALE_COMMON,
        "number patch": 3,
    },
    "Elementary_new_Male": {"short": 1, "polo jacket": 1, **_NEW_MALE_COMMON, "number patch": 3},
    "Elementary_old_Female": dict(_OLD_WITH_NUMBER),
    "Elementary_old_Male": dict(_OLD_WITH_NUMBER),
    "Junior High School_new_Female": {
        "jhs skirt": 1,
        "jhs blouse": 1,
        "ordinary necktie (garter)": 1,
        **_NEW_FEMALE_COMMON,
        "number patch": 3,
    },
    "Junior High School_new_Male": {"short": 1, "polo jacket": 1, **_NEW_MALE_COMMON, "number patch": 3},
    "Junior High School_old_Female": dict(_OLD_WITH_NUMBER),
    "Junior High School_old_Male": dict(_OLD_WITH_NUMBER),
    "Senior High School_new_Female": {
        "shs skirt": 1,
        "shs blouse": 1,
        "necktie girls": 1,
        **_NEW_FEMALE_COMMON,
        "number patch": 3,
    },
    "Senior High School_new_Male": {
        "shs pants": 1,
        "shs long-sleeve": 1,
        "necktie boys": 1,
        **_NEW_MALE_COMMON,
        "number patch": 3,
    },
    "Senior High School_old_Female": dict(_OLD_WITH_NUMBER),
    "Senior High School_old_Male": dict(_OLD_WITH_NUMBER),
    "College_new_Female": {
        "college skirt": 1,
        "college blouse": 1,
        "ordinary necktie": 1,
        **_NEW_FEMALE_COMMON,
    },
    "College_new_Male": {"pants": 1, "polo straight": 1, **_NEW_MALE_COMMON},
    "College_old_Female": dict(_OLD_BASIC),
    "College_old_Male": dict(_OLD_BASIC),
}


def max_quantity_for_item(
    item_name,
    education_level,
    student_type,
    gender,
    default_max=1,
    rules=None,
) -> int:
    """Maximum quantity of one item a student of the given segment may hold.

    Segments without rules allow ``default_max``. Within a segment, unknown
    items allow ``default_max`` for new students and nothing for old students,
    except that old students may order "logo patch" under the "new logo patch"
    rule.
    """
    rules = SEGMENT_RULES if rules is None else rules
    segment = rules.get(segment_key(education_level, student_type, gender))
    if not segment:
        return default_max

    item_key = resolve_item_key(item_name)
    if not item_key:
        return default_max
    if item_key in segment:
        return segment[item_key]

    normalized = normalize_item_name(item_name)
    if normalized in segment:
        return segment[normalized]

    if (student_type or "").lower() == "old":
        if item_key == "logo patch" and "new logo patch" in segment:
            return segment["new logo patch"]
        return 0

    return default_max


def max_quantities_for_student(education_level, student_type, gender, rules=None) -> dict[str, int]:
    """All per-item maxima for a segment, keyed by item key."""
    rules = SEGMENT_RULES if rules is None else rules
    segment = rules.get(segment_key(education_level, student_type, gender))
    if not segment:
        return {}

    maxima = dict(segment)
    if (student_type or "").lower() == "old" and "new logo patch" in maxima:
        maxima.setdefault("logo patch", maxima["new logo patch"])
    return maxima

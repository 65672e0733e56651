# backend/checkup_capacity/services/capacity/resources.py
"""
Resource keys.

"basic" is reserved: it drives the closure cascade. "egd" and "col" are the
built-in specialised exams; anything else is a free-form admin-defined
resource. "special" was renamed to "col" and is always stored as "col";
reads mirror "col" under the "cscope" alias.
"""

BASIC = "basic"
EGD = "egd"
COL = "col"
COL_ALIAS = "cscope"

BUILTIN_RESOURCES = (BASIC, EGD, COL)

_SYNONYMS = {
    "": BASIC,
    "basic": BASIC,
    "egd": EGD,
    "gast": EGD,
    "upper": EGD,
    "gastroscopy": EGD,
    "upper-scope": EGD,
    "col": COL,
    "cscope": COL,
    "colon": COL,
    "colonoscopy": COL,
    "c-scope": COL,
    "special": COL,
}


def normalize_resource_key(raw: str | None) -> str:
    """Map an inbound or stored resource name to its canonical key."""
    key = (raw or "").strip().lower()
    return _SYNONYMS.get(key, key)


def parse_resource_list(raw: str | None) -> list[str]:
    """
    Parse a comma-separated resource list.

    Order is preserved, duplicates dropped, and "basic" always comes first.
    """
    keys = [BASIC]
    for part in (raw or "").split(","):
        if not part.strip():
            continue
        key = normalize_resource_key(part)
        if key not in keys:
            keys.append(key)
    return keys

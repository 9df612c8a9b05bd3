import logging
import re
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional, Protocol, Sequence

"""
TIER ACCESS MODEL

Normalises free-form tier strings, ranks them and answers
"can a member at tier X see content requiring tier Y?".

Pure and stateless: every function is total and never raises
for malformed tier input. Anything unrecognised is a Free Member.
"""

logger = logging.getLogger(__name__)


#Canonical membership tiers (Admin is a non-purchasable pseudo-tier)
class Tier(str, Enum):
    FREE = "Free Member"
    ASSOCIATE = "Associate Member"
    FULL = "Full Member"
    GOLD = "Gold Member"
    ADMIN = "Admin"


#Purchasable tiers, least to most access
MEMBER_TIERS: tuple[Tier, ...] = (
    Tier.FREE,
    Tier.ASSOCIATE,
    Tier.FULL,
    Tier.GOLD,
)


#Higher number = more access
TIER_HIERARCHY: Mapping[Tier, int] = MappingProxyType(
    {
        Tier.FREE: 1,
        Tier.ASSOCIATE: 2,
        Tier.FULL: 3,
        Tier.GOLD: 4,
        Tier.ADMIN: 5,
    }
)


#Legacy / alternate spellings found in stored records, keyed by cleaned lowercase text
LEGACY_ALIASES: Mapping[str, Tier] = MappingProxyType(
    {
        "associate agency": Tier.ASSOCIATE,
        "associate": Tier.ASSOCIATE,
        "associate members": Tier.ASSOCIATE,
        "full": Tier.FULL,
        "full members": Tier.FULL,
        "gold": Tier.GOLD,
        "gold members": Tier.GOLD,
        "founding member": Tier.GOLD,
        "founding members": Tier.GOLD,
        "free": Tier.FREE,
        "free members": Tier.FREE,
    }
)


_CANONICAL_NAMES: Mapping[str, Tier] = MappingProxyType(
    {tier.value.lower(): tier for tier in Tier}
)


#Labelled form used when tiers are written back to content records
_DATABASE_LABELS: Mapping[Tier, str] = MappingProxyType(
    {
        Tier.FREE: "Free Member (Tier 1)",
        Tier.ASSOCIATE: "Associate Member (Tier 2)",
        Tier.FULL: "Full Member (Tier 3)",
        Tier.GOLD: "Gold Member (Tier 4)",
    }
)


# Every section is open to every tier for now; raise a level here to gate it.
SECTION_ACCESS_REQUIREMENTS: Mapping[str, int] = MappingProxyType(
    {
        "opportunities": 1,
        "events": 1,
        "resources": 1,
        "marketIntel": 1,
        "offers": 1,
        "updates": 1,
        "accessHubs": 1,
    }
)


SECTION_NAMES: Mapping[str, str] = MappingProxyType(
    {
        "opportunities": "Business Opportunities",
        "events": "Events & Workshops",
        "resources": "Resources",
        "marketIntel": "Market Intelligence",
        "offers": "Offers",
        "updates": "Updates",
        "accessHubs": "Access Hubs",
    }
)


_PARENTHETICAL = re.compile(r"\(.*?\)")


class TierHolder(Protocol):
    selected_tier: Optional[str]


def _clean(raw: str) -> str:
    # "Gold Member (Tier 4 - legacy) - Premium access" -> "gold member"
    text = _PARENTHETICAL.sub("", raw)
    text = text.split(" - ")[0]
    return " ".join(text.split()).lower()


#Strict lookup for writes: None when the label is neither an alias nor a canonical name
def parse_tier(raw: Any, *, allow_admin: bool = False) -> Optional[Tier]:
    if not raw or not isinstance(raw, str):
        return None

    cleaned = _clean(raw)
    tier = LEGACY_ALIASES.get(cleaned) or _CANONICAL_NAMES.get(cleaned)

    if tier is Tier.ADMIN and not allow_admin:
        return None
    return tier


def normalize_tier(raw: Any, *, allow_admin: bool = False) -> Tier:
    """
    Resolve a raw tier string to a canonical Tier.

    Parenthetical qualifiers and " - ..." descriptions are dropped, matching
    is case-insensitive and legacy aliases are checked before canonical names.
    Empty, non-string or unrecognised input resolves to Free Member. Admin is
    only returned when allow_admin is set.
    """
    if not raw or not isinstance(raw, str):
        return Tier.FREE

    tier = parse_tier(raw, allow_admin=allow_admin)
    if tier is None:
        logger.debug("Unrecognised tier %r, treating as Free Member", raw)
        return Tier.FREE

    return tier


def tier_rank(raw: Any, *, allow_admin: bool = False) -> int:
    return TIER_HIERARCHY[normalize_tier(raw, allow_admin=allow_admin)]


#True when the user's tier ranks at or above the item's requirement
def has_tier_access(item_tier: Optional[str], user_tier: Optional[str]) -> bool:
    if not item_tier:
        return True
    return tier_rank(user_tier) >= tier_rank(item_tier)


#Same check for callers holding a member object rather than a tier string
def has_tier_access_for_user(
    item_tier: Optional[str],
    user: Optional[TierHolder],
) -> bool:
    user_tier = getattr(user, "selected_tier", None) if user is not None else None
    return has_tier_access(item_tier, user_tier)


def can_access_tier(required_tier: Optional[str], user_tier: Optional[str]) -> bool:
    return has_tier_access(required_tier, user_tier)


#Member tiers whose content a user can see, ascending
def accessible_tiers(user_tier: Optional[str]) -> list[Tier]:
    rank = tier_rank(user_tier)
    return [tier for tier in MEMBER_TIERS if TIER_HIERARCHY[tier] <= rank]


def database_tier(tier: Any) -> str:
    return _DATABASE_LABELS.get(normalize_tier(tier), Tier.FREE.value)


def tier_restriction_message(item_tier: Optional[str]) -> str:
    required = normalize_tier(item_tier)
    return (
        f"This content requires {required.value} membership or higher. "
        f"Upgrade your membership to access it."
    )


# =========================================================
# DASHBOARD SECTIONS (admin-aware levels)
# =========================================================


def get_user_access_level(user_tier: Optional[str]) -> int:
    return tier_rank(user_tier, allow_admin=True)


def has_access_to_section(user_tier: Optional[str], section_id: str) -> bool:
    required_level = SECTION_ACCESS_REQUIREMENTS.get(section_id, 1)
    return get_user_access_level(user_tier) >= required_level


def required_tier_for_section(section_id: str) -> Tier:
    required_level = SECTION_ACCESS_REQUIREMENTS.get(section_id, 1)
    for tier, level in TIER_HIERARCHY.items():
        if level == required_level:
            return tier
    return Tier.FREE


def get_ordered_sections(
    all_sections: Sequence[Mapping[str, Any]],
    user_tier: Optional[str],
) -> dict[str, list[dict[str, Any]]]:
    """
    Split sections into accessible and restricted lists.

    Every input section lands in exactly one list and relative order is kept.
    Restricted sections are copies flagged with isRestricted=True; accessible
    ones are returned as given.
    """
    accessible = []
    restricted = []

    for section in all_sections:
        if has_access_to_section(user_tier, section.get("id")):
            accessible.append(section)
        else:
            restricted.append({**section, "isRestricted": True})

    return {"accessible": accessible, "restricted": restricted}


def get_restriction_message(section_id: str, user_tier: Optional[str]) -> str:
    required = required_tier_for_section(section_id)
    section_name = SECTION_NAMES.get(section_id) or str(section_id)

    return (
        f"{section_name} requires {required.value} membership or higher. "
        f"Upgrade your membership to access this content."
    )


#Purchasable tiers strictly above the user's current level, ascending
def get_upgrade_options(current_tier: Optional[str]) -> list[Tier]:
    current_level = get_user_access_level(current_tier)
    return [
        tier
        for tier in sorted(MEMBER_TIERS, key=TIER_HIERARCHY.__getitem__)
        if TIER_HIERARCHY[tier] > current_level
    ]

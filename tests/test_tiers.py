from types import SimpleNamespace

import pytest

from portal.core.tiers import (
    LEGACY_ALIASES,
    MEMBER_TIERS,
    SECTION_ACCESS_REQUIREMENTS,
    TIER_HIERARCHY,
    Tier,
    accessible_tiers,
    can_access_tier,
    database_tier,
    get_ordered_sections,
    get_restriction_message,
    get_upgrade_options,
    get_user_access_level,
    has_access_to_section,
    has_tier_access,
    has_tier_access_for_user,
    normalize_tier,
    parse_tier,
    required_tier_for_section,
    tier_rank,
    tier_restriction_message,
)


CANONICAL = [t.value for t in MEMBER_TIERS]


class TestNormalizeTier:
    @pytest.mark.parametrize("raw", [None, "", "   ", 0, 42, [], {}, object()])
    def test_empty_or_non_string_is_free(self, raw):
        assert normalize_tier(raw) is Tier.FREE

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("Gold Member (Tier 3)", Tier.GOLD),
            ("Gold Member (Tier 4)", Tier.GOLD),
            ("full member", Tier.FULL),
            ("FULL MEMBER", Tier.FULL),
            ("  Associate Member  ", Tier.ASSOCIATE),
            ("Free Member (Tier 1)", Tier.FREE),
            ("associate agency (tier 1)", Tier.ASSOCIATE),
            ("Associate Agency (Tier 2)", Tier.ASSOCIATE),
            ("Associate Members", Tier.ASSOCIATE),
            ("Full Members", Tier.FULL),
            ("Founding Members", Tier.GOLD),
            ("Gold Member (Tier 4) - Premium access", Tier.GOLD),
            ("Gold   Member", Tier.GOLD),
        ],
    )
    def test_known_spellings(self, raw, expected):
        assert normalize_tier(raw) is expected

    @pytest.mark.parametrize("raw", ["Platinum Member", "gold-ish", "(Tier 4)", "vip"])
    def test_unrecognised_falls_back_to_free(self, raw):
        assert normalize_tier(raw) is Tier.FREE

    def test_output_is_always_canonical(self):
        for raw in ["x", "Gold Member", "associate agency", "", None, "Admin"]:
            assert normalize_tier(raw) in MEMBER_TIERS

    @pytest.mark.parametrize(
        "raw",
        [
            "Gold Member (Tier 3)",
            "full member (x)",
            "Associate Agency (Tier 1)",
            "Nope (Tier 2)",
            "Gold Member (Tier 4 - legacy)",
            "Full Member (Tier 3 - migrated) - Standard access",
        ],
    )
    def test_parenthetical_is_ignored(self, raw):
        stripped = raw[: raw.index("(")]
        assert normalize_tier(raw) is normalize_tier(stripped)

    @pytest.mark.parametrize("tier", list(Tier))
    def test_idempotent(self, tier):
        once = normalize_tier(tier, allow_admin=True)
        assert normalize_tier(once, allow_admin=True) is once
        assert normalize_tier(once.value, allow_admin=True) is once

    def test_admin_only_in_admin_aware_variant(self):
        assert normalize_tier("Admin") is Tier.FREE
        assert normalize_tier("admin", allow_admin=True) is Tier.ADMIN

    def test_aliases_point_at_member_tiers(self):
        assert set(LEGACY_ALIASES.values()) <= set(MEMBER_TIERS)

    def test_dash_inside_parenthetical(self):
        assert normalize_tier("Gold Member (Tier 4 - legacy)") is Tier.GOLD

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("gold", Tier.GOLD),
            ("Associate Agency (Tier 2)", Tier.ASSOCIATE),
            ("Full Member - Standard access", Tier.FULL),
            ("Glod Member", None),
            ("", None),
            (None, None),
            ("Admin", None),
        ],
    )
    def test_parse_tier_is_strict(self, raw, expected):
        assert parse_tier(raw) is expected

    def test_parse_tier_admin_when_allowed(self):
        assert parse_tier("admin", allow_admin=True) is Tier.ADMIN

    def test_static_tables_are_read_only(self):
        with pytest.raises(TypeError):
            TIER_HIERARCHY[Tier.FREE] = 10
        with pytest.raises(TypeError):
            LEGACY_ALIASES["platinum"] = Tier.GOLD


class TestHierarchy:
    def test_ranks_strictly_increase(self):
        ranks = [TIER_HIERARCHY[t] for t in MEMBER_TIERS]
        assert ranks == sorted(ranks)
        assert len(set(ranks)) == len(ranks)
        assert TIER_HIERARCHY[Tier.ADMIN] > max(ranks)

    def test_tier_rank(self):
        assert tier_rank("Gold Member (Tier 3)") == 4
        assert tier_rank(None) == 1
        assert tier_rank("Admin") == 1
        assert tier_rank("Admin", allow_admin=True) == 5


class TestHasTierAccess:
    @pytest.mark.parametrize("tier", CANONICAL)
    def test_self_access(self, tier):
        assert has_tier_access(tier, tier) is True

    @pytest.mark.parametrize("required", CANONICAL)
    @pytest.mark.parametrize("user", CANONICAL)
    def test_monotonic(self, required, user):
        expected = TIER_HIERARCHY[Tier(user)] >= TIER_HIERARCHY[Tier(required)]
        assert has_tier_access(required, user) is expected
        assert can_access_tier(required, user) is expected

    @pytest.mark.parametrize("user", CANONICAL + ["", None, "garbage"])
    def test_no_restriction_is_always_accessible(self, user):
        assert has_tier_access("", user) is True
        assert has_tier_access(None, user) is True

    @pytest.mark.parametrize("required", CANONICAL + ["", None, "garbage", "Admin"])
    def test_missing_user_tier_behaves_like_free(self, required):
        assert has_tier_access(required, "") == has_tier_access(required, "Free Member")
        assert has_tier_access(required, None) == has_tier_access(required, "Free Member")

    def test_gold_with_qualifier_sees_full_content(self):
        assert normalize_tier("Gold Member (Tier 3)") is Tier.GOLD
        assert has_tier_access("Full Member", "Gold Member (Tier 3)") is True

    def test_free_cannot_see_associate(self):
        assert has_tier_access("Associate Member", "Free Member") is False

    def test_unrecognised_requirement_is_free(self):
        assert has_tier_access("Platinum Member", "Free Member") is True

    def test_user_object(self):
        gold = SimpleNamespace(selected_tier="Gold Member (Tier 4)")
        free = SimpleNamespace(selected_tier=None)

        assert has_tier_access_for_user("Full Member", gold) is True
        assert has_tier_access_for_user("Full Member", free) is False
        assert has_tier_access_for_user("Full Member", None) is False
        assert has_tier_access_for_user("", None) is True

    def test_accessible_tiers(self):
        assert accessible_tiers("Full Member") == [Tier.FREE, Tier.ASSOCIATE, Tier.FULL]
        assert accessible_tiers(None) == [Tier.FREE]


class TestSections:
    SECTIONS = [
        {"id": "opportunities", "label": "A"},
        {"id": "events", "label": "B"},
        {"id": "resources", "label": "C"},
        {"id": "marketIntel", "label": "D"},
        {"id": "offers", "label": "E"},
        {"id": "updates", "label": "F"},
        {"id": "mystery", "label": "G"},
    ]

    @pytest.mark.parametrize("tier", CANONICAL + ["", None, "Admin"])
    def test_partition_covers_every_section_once(self, tier):
        result = get_ordered_sections(self.SECTIONS, tier)
        ids = [s["id"] for s in result["accessible"]] + [s["id"] for s in result["restricted"]]

        assert len(result["accessible"]) + len(result["restricted"]) == len(self.SECTIONS)
        assert sorted(ids) == sorted(s["id"] for s in self.SECTIONS)

    def test_everything_is_open_today(self):
        result = get_ordered_sections(self.SECTIONS, "Free Member")
        assert result["accessible"] == self.SECTIONS
        assert result["restricted"] == []
        assert all(level == 1 for level in SECTION_ACCESS_REQUIREMENTS.values())

    def test_restricted_sections_are_flagged_copies(self, monkeypatch):
        monkeypatch.setattr(
            "portal.core.tiers.SECTION_ACCESS_REQUIREMENTS",
            {"events": 3, "resources": 2},
        )
        result = get_ordered_sections(self.SECTIONS, "Associate Member")

        assert [s["id"] for s in result["restricted"]] == ["events"]
        assert result["restricted"][0]["isRestricted"] is True
        assert "isRestricted" not in self.SECTIONS[1]
        assert [s["id"] for s in result["accessible"]] == [
            "opportunities", "resources", "marketIntel", "offers", "updates", "mystery",
        ]
        assert result["accessible"][0] is self.SECTIONS[0]

    def test_admin_clears_admin_level_sections(self, monkeypatch):
        monkeypatch.setattr(
            "portal.core.tiers.SECTION_ACCESS_REQUIREMENTS",
            {"events": 5},
        )
        assert has_access_to_section("Admin", "events") is True
        assert has_access_to_section("Gold Member", "events") is False
        assert get_user_access_level("admin") == 5

    def test_unknown_section_requires_nothing(self):
        assert has_access_to_section(None, "does-not-exist") is True
        assert required_tier_for_section("does-not-exist") is Tier.FREE


class TestMessages:
    def test_restriction_message_names_section_and_tier(self, monkeypatch):
        monkeypatch.setattr(
            "portal.core.tiers.SECTION_ACCESS_REQUIREMENTS",
            {"resources": 2},
        )
        message = get_restriction_message("resources", "Free Member")

        assert "Resources" in message
        assert "Associate Member" in message

    def test_restriction_message_with_current_levels(self):
        message = get_restriction_message("marketIntel", "Free Member")
        assert message.startswith("Market Intelligence requires Free Member membership")

    def test_unknown_section_uses_raw_id(self):
        message = get_restriction_message("mystery-box", None)
        assert message.startswith("mystery-box requires Free Member")

    def test_item_restriction_message(self):
        assert "Gold Member" in tier_restriction_message("Gold Member (Tier 4)")


class TestUpgradeOptions:
    def test_top_tier_has_no_upgrades(self):
        assert get_upgrade_options("Gold Member") == []

    def test_free_member_sees_all_paid_tiers(self):
        assert get_upgrade_options("Free Member") == [
            "Associate Member",
            "Full Member",
            "Gold Member",
        ]

    def test_missing_tier_is_free(self):
        assert get_upgrade_options(None) == get_upgrade_options("Free Member")

    def test_admin_never_offered(self):
        for tier in CANONICAL:
            assert Tier.ADMIN not in get_upgrade_options(tier)
        assert get_upgrade_options("Admin") == []

    def test_full_member(self):
        assert get_upgrade_options("full member (tier 3)") == [Tier.GOLD]


def test_database_tier_labels():
    assert database_tier("gold") == "Gold Member (Tier 4)"
    assert database_tier(None) == "Free Member (Tier 1)"
    assert normalize_tier(database_tier("Associate Member")) is Tier.ASSOCIATE

"""Unit tests for rule table config loading and rule construction."""

import json
import tempfile

import pytest
from pydantic import ValidationError

from cpq.catalog.products import default_catalog
from cpq.intake.models import ConfigurationItem
from cpq.rules.config import (
    RegionAdjustment,
    RulesConfig,
    VolumeTier,
    load_rules_config,
)
from cpq.rules.engine import PricingContext, RuleEngine
from cpq.rules.table import DEFAULT_RULES, build_rules

CATALOG = default_catalog()

CANONICAL_IDS = [
    "volume-discount-10-percent",
    "volume-discount-20-percent",
    "enterprise-tier-discount",
    "startup-tier-discount",
    "bundle-discount-compute-database",
    "premium-support-bundle",
    "region-pricing-us-west",
    "region-pricing-eu",
    "region-pricing-apac",
    "professional-services-early-bird",
]


def context(quantity: int = 1, **kwargs) -> PricingContext:
    item = ConfigurationItem(product_id="cloud-server-basic", quantity=quantity)
    return PricingContext(
        product=CATALOG.require_product("cloud-server-basic"),
        configuration=item,
        all_configurations=[item],
        **kwargs,
    )


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------


class TestDefaults:
    def test_default_table_ids_in_declaration_order(self):
        assert [r.id for r in DEFAULT_RULES] == CANONICAL_IDS

    def test_default_priorities(self):
        priorities = {r.id: r.priority for r in DEFAULT_RULES}
        assert priorities["volume-discount-20-percent"] == 9
        assert priorities["volume-discount-10-percent"] == 10
        assert priorities["enterprise-tier-discount"] == 5
        assert priorities["premium-support-bundle"] == 8
        assert priorities["professional-services-early-bird"] == 12
        assert priorities["bundle-discount-compute-database"] == 15
        assert priorities["region-pricing-eu"] == 20

    def test_rule_types(self):
        types = {r.id: r.type for r in DEFAULT_RULES}
        assert types["volume-discount-10-percent"] == "percentage"
        assert types["bundle-discount-compute-database"] == "bundle"
        assert types["region-pricing-us-west"] == "fixed"
        assert types["professional-services-early-bird"] == "fixed"


# ---------------------------------------------------------------------------
# Validation of descriptors
# ---------------------------------------------------------------------------


class TestDescriptorValidation:
    def test_volume_bounds_must_be_ordered(self):
        with pytest.raises(ValidationError):
            VolumeTier(
                id="v", name="V", priority=1, min_quantity=10, max_quantity=5, percentage=5
            )

    def test_percentage_capped_at_100(self):
        with pytest.raises(ValidationError):
            VolumeTier(id="v", name="V", priority=1, min_quantity=1, percentage=150)

    def test_region_multiplier_positive(self):
        with pytest.raises(ValidationError):
            RegionAdjustment(id="r", name="R", priority=1, regions=["x"], multiplier=0)

    def test_duplicate_ids_rejected(self):
        config = RulesConfig().model_dump()
        config["regions"][1]["id"] = "region-pricing-us-west"
        with pytest.raises(ValidationError, match="Duplicate rule ids"):
            RulesConfig(**config)


# ---------------------------------------------------------------------------
# Custom tables
# ---------------------------------------------------------------------------


class TestBuildRules:
    def test_custom_volume_tier(self):
        config = RulesConfig(
            volume_tiers=[
                VolumeTier(
                    id="bulk", name="Bulk", priority=1, min_quantity=3, percentage=50
                )
            ],
            customer_tiers=[],
            bundles=[],
            option_comps=[],
            regions=[],
            flat_discounts=[],
        )
        engine = RuleEngine(build_rules(config))
        assert engine.apply(100, context(quantity=2)).final_price == 100
        assert engine.apply(100, context(quantity=3)).final_price == 50

    def test_custom_region(self):
        config = RulesConfig(
            regions=[
                RegionAdjustment(
                    id="region-mars", name="Mars", priority=1, regions=["mars"], multiplier=2
                )
            ]
        )
        engine = RuleEngine(build_rules(config))
        assert engine.apply(10, context(region="mars")).final_price == 20
        # EU rule removed by replacing the region list
        assert engine.apply(10, context(region="eu-central")).final_price == 10


# ---------------------------------------------------------------------------
# load_rules_config
# ---------------------------------------------------------------------------


class TestLoadRulesConfig:
    def test_load_from_project_config(self):
        config = load_rules_config()
        assert [s.id for s in config.all_specs()] == CANONICAL_IDS

    def test_project_config_matches_defaults(self):
        assert load_rules_config() == RulesConfig()

    def test_load_from_custom_path(self):
        data = {
            "volume_tiers": [],
            "customer_tiers": [
                {
                    "id": "nonprofit-tier-discount",
                    "name": "Nonprofit",
                    "priority": 4,
                    "tier": "nonprofit",
                    "percentage": 40,
                }
            ],
        }
        with tempfile.NamedTemporaryFile(mode="w", suffix=".json", delete=False) as f:
            json.dump(data, f)
            f.flush()
            config = load_rules_config(f.name)
        assert config.volume_tiers == []
        assert config.customer_tiers[0].tier == "nonprofit"
        # Unspecified groups keep their defaults
        assert len(config.regions) == 3

    def test_missing_file_returns_defaults(self):
        config = load_rules_config("/nonexistent/path/rules.json")
        assert config == RulesConfig()

    def test_env_var_path(self, tmp_path, monkeypatch):
        path = tmp_path / "rules.json"
        path.write_text(json.dumps({"bundles": []}))
        monkeypatch.setenv("CPQ_RULES_PATH", str(path))
        assert load_rules_config().bundles == []

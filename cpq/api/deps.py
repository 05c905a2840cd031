from __future__ import annotations

from functools import lru_cache

from cpq.catalog.products import Catalog, load_catalog
from cpq.configure.validator import Validator
from cpq.pricing.pricer import Pricer
from cpq.pricing.quoter import Quoter
from cpq.rules.config import load_rules_config
from cpq.rules.engine import RuleEngine
from cpq.rules.table import build_rules


# Loaded once per process; nothing below is mutated after construction.


@lru_cache
def get_catalog() -> Catalog:
    return load_catalog()


@lru_cache
def get_rule_engine() -> RuleEngine:
    return RuleEngine(build_rules(load_rules_config()))


@lru_cache
def get_validator() -> Validator:
    return Validator(get_catalog())


@lru_cache
def get_quoter() -> Quoter:
    catalog = get_catalog()
    return Quoter(catalog, get_validator(), Pricer(catalog, get_rule_engine()))

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Iterable, Iterator, Optional

from cpq.catalog.models import Product, ProductOption
from cpq.errors import ProductNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH = (
    Path(__file__).resolve().parent.parent.parent / "config" / "catalog.json"
)

# Compiled-in catalog, used when no catalog file is present.
BUILTIN_PRODUCTS: list[dict[str, Any]] = [
    {
        "id": "cloud-server-basic",
        "name": "Cloud Server - Basic",
        "description": "Entry-level cloud server for small applications",
        "basePrice": 50,
        "category": "compute",
        "options": [
            {
                "id": "ram-8gb",
                "name": "8GB RAM Upgrade",
                "description": "Upgrade from 4GB to 8GB RAM",
                "price": 20,
                "category": "memory",
            },
            {
                "id": "ram-16gb",
                "name": "16GB RAM Upgrade",
                "description": "Upgrade from 4GB to 16GB RAM",
                "price": 50,
                "category": "memory",
                "conflicts": ["ram-8gb"],
            },
            {
                "id": "storage-ssd-100gb",
                "name": "100GB SSD Storage",
                "description": "Add 100GB SSD storage",
                "price": 15,
                "category": "storage",
            },
            {
                "id": "storage-ssd-500gb",
                "name": "500GB SSD Storage",
                "description": "Add 500GB SSD storage",
                "price": 60,
                "category": "storage",
                "conflicts": ["storage-ssd-100gb"],
            },
            {
                "id": "backup-daily",
                "name": "Daily Backups",
                "description": "Automated daily backups with 30-day retention",
                "price": 25,
                "category": "services",
            },
            {
                "id": "monitoring-basic",
                "name": "Basic Monitoring",
                "description": "CPU, Memory, and Disk monitoring with alerts",
                "price": 10,
                "category": "services",
            },
        ],
        "metadata": {"cpu": "2 vCPU", "baseRam": "4GB", "baseStorage": "50GB SSD"},
    },
    {
        "id": "cloud-server-pro",
        "name": "Cloud Server - Professional",
        "description": "High-performance cloud server for production workloads",
        "basePrice": 150,
        "category": "compute",
        "options": [
            {
                "id": "ram-32gb",
                "name": "32GB RAM Upgrade",
                "description": "Upgrade from 16GB to 32GB RAM",
                "price": 80,
                "category": "memory",
            },
            {
                "id": "ram-64gb",
                "name": "64GB RAM Upgrade",
                "description": "Upgrade from 16GB to 64GB RAM",
                "price": 180,
                "category": "memory",
                "conflicts": ["ram-32gb"],
            },
            {
                "id": "storage-nvme-1tb",
                "name": "1TB NVMe Storage",
                "description": "Add 1TB ultra-fast NVMe storage",
                "price": 120,
                "category": "storage",
            },
            {
                "id": "load-balancer",
                "name": "Load Balancer",
                "description": "Managed load balancer for high availability",
                "price": 50,
                "category": "services",
            },
            {
                "id": "cdn",
                "name": "Global CDN",
                "description": "Content delivery network with edge caching",
                "price": 75,
                "category": "services",
            },
            {
                "id": "support-premium",
                "name": "Premium Support",
                "description": "24/7 premium support with 1-hour response SLA",
                "price": 200,
                "category": "support",
            },
        ],
        "metadata": {"cpu": "8 vCPU", "baseRam": "16GB", "baseStorage": "200GB NVMe"},
    },
    {
        "id": "database-managed-mysql",
        "name": "Managed MySQL Database",
        "description": "Fully managed MySQL database with automatic backups",
        "basePrice": 80,
        "category": "database",
        "options": [
            {
                "id": "db-storage-50gb",
                "name": "50GB Database Storage",
                "description": "Add 50GB of database storage",
                "price": 20,
                "category": "storage",
            },
            {
                "id": "db-storage-200gb",
                "name": "200GB Database Storage",
                "description": "Add 200GB of database storage",
                "price": 70,
                "category": "storage",
                "conflicts": ["db-storage-50gb"],
            },
            {
                "id": "read-replicas-2",
                "name": "2 Read Replicas",
                "description": "Add 2 read replicas for scaling reads",
                "price": 100,
                "category": "performance",
            },
            {
                "id": "point-in-time-recovery",
                "name": "Point-in-Time Recovery",
                "description": "Restore database to any point in the last 35 days",
                "price": 40,
                "category": "services",
            },
        ],
        "metadata": {
            "engine": "MySQL 8.0",
            "baseStorage": "20GB",
            "backupRetention": "7 days",
        },
    },
    {
        "id": "professional-services",
        "name": "Professional Services Package",
        "description": "Expert consulting and implementation services",
        "basePrice": 5000,
        "category": "services",
        "options": [
            {
                "id": "architecture-review",
                "name": "Architecture Review",
                "description": "Comprehensive architecture review and recommendations",
                "price": 2000,
                "category": "consulting",
            },
            {
                "id": "migration-support",
                "name": "Migration Support",
                "description": "Hands-on support for migrating workloads",
                "price": 3000,
                "category": "implementation",
            },
            {
                "id": "training-basic",
                "name": "Basic Training (8 hours)",
                "description": "Team training on platform basics",
                "price": 1500,
                "category": "training",
            },
            {
                "id": "training-advanced",
                "name": "Advanced Training (16 hours)",
                "description": "In-depth training on advanced features",
                "price": 3500,
                "category": "training",
                "dependencies": ["training-basic"],
            },
        ],
        "metadata": {
            "duration": "1 month",
            "deliverables": "Reports, documentation, and training materials",
        },
    },
]


class Catalog:
    """Read-only product registry. Lookups never mutate the catalog."""

    def __init__(self, products: Iterable[Product]):
        self._products: tuple[Product, ...] = tuple(products)
        self._by_id: dict[str, Product] = {}
        for product in self._products:
            if product.id in self._by_id:
                raise ValueError(f"Duplicate product id '{product.id}' in catalog")
            self._by_id[product.id] = product

    @property
    def products(self) -> tuple[Product, ...]:
        return self._products

    def __iter__(self) -> Iterator[Product]:
        return iter(self._products)

    def __len__(self) -> int:
        return len(self._products)

    def get_product(self, product_id: str) -> Optional[Product]:
        return self._by_id.get(product_id)

    def require_product(self, product_id: str) -> Product:
        product = self._by_id.get(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        return product

    def get_products_by_category(self, category: str) -> list[Product]:
        return [p for p in self._products if p.category == category]

    def get_categories(self) -> list[str]:
        """Distinct categories in first-seen order."""
        return list(dict.fromkeys(p.category for p in self._products))


# ---------------------------------------------------------------------------
# Option relationship helpers
# ---------------------------------------------------------------------------


def get_option(product: Product, option_id: str) -> Optional[ProductOption]:
    return product.get_option(option_id)


def has_conflict(product: Product, option_id: str, other_id: str) -> bool:
    """True only when ``option_id`` itself declares ``other_id`` as a conflict."""
    option = product.get_option(option_id)
    if option is None:
        return False
    return other_id in option.conflicts


def get_all_dependencies(product: Product, option_id: str) -> list[str]:
    """Transitive closure of an option's declared dependencies."""
    option = product.get_option(option_id)
    if option is None or not option.dependencies:
        return []

    found: list[str] = []
    seen: set[str] = set()
    pending = list(option.dependencies)
    while pending:
        dep = pending.pop()
        if dep in seen:
            continue
        seen.add(dep)
        found.append(dep)
        dep_option = product.get_option(dep)
        if dep_option is not None:
            pending.extend(dep_option.dependencies)
    return found


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def default_catalog() -> Catalog:
    return Catalog(Product.model_validate(raw) for raw in BUILTIN_PRODUCTS)


def load_catalog(path: Optional[str | Path] = None) -> Catalog:
    """Load the catalog from a JSON file. Falls back to the built-in catalog."""
    if path is None:
        env = os.environ.get("CPQ_CATALOG_PATH")
        path = Path(env) if env else DEFAULT_CATALOG_PATH
    else:
        path = Path(path)

    if not path.exists():
        logger.info("Catalog file %s not found, using built-in catalog", path)
        return default_catalog()

    with open(path) as f:
        raw = json.load(f)
    products = raw["products"] if isinstance(raw, dict) else raw
    return Catalog(Product.model_validate(item) for item in products)

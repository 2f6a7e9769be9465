"""
Startup seed data for the in-memory database: document categories, default
permission levels and the company information served to investors.
"""
import re
from typing import Any, Dict, List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from dataroom.core.logging_config import logger
from dataroom.models import DocumentCategory, PermissionLevel


DEFAULT_CATEGORIES: List[Dict[str, Any]] = [
    {"name": "Financials", "description": "Financial statements, projections and cap table"},
    {"name": "Legal", "description": "Incorporation documents, contracts and IP"},
    {"name": "Product", "description": "Product roadmap, demos and technical overview"},
    {"name": "Market", "description": "Market research and competitive landscape"},
    {"name": "Team", "description": "Leadership bios and organisation chart"},
    {"name": "Pitch Deck", "description": "Investor presentations"},
]

DEFAULT_SUBCATEGORIES: Dict[str, List[str]] = {
    "Financials": ["Historical Financials", "Projections", "Cap Table"],
    "Legal": ["Corporate", "Contracts", "Intellectual Property"],
}

DEFAULT_PERMISSION_LEVELS: List[Dict[str, Any]] = [
    {
        "name": "View Only",
        "description": "Can view documents in the browser but not download them",
        "can_view": True,
        "can_download": False,
    },
    {
        "name": "Standard",
        "description": "Can view documents and download up to 25 files",
        "can_view": True,
        "can_download": True,
        "max_downloads": 25,
    },
    {
        "name": "Full Access",
        "description": "Unlimited viewing and downloading",
        "can_view": True,
        "can_download": True,
    },
]

COMPANY_INFO: Dict[str, Any] = {
    "executive_summary": {
        "title": "Executive Summary",
        "tagline": "Sustainable technology for smallholder agriculture",
        "description": (
            "We build solar-powered post-harvest processing equipment and the "
            "software that connects it to buyers, reducing losses and raising "
            "farmer incomes."
        ),
        "highlights": [
            "Deployed across 4 countries",
            "Revenue growing 3x year over year",
            "Hardware plus recurring software revenue",
        ],
    },
    "metrics": [
        {"label": "Annual Revenue", "value": "$1.2M", "change": "+210%", "trend": "up"},
        {"label": "Farmers Served", "value": 18500, "change": "+140%", "trend": "up"},
        {"label": "Gross Margin", "value": "42%", "change": "+6pts", "trend": "up"},
        {"label": "Monthly Burn", "value": "$85K", "change": "0%", "trend": "neutral"},
    ],
    "milestones": [
        {"id": "m1", "date": "2019-03", "title": "Company founded"},
        {"id": "m2", "date": "2020-09", "title": "First commercial deployment"},
        {"id": "m3", "date": "2022-05", "title": "Seed round closed"},
        {"id": "m4", "date": "2024-01", "title": "Expansion to East Africa"},
    ],
    "testimonials": [
        {
            "id": "t1",
            "author": "Ama Owusu",
            "role": "Cooperative Lead",
            "company": "Northern Growers Union",
            "content": "Drying time went from a week to two days.",
            "featured": True,
        },
        {
            "id": "t2",
            "author": "Kofi Mensah",
            "role": "Operations Manager",
            "company": "AgriBuy",
            "content": "Consistent quality made sourcing predictable.",
            "featured": False,
        },
    ],
    "awards": [
        {"id": "a1", "title": "Climate Innovation Prize", "organization": "Global Climate Fund", "year": 2023},
    ],
    "media_coverage": [
        {
            "id": "p1",
            "title": "Solar dryers cut crop losses",
            "publication": "TechAfrica",
            "date": "2023-11-02",
            "url": "https://example.com/solar-dryers",
        },
    ],
}


def slugify(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")


async def seed_categories(db: AsyncSession) -> int:
    existing = await db.scalar(select(DocumentCategory).limit(1))
    if existing is not None:
        return 0

    created = 0
    parents: Dict[str, DocumentCategory] = {}
    for order, fields in enumerate(DEFAULT_CATEGORIES):
        category = DocumentCategory(slug=slugify(fields["name"]), sort_order=order, **fields)
        db.add(category)
        parents[fields["name"]] = category
        created += 1
    await db.flush()

    for parent_name, children in DEFAULT_SUBCATEGORIES.items():
        for order, child in enumerate(children):
            db.add(DocumentCategory(
                name=child,
                slug=slugify(child),
                parent_category_id=parents[parent_name].id,
                sort_order=order,
            ))
            created += 1
    return created


async def seed_permission_levels(db: AsyncSession) -> int:
    existing = await db.scalar(select(PermissionLevel).limit(1))
    if existing is not None:
        return 0
    for fields in DEFAULT_PERMISSION_LEVELS:
        db.add(PermissionLevel(**fields))
    return len(DEFAULT_PERMISSION_LEVELS)


async def seed_database(db: AsyncSession) -> None:
    """Idempotent: only fills empty tables"""
    categories = await seed_categories(db)
    levels = await seed_permission_levels(db)
    await db.commit()
    logger.info(f"[Seed] {categories} categories, {levels} permission levels")

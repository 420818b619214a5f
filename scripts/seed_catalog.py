#!/usr/bin/env python3
"""
Seed the storefront with the default category tree, a few sample
services and the admin account.

Safe to run repeatedly: existing categories are skipped and services are
only added to an empty catalog.

Usage:
    python -m scripts.seed_catalog
"""

import asyncio
from decimal import Decimal

from sqlalchemy import func, select

from app.core.config import settings
from app.core.database import AsyncSessionLocal, init_db
from app.core.logging import configure_logging
from app.models.service import ServiceItem
from app.schemas.category import CategoryCreate
from app.schemas.service import ServiceCreate
from app.services.category import CategoryTreeService
from app.services.service import ServiceManagementService
from app.services.user import UserManagementService


def _sub(node_id, label, label_fr, label_ar, fee="0"):
    return {
        "id": node_id,
        "label": label,
        "label_fr": label_fr,
        "label_ar": label_ar,
        "fee": Decimal(fee),
    }


DEFAULT_CATEGORIES = [
    {
        "id": "CONNECTIVITY",
        "label": "Connectivity & Payments",
        "label_fr": "Connectivité & Paiements",
        "label_ar": "الاتصال والدفع",
        "icon": "Globe",
        "color": "text-blue-500",
        "desc": "eSIMs, Virtual Numbers, Payment Cards",
        "desc_fr": "eSIMs, Numéros Virtuels, Cartes de Paiement",
        "desc_ar": "شرائح إلكترونية، أرقام افتراضية، بطاقات دفع",
        "order": 1,
        "subcategories": [
            {
                **_sub("ESIM", "eSIMs", "eSIMs", "شرائح إلكترونية"),
                "second_subcategories": [
                    _sub("ESIM_PREMIUM", "Premium eSIMs", "eSIMs Premium", "شرائح مميزة", "5"),
                ],
            },
            _sub("VIRTUAL_NUMBERS", "Virtual Numbers", "Numéros Virtuels", "أرقام افتراضية"),
            _sub("PAYMENT_CARDS", "Payment Cards", "Cartes de Paiement", "بطاقات دفع", "3"),
        ],
    },
    {
        "id": "STREAMING",
        "label": "Streaming & Entertainment",
        "label_fr": "Streaming & Divertissement",
        "label_ar": "البث والترفيه",
        "icon": "Tv",
        "color": "text-purple-500",
        "desc": "Netflix, Spotify, IPTV",
        "desc_fr": "Netflix, Spotify, IPTV",
        "desc_ar": "نتفليكس، سبوتيفاي، IPTV",
        "order": 2,
        "subcategories": [
            _sub("NETFLIX", "Netflix", "Netflix", "نتفليكس"),
            _sub("SPOTIFY", "Spotify", "Spotify", "سبوتيفاي"),
            _sub("IPTV", "IPTV", "IPTV", "IPTV"),
        ],
    },
    {
        "id": "GAMING",
        "label": "Gaming Space",
        "label_fr": "Espace Gaming",
        "label_ar": "مساحة الألعاب",
        "icon": "Gamepad2",
        "color": "text-emerald-500",
        "desc": "Game Keys, Credits, Boosts",
        "desc_fr": "Clés de jeux, Crédits, Boosts",
        "desc_ar": "مفاتيح الألعاب، الأرصدة، التعزيزات",
        "order": 3,
        "subcategories": [
            _sub("GAME_KEYS", "Game Keys", "Clés de jeux", "مفاتيح الألعاب"),
            _sub("CREDITS", "Credits", "Crédits", "الأرصدة"),
            _sub("BOOSTS", "Boosts", "Boosts", "التعزيزات"),
        ],
    },
    {
        "id": "AI_PRODUCTIVITY",
        "label": "AI & Productivity",
        "label_fr": "IA & Productivité",
        "label_ar": "الذكاء الاصطناعي والإنتاجية",
        "icon": "Zap",
        "color": "text-amber-500",
        "desc": "ChatGPT, Midjourney, Office 365",
        "desc_fr": "ChatGPT, Midjourney, Office 365",
        "desc_ar": "شات جي بي تي، ميدجورني، أوفيس 365",
        "order": 4,
        "subcategories": [
            _sub("CHATGPT", "ChatGPT", "ChatGPT", "شات جي بي تي"),
            _sub("MIDJOURNEY", "Midjourney", "Midjourney", "ميدجورني"),
            _sub("OFFICE_365", "Office 365", "Office 365", "أوفيس 365"),
        ],
    },
    {
        "id": "EDUCATION",
        "label": "Training & Certifications",
        "label_fr": "Formation & Certifications",
        "label_ar": "التدريب والشهادات",
        "icon": "Briefcase",
        "color": "text-indigo-500",
        "desc": "Udemy, Coursera, LinkedIn Learning",
        "desc_fr": "Udemy, Coursera, LinkedIn Learning",
        "desc_ar": "يوديمي، كورسيرا، لينكد إن ليرنينج",
        "order": 5,
        "subcategories": [
            _sub("UDEMY", "Udemy", "Udemy", "يوديمي"),
            _sub("COURSERA", "Coursera", "Coursera", "كورسيرا"),
            _sub("LINKEDIN_LEARNING", "LinkedIn Learning", "LinkedIn Learning", "لينكد إن ليرنينج"),
        ],
    },
    {
        "id": "BRANDING",
        "label": "Creators & Brand Authority",
        "label_fr": "Créateurs & Autorité de Marque",
        "label_ar": "المبدعون وسلطة العلامة التجارية",
        "icon": "Shield",
        "color": "text-rose-500",
        "desc": "Verification, Social Growth",
        "desc_fr": "Vérification, Croissance Sociale",
        "desc_ar": "التحقق، النمو الاجتماعي",
        "order": 6,
        "subcategories": [
            _sub("VERIFICATION", "Verification", "Vérification", "التحقق"),
            _sub("SOCIAL_GROWTH", "Social Growth", "Croissance Sociale", "النمو الاجتماعي"),
        ],
    },
    {
        "id": "GIFTCARDS",
        "label": "Gift Cards & Wallets",
        "label_fr": "Cartes Cadeaux & Portefeuilles Numériques",
        "label_ar": "بطاقات الهدايا والمحافظ",
        "icon": "Gift",
        "color": "text-cyan-500",
        "desc": "Apple, Google Play, Binance",
        "desc_fr": "Apple, Google Play, Binance",
        "desc_ar": "أبل، جوجل بلاي، بينانس",
        "order": 7,
        "subcategories": [
            _sub("APPLE", "Apple", "Apple", "أبل"),
            _sub("GOOGLE_PLAY", "Google Play", "Google Play", "جوجل بلاي"),
            _sub("BINANCE", "Binance", "Binance", "بينانس"),
        ],
    },
]

SAMPLE_SERVICES = [
    {
        "name": "Encrypted Cloud Storage 1TB",
        "category": "AI_PRODUCTIVITY",
        "subcategory": "OFFICE_365",
        "description": "Military-grade encryption for your most sensitive data.",
        "price": Decimal("60.00"),
        "conditions": "Subscription renews monthly. No refund after 3 days.",
        "required_info": "Email address, PGP Public Key (Optional)",
        "popularity": 85,
    },
    {
        "name": "Global eSIM Data Plan",
        "category": "CONNECTIVITY",
        "subcategory": "ESIM",
        "description": "Stay connected in over 140 countries with high-speed 5G data.",
        "price": Decimal("135.00"),
        "promo_price": Decimal("119.00"),
        "badge_label": "SUMMER DEAL",
        "conditions": "Valid for 30 days from activation. Device must be eSIM compatible.",
        "required_info": "Device EID, Email address",
        "popularity": 92,
    },
    {
        "name": "Rank Boost - Apex Predator",
        "category": "GAMING",
        "subcategory": "BOOSTS",
        "description": "Professional boosting service to reach the highest ranks.",
        "price": Decimal("450.00"),
        "conditions": "Account sharing required.",
        "required_info": "Platform, Username, Current Rank",
        "popularity": 45,
    },
    {
        "name": "SEO Audit Pro",
        "category": "BRANDING",
        "subcategory": "SOCIAL_GROWTH",
        "description": "Analysis of your website visibility, keyword rankings and technical health.",
        "price": Decimal("900.00"),
        "conditions": "Report delivered within 5 business days.",
        "required_info": "Website URL, Target Keywords, Competitor URLs",
        "popularity": 60,
    },
    {
        "name": "Private VPN Access",
        "category": "CONNECTIVITY",
        "subcategory": "VIRTUAL_NUMBERS",
        "description": "Anonymous browsing with dedicated IP options.",
        "price": Decimal("30.00"),
        "conditions": "Strict no-logs policy.",
        "required_info": "Desired username",
        "popularity": 98,
    },
]


async def seed_catalog():
    """Seed categories, services and the admin account."""
    configure_logging()
    await init_db(create_tables=True)

    async with AsyncSessionLocal() as db:
        created_categories = 0
        for category in DEFAULT_CATEGORIES:
            if await CategoryTreeService.get_category(db, category["id"]):
                continue
            await CategoryTreeService.create_category(db, CategoryCreate(**category))
            created_categories += 1
        print(f"Categories created: {created_categories}")

        service_count = await db.scalar(select(func.count(ServiceItem.id)))
        if service_count:
            print(f"Catalog already has {service_count} services, skipping samples")
        else:
            for service in SAMPLE_SERVICES:
                await ServiceManagementService.create_service(
                    db, ServiceCreate(currency=settings.DEFAULT_CURRENCY, **service)
                )
            print(f"Services created: {len(SAMPLE_SERVICES)}")

        admin = await UserManagementService.ensure_admin_account(
            db, settings.ADMIN_EMAIL, settings.ADMIN_PASSWORD
        )
        if admin:
            print(f"Admin account: {admin.email}")
        else:
            print("ADMIN_PASSWORD not set, admin account not created")

    print("✅ Seed complete!")


if __name__ == "__main__":
    asyncio.run(seed_catalog())

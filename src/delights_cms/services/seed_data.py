"""Default catalog entries inserted by the seeding routines."""

from __future__ import annotations

from ..domain.models import GiftProduct, LocalizedText, Product, ProductCategory

DEFAULT_CATEGORIES = [
    {
        "slug": "medjool-dates",
        "name": ("Medjool Dates", "تمر مجدول"),
        "description": ("Large, soft and naturally sweet.", "كبير وطري وحلو بطبيعته."),
        "icon_key": "medjool-dates",
    },
    {
        "slug": "khalas-dates",
        "name": ("Khalas Dates", "تمر خلاص"),
        "description": ("Caramel notes from Al Ahsa.", "نكهة الكراميل من الأحساء."),
        "icon_key": "khalas-dates",
    },
    {
        "slug": "sukkari-dates",
        "name": ("Sukkari Dates", "تمر سكري"),
        "description": ("Melt-in-the-mouth golden dates.", "تمر ذهبي يذوب في الفم."),
        "icon_key": "sukkari-dates",
    },
    {
        "slug": "ajwa-dates",
        "name": ("Ajwa Dates", "تمر عجوة"),
        "description": ("Dark, tender dates from Madinah.", "تمر داكن وطري من المدينة."),
        "icon_key": "ajwa-dates",
    },
    {
        "slug": "stuffed-dates",
        "name": ("Stuffed Dates", "تمر محشي"),
        "description": ("Filled with nuts and chocolate.", "محشو بالمكسرات والشوكولاتة."),
        "icon_key": "stuffed-dates",
    },
    {
        "slug": "aqsa-dates",
        "name": ("Aqsa Dates", "تمر الأقصى"),
        "description": ("Rich dates for everyday gifting.", "تمر غني للهدايا اليومية."),
        "icon_key": "aqsa-dates",
    },
]

_PRODUCT_ROWS = [
    ("Premium Medjool", "مجدول ممتاز", "medjool-dates", "1 kg", "Jumbo"),
    ("Royal Medjool", "مجدول ملكي", "medjool-dates", "500 g", "Super Jumbo"),
    ("Khalas Classic", "خلاص كلاسيك", "khalas-dates", "1 kg", "Premium"),
    ("Khalas Pressed", "خلاص مكبوس", "khalas-dates", "2 kg", "Standard"),
    ("Sukkari Golden", "سكري ذهبي", "sukkari-dates", "1 kg", "Premium"),
    ("Sukkari Soft", "سكري طري", "sukkari-dates", "3 kg", "Standard"),
    ("Ajwa Madinah", "عجوة المدينة", "ajwa-dates", "500 g", "Premium"),
    ("Almond Stuffed Dates", "تمر محشي باللوز", "stuffed-dates", "400 g", "Deluxe"),
    ("Chocolate Dates", "تمر بالشوكولاتة", "stuffed-dates", "400 g", "Deluxe"),
    ("Aqsa Family Pack", "تمر الأقصى عائلي", "aqsa-dates", "5 kg", "Standard"),
]

_GIFT_ROWS = [
    ("Ramadan Gift Box", "صندوق هدايا رمضان", "24 pieces", "Premium"),
    ("Eid Celebration Tray", "صينية العيد", "36 pieces", "Deluxe"),
    ("Corporate Gift Set", "طقم هدايا الشركات", "48 pieces", "Premium"),
    ("Mini Tasting Box", "علبة تذوق صغيرة", "12 pieces", "Standard"),
]


def default_categories() -> list[ProductCategory]:
    return [
        ProductCategory(
            slug=row["slug"],
            name=LocalizedText(*row["name"]),
            description=LocalizedText(*row["description"]),
            href=f"/products?category={row['slug']}",
            icon_key=row["icon_key"],
        )
        for row in DEFAULT_CATEGORIES
    ]


def default_products() -> list[Product]:
    return [
        Product(
            name=LocalizedText(en, ar),
            description=LocalizedText(f"{en} from our orchards.", f"{ar} من مزارعنا."),
            category=category,
            package_size=package_size,
            grade=grade,
        )
        for en, ar, category, package_size, grade in _PRODUCT_ROWS
    ]


def default_gift_products() -> list[GiftProduct]:
    return [
        GiftProduct(name=LocalizedText(en, ar), package_size=package_size, grade=grade)
        for en, ar, package_size, grade in _GIFT_ROWS
    ]

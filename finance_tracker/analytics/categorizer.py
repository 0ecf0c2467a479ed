"""
Category Classifier

Suggests a category for a free-text transaction description.

DESIGN DECISION: Simple keyword matching rather than ML because:
1. More transparent to the user
2. Deterministic: the same text always gets the same category
3. The user can override the suggestion anyway

The table is checked in order and the first match wins, so order is a
priority: "uber eats" must resolve to Food & Dining before
Transportation's "uber" gets a chance.
"""

CATEGORY_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Food & Dining", (
        "restaurant", "cafe", "coffee", "pizza", "burger", "sushi",
        "lunch", "dinner", "breakfast", "doordash", "uber eats", "grubhub",
    )),
    ("Groceries", (
        "grocery", "supermarket", "walmart", "costco", "trader joe",
        "whole foods", "kroger", "safeway", "target",
    )),
    ("Transportation", (
        "uber", "lyft", "gas", "fuel", "parking", "metro", "subway",
        "bus", "train", "airline", "flight",
    )),
    ("Shopping", (
        "amazon", "ebay", "mall", "store", "shop", "buy", "purchase",
    )),
    ("Entertainment", (
        "netflix", "spotify", "movie", "theater", "concert", "game",
        "steam", "playstation", "xbox",
    )),
    ("Bills & Utilities", (
        "electric", "water", "internet", "phone", "rent", "mortgage",
        "insurance", "utility",
    )),
    ("Subscriptions", (
        "subscription", "membership", "monthly", "annual", "premium",
    )),
    ("Healthcare", (
        "doctor", "hospital", "pharmacy", "medicine", "dental", "vision",
        "health",
    )),
    ("Education", (
        "book", "course", "tuition", "school", "university", "udemy",
        "coursera",
    )),
    ("Personal Care", (
        "salon", "spa", "haircut", "gym", "fitness",
    )),
    ("Travel", (
        "hotel", "airbnb", "booking", "vacation", "trip",
    )),
    ("Income", (
        "salary", "paycheck", "deposit", "refund", "cashback", "dividend",
        "interest",
    )),
)

FALLBACK_CATEGORY = "Other"


def suggest_category(description: str) -> str:
    """First category with a keyword found anywhere in the description."""
    text = (description or "").lower()

    for category, keywords in CATEGORY_KEYWORDS:
        if any(kw in text for kw in keywords):
            return category

    return FALLBACK_CATEGORY

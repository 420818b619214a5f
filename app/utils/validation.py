import re
from typing import Dict

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def validate_email_format(email: str) -> bool:
    """Validate email format."""
    if not email:
        return True  # Allow empty/null

    return bool(EMAIL_PATTERN.match(email))


def slugify_node_id(label: str) -> str:
    """Derive a category-tree id from a label: ``"Gaming Space"`` -> ``"GAMING_SPACE"``."""
    slug = re.sub(r"[^0-9A-Za-z]+", "_", label.strip()).strip("_")
    return slug.upper()


def validate_order_form(
    email: str, phone: str, details: str, terms_accepted: bool
) -> Dict[str, str]:
    """Return a field -> message map; empty when the form may be submitted."""
    errors = {}

    if not email.strip():
        errors["email"] = "Email is required"
    elif not EMAIL_PATTERN.match(email.strip()):
        errors["email"] = "Please enter a valid email address"

    if not phone.strip():
        errors["phone"] = "Phone number is required"

    if not details.strip():
        errors["details"] = "Required information is missing"

    if not terms_accepted:
        errors["terms_accepted"] = "You must accept the terms and conditions"

    return errors

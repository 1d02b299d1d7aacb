"""
Shared constants for the project.

This module contains application-wide constants that should have a single source of truth.
"""

# IVA (Colombian VAT) included in every Shopify price
IVA = 0.19

# Discount tiers, applied to the price including IVA.
# Field name in the JSON output -> fraction off.
DISCOUNT_TIERS = (
    ('precio35', 0.35),
    ('precio30', 0.30),
    ('precio25', 0.25),
    ('precio20', 0.20),
)

# Canonical category display/priority order
CATEGORY_ORDER = ("TOURING", "ADVENTURE", "TRAIL RALLY", "THREE WHEELS", "SCOOTER")

# Shopify's title for the only variant of a product without options
DEFAULT_VARIANT_TITLE = "Default Title"

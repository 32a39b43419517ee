"""Feature list explaining why visitors should pick the product."""

from pagecraft.services.component_registry import SectionDefinition

SECTION = SectionDefinition(
    type="why-choose-us",
    label="Why Choose Us",
    icon="⭐",
    template="sections/why_choose_us.html",
    default_data={
        "header": {
            "title": "Why Choose <span>Us</span>",
            "subtitle": "Built to help you work faster, smarter, and more efficiently.",
        },
        "features": [
            {"icon": "⚡", "title": "Lightning Fast", "description": "All tools run instantly in your browser."},
            {"icon": "🔒", "title": "Privacy First", "description": "Your files never leave your device."},
            {"icon": "🆓", "title": "Always Free", "description": "Core features are free forever."},
            {"icon": "🎯", "title": "Simple to Use", "description": "Clean interface, no learning curve."},
        ],
    },
)

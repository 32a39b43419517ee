"""Hero banner: badge, headline, two calls to action and trust badges."""

from pagecraft.services.component_registry import SectionDefinition

SECTION = SectionDefinition(
    type="hero",
    label="Hero Banner",
    icon="🚀",
    template="sections/hero.html",
    default_data={
        "badge": "🚀 Free & Fast Web Tools",
        "title": "Powerful <span>Web Tools</span> for<br />Developers & Marketers",
        "subtitle": "Convert images, optimize SEO, generate content - no sign-up, no limits.",
        "primaryCta": {"text": "Try Tools", "href": "/tools"},
        "secondaryCta": {"text": "View Pricing", "href": "/pricing"},
        "trustBadges": [
            {"icon": "⚡", "text": "Instant results"},
            {"icon": "🔒", "text": "Privacy-friendly"},
            {"icon": "💻", "text": "Built for productivity"},
        ],
    },
)

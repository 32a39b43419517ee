"""Closing call to action."""

from pagecraft.services.component_registry import SectionDefinition

SECTION = SectionDefinition(
    type="final-cta",
    label="Final Call To Action",
    icon="📣",
    template="sections/final_cta.html",
    default_data={
        "title": "Start Using <span>Powerful Web Tools</span> Today",
        "subtitle": "No sign-up. No hidden limits. Just fast, reliable tools built to help you get things done.",
        "primaryCta": {"text": "Try Tools Now", "href": "/tools"},
        "secondaryCta": {"text": "View Pricing", "href": "/pricing"},
        "footnote": "⚡ Instant results · 🔒 Privacy-friendly · 🚀 Built for productivity",
    },
)

"""Long-form SEO copy: title, intro and expandable content blocks."""

from pagecraft.services.component_registry import SectionDefinition

SECTION = SectionDefinition(
    type="seo-content",
    label="SEO Content",
    icon="📝",
    template="sections/seo_content.html",
    default_data={
        "title": "Free <span>Online Web Tools</span> for Everyday Productivity",
        "intro": (
            "Our platform provides a growing collection of free online tools designed to help "
            "developers, marketers, students, and content creators work faster."
        ),
        "expandedContent": [
            {"heading": "Why use online web tools?", "content": "Online web tools eliminate the need to install heavy software."},
            {"heading": "SEO, image, and AI tools in one place", "content": "Our platform brings together essential tools under one roof."},
            {"heading": "Built for speed, privacy, and reliability", "content": "Performance and privacy are core principles."},
            {"heading": "Constantly growing tool library", "content": "We continuously add new tools based on real-world use cases."},
        ],
    },
)

"""Grid of highlighted tools with optional popular/new badges."""

from pagecraft.services.component_registry import SectionDefinition

SECTION = SectionDefinition(
    type="popular-tools",
    label="Popular Tools",
    icon="🧰",
    template="sections/popular_tools.html",
    default_data={
        "header": {
            "title": "Popular <span>Tools</span>",
            "subtitle": "Try our most used tools trusted by developers and marketers.",
        },
        "tools": [
            {
                "title": "Image Converter",
                "description": "Convert JPG, PNG, WebP instantly",
                "icon": "🖼️",
                "href": "/tools/image-converter",
                "badge": "popular",
            },
            {
                "title": "Keyword Research",
                "description": "Find low-competition keywords",
                "icon": "🔍",
                "href": "/tools/keyword-research",
                "badge": None,
            },
            {
                "title": "Image Compressor",
                "description": "Reduce file size without quality loss",
                "icon": "⚡",
                "href": "/tools/image-compressor",
                "badge": "new",
            },
        ],
        "footer": {"text": "View All Tools →", "href": "/tools"},
    },
)

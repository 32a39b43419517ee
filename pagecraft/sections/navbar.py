"""Top navigation with logo, links, tool menus and a call to action."""

from pagecraft.services.component_registry import SectionDefinition

SECTION = SectionDefinition(
    type="navbar",
    label="Navigation Bar",
    icon="🧭",
    template="sections/navbar.html",
    default_data={
        "logoText": "Web",
        "logoHighlight": "Tools",
        "topNavItems": [
            {"label": "Pricing", "href": "/pricing"},
            {"label": "About", "href": "/about"},
        ],
        "toolsNavItems": [
            {
                "label": "IMG Tools",
                "href": "/tools/image-tools",
                "children": [
                    {"label": "Image Compressor", "href": "/tools/image-tools/image-compressor", "badge": ""},
                    {"label": "Image Resizer", "href": "/tools/image-tools/image-resizer", "badge": ""},
                    {"label": "JPG to PNG", "href": "/tools/image-tools/jpg-to-png", "badge": "new"},
                ],
            },
        ],
        "loginHref": "/login",
        "ctaText": "Get Started",
        "ctaHref": "/tools",
    },
)

"""Site footer with link columns and copyright line."""

from pagecraft.services.component_registry import SectionDefinition

SECTION = SectionDefinition(
    type="footer",
    label="Footer",
    icon="🔻",
    template="sections/footer.html",
    default_data={
        "logoText": "Web",
        "logoHighlight": "Tools",
        "description": "Simple, fast and free web tools for developers, marketers and creators.",
        "copyrightName": "WebTools",
        "sections": [
            {
                "title": "Product",
                "links": [
                    {"label": "All Tools", "href": "/tools"},
                    {"label": "Image Tools", "href": "/tools/image-tools"},
                    {"label": "SEO Tools", "href": "/tools/seo-tools"},
                    {"label": "Pricing", "href": "/pricing"},
                ],
            },
            {
                "title": "Company",
                "links": [
                    {"label": "About", "href": "/about"},
                    {"label": "Blog", "href": "/blog"},
                    {"label": "Contact", "href": "/contact"},
                ],
            },
        ],
    },
)

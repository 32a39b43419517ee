"""Numbered steps walking visitors through the product."""

from pagecraft.services.component_registry import SectionDefinition

SECTION = SectionDefinition(
    type="how-it-works",
    label="How It Works",
    icon="🪜",
    template="sections/how_it_works.html",
    default_data={
        "header": {
            "title": "How It <span>Works</span>",
            "subtitle": "Start using our tools in seconds. No learning curve, no setup.",
        },
        "steps": [
            {"step": "1", "icon": "🎯", "title": "Choose Your Tool", "description": "Browse our collection and pick the tool you need."},
            {"step": "2", "icon": "📁", "title": "Upload or Input", "description": "Add your file, text, or URL depending on the tool."},
            {"step": "3", "icon": "⚡", "title": "Process Instantly", "description": "Our tools work in real-time, right in your browser."},
            {"step": "4", "icon": "💾", "title": "Download Results", "description": "Get your processed file or result immediately."},
        ],
    },
)

"""Offline content brief generator.

Answers brief prompts with a fixed editorial template filled in from the
topic. It speaks the same JSON contract an AI-backed generator must honor,
so it can stand in when no model provider is configured.
"""

from typing import Any

import orjson
import structlog

from domain.entities.brief import word_count_for

logger = structlog.get_logger()

KEY_POINTS = [
    "Define the problem and its impact",
    "Present the solution with clear benefits",
    "Provide actionable implementation steps",
    "Include relevant case studies and examples",
    "Address common objections and concerns",
]

OUTLINE = [
    "Introduction and Problem Statement",
    "Understanding the Current Landscape",
    "Key Benefits and Opportunities",
    "Implementation Strategy",
    "Best Practices and Tips",
    "Common Pitfalls to Avoid",
    "Case Studies and Success Stories",
    "Future Trends and Considerations",
    "Conclusion and Next Steps",
]

SEO_TIPS = [
    "Include target keyword in title and first paragraph",
    "Use H2 and H3 headings with related keywords",
    "Add internal and external links",
    "Include relevant images with alt text",
    "Write compelling meta description",
]


class TemplateBriefGenerator:
    """IContentGenerator that fills a brief template without calling a model."""

    async def generate(self, prompt: str, **options: Any) -> str:
        topic = str(options.get("topic") or prompt).strip()
        content_type = str(options.get("content_type") or "blog-post")

        brief = {
            "title": f"The Complete Guide to {topic}",
            "target_audience": "Business professionals and decision makers",
            "content_outline": OUTLINE,
            "key_points": KEY_POINTS,
            "tone_style": "Professional yet approachable, authoritative but not intimidating",
            "word_count": word_count_for(content_type),
            "target_keywords": [
                topic.lower(),
                f"{topic} guide",
                f"{topic} tips",
                f"{topic} strategy",
            ],
            "seo_tips": SEO_TIPS,
        }
        logger.debug("template_brief_generated", content_type=content_type)
        return orjson.dumps(brief).decode()

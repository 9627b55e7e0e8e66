"""Non-fatal quality checks over programmatic pages."""

from typing import Dict, List

from llm_seo.models.generation import ValidationIssue
from llm_seo.models.programmatic import ProgrammaticPage

MIN_DESCRIPTION_LENGTH = 80


def _warning(message: str, path: str) -> ValidationIssue:
    return ValidationIssue(level="warning", message=message, path=path)


def validate_pages(pages: List[ProgrammaticPage]) -> List[ValidationIssue]:
    """Collect duplicate, missing and thin-content warnings, in page order."""
    issues: List[ValidationIssue] = []
    titles: Dict[str, str] = {}
    descriptions: Dict[str, str] = {}

    for page in pages:
        content = page.content
        title = (content.seo_title or content.title or "").strip().lower()
        description = (content.seo_description or content.description or "").strip().lower()

        if title:
            existing = titles.get(title)
            if existing and existing != page.path:
                issues.append(_warning(f"Duplicate SEO title between {existing} and {page.path}", page.path))
            else:
                titles[title] = page.path

        if description:
            existing = descriptions.get(description)
            if existing and existing != page.path:
                issues.append(_warning(f"Duplicate SEO description between {existing} and {page.path}", page.path))
            else:
                descriptions[description] = page.path
            if len(description) < MIN_DESCRIPTION_LENGTH:
                issues.append(
                    _warning(f"Short description ({len(description)} chars) for {page.path}", page.path)
                )
        else:
            issues.append(_warning(f"Missing description for {page.path}", page.path))

        if not content.title.strip():
            issues.append(_warning(f"Missing title for {page.path}", page.path))
        if not content.heading.strip():
            issues.append(_warning(f"Missing heading for {page.path}", page.path))
        if not content.sections and not content.feature_list and not content.faqs:
            issues.append(
                _warning(f"Thin content risk for {page.path} (no sections, features, or FAQs)", page.path)
            )

    return issues

"""Translation progress of GlotPress projects."""

import logging
from dataclasses import dataclass, field
from typing import List, Sequence

from .clients.glotpress_client import GlotPressClient

logger = logging.getLogger(__name__)


@dataclass
class LocaleProgress:
    """Translation status of one locale in a project."""

    locale: str
    percent_translated: float
    current_count: int = 0
    untranslated_count: int = 0


@dataclass
class ProgressReport:
    """Translation status of a project for a set of locales."""

    project_url: str
    threshold: float
    locales: List[LocaleProgress] = field(default_factory=list)

    @property
    def violations(self) -> List[LocaleProgress]:
        """Locales translated below the threshold."""
        return [p for p in self.locales if p.percent_translated < self.threshold]

    @property
    def passed(self) -> bool:
        return not self.violations


def check_translation_progress(
    client: GlotPressClient,
    project_url: str,
    locales: Sequence[str],
    threshold: float = 100.0,
) -> ProgressReport:
    """
    Read per-locale progress of a project.

    Args:
        client: GlotPress client
        project_url: URL of the GlotPress project
        locales: GlotPress locale codes to report on
        threshold: Minimum acceptable percentage

    Returns:
        ProgressReport; a locale without a translation set counts as 0%
    """
    details = client.project_details(project_url)
    sets = {}
    for translation_set in details.get("translation_sets", []):
        if translation_set.get("slug", "default") != "default":
            continue
        sets[translation_set.get("locale")] = translation_set

    report = ProgressReport(project_url=project_url, threshold=threshold)
    for locale in locales:
        translation_set = sets.get(locale)
        if translation_set is None:
            logger.warning("No translation set for %s in %s", locale, project_url)
            report.locales.append(LocaleProgress(locale=locale, percent_translated=0.0))
            continue
        report.locales.append(LocaleProgress(
            locale=locale,
            percent_translated=float(translation_set.get("percent_translated", 0)),
            current_count=int(translation_set.get("current_count", 0)),
            untranslated_count=int(translation_set.get("untranslated_count", 0)),
        ))
    return report

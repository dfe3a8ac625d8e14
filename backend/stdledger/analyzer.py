"""
stdledger — Release analyzer.

Folds a list of ReleaseDocuments into per-package timelines and answers
the questions the report and the CLI ask of them.
"""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, Field

from stdledger.models.release import ReleaseDocument
from stdledger.models.stored import TimelineEntry


class PackageEvolution(BaseModel):
    package_name: str
    timeline: list[TimelineEntry] = Field(default_factory=list)


class VersionInfo(BaseModel):
    version: str
    release_date: date


class AnalysisResult(BaseModel):
    packages: list[PackageEvolution] = Field(default_factory=list)
    versions: list[VersionInfo] = Field(default_factory=list)


def normalize_package_name(name: str) -> str:
    name = name.strip().lower()
    return name.removeprefix("package ")


class StdLibAnalyzer:
    def __init__(self):
        self.package_map: dict[str, list[TimelineEntry]] = {}

    def analyze(self, releases: list[ReleaseDocument]) -> AnalysisResult:
        versions = sorted(
            (VersionInfo(version=r.version, release_date=r.release_date) for r in releases),
            key=lambda v: v.release_date,
        )
        self._build_timelines(releases)
        return AnalysisResult(packages=self.evolutions(), versions=versions)

    def _build_timelines(self, releases: list[ReleaseDocument]) -> None:
        for release in releases:
            for change in release.changes:
                name = normalize_package_name(change.package)
                if not name:
                    continue
                self.package_map.setdefault(name, []).append(TimelineEntry(
                    version=release.version,
                    release_date=release.release_date,
                    change_type=change.change_type.value,
                    description=change.description,
                    summary=change.summary,
                    source_url=change.source_url,
                ))

        # stable: same-day entries keep release order
        for timeline in self.package_map.values():
            timeline.sort(key=lambda entry: entry.release_date)

    def evolutions(self) -> list[PackageEvolution]:
        return [
            PackageEvolution(package_name=name, timeline=self.package_map[name])
            for name in sorted(self.package_map)
        ]

    def stats(self) -> dict:
        change_types: dict[str, int] = {}
        total = 0
        for timeline in self.package_map.values():
            for entry in timeline:
                change_types[entry.change_type] = change_types.get(entry.change_type, 0) + 1
                total += 1
        return {
            "total_packages": len(self.package_map),
            "total_changes": total,
            "change_types": dict(sorted(change_types.items())),
        }

    def packages_by_change_type(self, change_type: str) -> list[str]:
        return sorted(
            name for name, timeline in self.package_map.items()
            if any(entry.change_type == change_type for entry in timeline)
        )

    def search(self, query: str) -> list[PackageEvolution]:
        query = query.strip().lower()
        return [e for e in self.evolutions() if query in e.package_name.lower()]

    def report_summary(self) -> str:
        stats = self.stats()
        lines = [
            "Standard Library Analysis Report",
            "================================",
            "",
            f"Total Packages Analyzed: {stats['total_packages']}",
            f"Total Changes: {stats['total_changes']}",
            "",
            "Change Type Breakdown:",
        ]
        for change_type, count in stats["change_types"].items():
            lines.append(f"  {change_type}: {count}")
        return "\n".join(lines) + "\n"

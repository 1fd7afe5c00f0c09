"""
Documentation report templates.

Each SectionTemplate describes one numbered report section: static prose
and bullet fields, optional subsections and diagram placeholders, or one of
the two generated section kinds (current deployment state and architectural
decisions). Template strings may contain ``{name}`` placeholders filled from
model statistics; unknown placeholders are left as written.
"""

import re
from dataclasses import dataclass
from typing import Any, Mapping, Tuple

# Section kinds
STATIC = "static"
CURRENT_STATE = "current_state"
DECISIONS = "decisions"
SECTION_KINDS = (STATIC, CURRENT_STATE, DECISIONS)

# Report partitions a section's primitives are filed under
OVERVIEW = "overview"
INVENTORY = "inventory"
ENVIRONMENT_DETAILS = "environment_details"
DECISION_RECORDS = "decisions"
GROUPS = (OVERVIEW, INVENTORY, ENVIRONMENT_DETAILS, DECISION_RECORDS)

PLACEHOLDER_PATTERN = re.compile(r"\{(\w+)\}")


@dataclass(frozen=True)
class DiagramTemplate:
    """Dashed placeholder box reserving room for a diagram drawn later."""

    title: str
    description: str
    width: float = 700
    height: float = 200


@dataclass(frozen=True)
class SubsectionTemplate:
    title: str
    template: str = ""
    fields: Tuple[str, ...] = ()


@dataclass(frozen=True)
class SectionTemplate:
    """
    One report section.

    Attributes:
        id: Unique section id.
        title: Heading text, prefixed with the section number when rendered.
        order: Sort key and section number.
        enabled: Disabled sections are skipped.
        kind: "static", "current_state" or "decisions".
        container: Background color key.
        group: Report partition for the section's primitives.
        template: Prose shown under the heading.
        fields: Bullet list shown after the prose.
        subsections: Numbered subsections, rendered instead of the
            section-level prose and fields.
        diagrams: Placeholder boxes drawn after the subsections.
    """

    id: str
    title: str
    order: int
    enabled: bool = True
    kind: str = STATIC
    container: str = "default"
    group: str = OVERVIEW
    template: str = ""
    fields: Tuple[str, ...] = ()
    subsections: Tuple[SubsectionTemplate, ...] = ()
    diagrams: Tuple[DiagramTemplate, ...] = ()

    def __post_init__(self):
        if self.kind not in SECTION_KINDS:
            raise ValueError(
                f"Section {self.id!r} has unknown kind {self.kind!r}; "
                f"expected one of: {', '.join(SECTION_KINDS)}"
            )
        if self.group not in GROUPS:
            raise ValueError(
                f"Section {self.id!r} has unknown group {self.group!r}; "
                f"expected one of: {', '.join(GROUPS)}"
            )


def fill_template(template: str, values: Mapping[str, Any]) -> str:
    """Replace ``{name}`` placeholders that have a value; keep the rest."""

    def substitute(match):
        key = match.group(1)
        return str(values[key]) if key in values else match.group(0)

    return PLACEHOLDER_PATTERN.sub(substitute, template)


DEFAULT_SECTIONS: Tuple[SectionTemplate, ...] = (
    SectionTemplate(
        id="executive_summary",
        title="Executive Summary",
        order=1,
        container="executive",
        template=(
            "This document describes the {title} deployment. It covers "
            "{environment_count} environment(s) running {node_count} node(s), "
            "with {endpoint_count} external endpoint(s) and "
            "{connection_count} documented connection(s)."
        ),
        fields=(
            "Business purpose: [to be completed]",
            "Key stakeholders: [to be completed]",
            "Document owner: [to be completed]",
        ),
    ),
    SectionTemplate(
        id="current_state",
        title="Current State Architecture",
        order=2,
        kind=CURRENT_STATE,
        container="infrastructure",
        group=INVENTORY,
    ),
    SectionTemplate(
        id="infrastructure_specs",
        title="Infrastructure Specifications",
        order=3,
        container="infrastructure",
        group=ENVIRONMENT_DETAILS,
        subsections=(
            SubsectionTemplate(
                title="Compute",
                template="Node sizing follows the baseline and tier2-tier4 size tiers.",
                fields=(
                    "Operating system: [to be completed]",
                    "CPU and memory allocation: [to be completed]",
                ),
            ),
            SubsectionTemplate(
                title="Network",
                fields=(
                    "Ingress and egress rules: [to be completed]",
                    "Proxy configuration: [to be completed]",
                ),
            ),
        ),
        diagrams=(
            DiagramTemplate(
                title="Network Topology",
                description="Network zones, firewalls and routing between clusters.",
            ),
        ),
    ),
    SectionTemplate(
        id="security_compliance",
        title="Security & Compliance",
        order=4,
        container="security",
        group=ENVIRONMENT_DETAILS,
        fields=(
            "Authentication: [to be completed]",
            "Secrets management: [to be completed]",
            "Audit logging: [to be completed]",
        ),
    ),
    SectionTemplate(
        id="operations_maintenance",
        title="Operations & Maintenance",
        order=5,
        container="operations",
        group=ENVIRONMENT_DETAILS,
        fields=(
            "Monitoring: [to be completed]",
            "Upgrade schedule: [to be completed]",
            "Backup and restore: [to be completed]",
        ),
    ),
    SectionTemplate(
        id="architectural_decisions",
        title="Architectural Decisions",
        order=6,
        kind=DECISIONS,
        group=DECISION_RECORDS,
    ),
    SectionTemplate(
        id="future_state",
        title="Future State",
        order=7,
        container="future",
        group=DECISION_RECORDS,
        fields=(
            "Planned capacity changes: [to be completed]",
            "Roadmap items: [to be completed]",
        ),
    ),
    SectionTemplate(
        id="appendices",
        title="Appendices",
        order=8,
        enabled=False,
        container="future",
        template="Glossary and reference material.",
    ),
)

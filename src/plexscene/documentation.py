"""
Documentation report generation.

Renders a vertically stacked architecture report below the diagram: a
title block followed by the enabled template sections in order. Static
sections show templated prose and bullet fields; the current-state section
summarizes the model and renders node and endpoint tables; the decisions
section lists conclusions drawn from simple checks over the model.

Every block goes through the text-flow engine, a running y cursor tracks
the consumed height, and each section is wrapped in a translucent
background rectangle. Primitives are also filed into four partitions
(overview, inventory, environment details, decisions) so callers can lay
them out separately.

Classes:
    Decision: One derived decision bullet.
    DocumentationResult: Partitioned report primitives and total height.
    DocumentationGenerator: Builds the report for a model.
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .models import ArchitectureModel, ConnectionKind, NodeRole, NodeSize
from .primitives import Primitive, PrimitiveType, TextStyle, make_text
from .templates import (
    CURRENT_STATE,
    DECISIONS,
    DEFAULT_SECTIONS,
    ENVIRONMENT_DETAILS,
    INVENTORY,
    OVERVIEW,
    DiagramTemplate,
    SectionTemplate,
    fill_template,
)
from .textflow import Column, FlowResult, IdSequence, TextFlow
from .topology import build_topology, dependency_cycles, unresolved_references

logger = logging.getLogger(__name__)

DOC_OFFSET_Y = 150
DOC_X = 50
DOC_WIDTH = 750
SECTION_SPACING = 40
SUBSECTION_SPACING = 20
TITLE_GAP = 10
HEADING_GAP = 8
SUBSECTION_TITLE_GAP = 16
INDENT = 20

CONTAINER_PADDING = 15
CONTAINER_MIN_HEIGHT = 40
CONTAINER_OPACITY = 40
CONTAINER_STROKE = "#d1d5db"

CONTAINER_COLORS = {
    "executive": "#dbeafe",
    "infrastructure": "#e9d5ff",
    "operations": "#d1fae5",
    "security": "#fed7aa",
    "future": "#f3f4f6",
    "default": "#f9fafb",
}

PLACEHOLDER_STROKE = "#9ca3af"
PLACEHOLDER_FILL = "#f9fafb"

DOC_GROUP = ("documentation",)

MAIN_TITLE_STYLE = TextStyle(
    font_size=18, stroke_color="#1e40af", stroke_width=2, group_ids=DOC_GROUP
)
SECTION_TITLE_STYLE = TextStyle(
    font_size=16, stroke_color="#1e40af", stroke_width=2, group_ids=DOC_GROUP
)
SUBSECTION_TITLE_STYLE = TextStyle(
    font_size=14, stroke_color="#3b82f6", stroke_width=1.5, group_ids=DOC_GROUP
)
STANDARD_STYLE = TextStyle(font_size=12, stroke_color="#374151", group_ids=DOC_GROUP)
STATUS_STYLE = TextStyle(font_size=12, stroke_color="#059669", group_ids=DOC_GROUP)
PLACEHOLDER_STYLE = TextStyle(font_size=12, stroke_color="#f59e0b", group_ids=DOC_GROUP)
HIGHLIGHT_STYLE = TextStyle(
    font_size=12, stroke_color="#1d4ed8", stroke_width=1.5, group_ids=DOC_GROUP
)
WARNING_STYLE = TextStyle(font_size=12, stroke_color="#dc2626", group_ids=DOC_GROUP)
SUCCESS_STYLE = TextStyle(font_size=12, stroke_color="#16a34a", group_ids=DOC_GROUP)
DIAGRAM_TITLE_STYLE = TextStyle(
    font_size=13,
    line_height=1.3,
    stroke_color="#374151",
    stroke_width=1.5,
    text_align="center",
    group_ids=("documentation-placeholders",),
)
DIAGRAM_TEXT_STYLE = TextStyle(
    font_size=11,
    line_height=1.25,
    stroke_color="#6b7280",
    group_ids=("documentation-placeholders",),
)

ROLE_LABELS = {NodeRole.CONTROL: "JCC", NodeRole.FEED: "FM"}
SIZE_LABELS = {
    NodeSize.BASELINE: "base",
    NodeSize.TIER2: "tier2",
    NodeSize.TIER3: "tier3",
    NodeSize.TIER4: "tier4",
}
LARGE_SIZES = (NodeSize.TIER3, NodeSize.TIER4)

NODE_COLUMNS = (
    Column("name", "Node Name", 20),
    Column("type", "Type", 6),
    Column("size", "Size", 6),
    Column("memory_optimized", "Mem Opt", 8, boolean=True),
    Column("os", "OS", 12),
    Column("status", "Status", 8),
    Column("environment", "Environment", 12),
)

ENDPOINT_COLUMNS = (
    Column("name", "Endpoint Name", 20),
    Column("type", "Type", 15),
    Column("url", "URL", 35, default="[to be completed]"),
)


@dataclass(frozen=True)
class Decision:
    text: str
    warning: bool = False


def _multiple_environments(model, graph) -> List[Decision]:
    if len(model.environments) > 1:
        return [
            Decision(
                "Multi-environment deployment implemented for isolation and testing"
            )
        ]
    return []


def _memory_optimized_nodes(model, graph) -> List[Decision]:
    if any(node.is_memory_optimized_control for _, _, node in model.iter_nodes()):
        return [Decision("Memory-optimized nodes configured for enhanced performance")]
    return []


def _large_nodes(model, graph) -> List[Decision]:
    if any(node.size in LARGE_SIZES for _, _, node in model.iter_nodes()):
        return [Decision("Large node sizes implemented for high-throughput workloads")]
    return []


def _multiple_clusters(model, graph) -> List[Decision]:
    if any(len(env.clusters) > 1 for env in model.environments):
        return [Decision("Multiple Snaplexes deployed for load distribution")]
    return []


def _feed_nodes(model, graph) -> List[Decision]:
    if any(node.role is NodeRole.FEED for _, _, node in model.iter_nodes()):
        return [Decision("Feed nodes deployed for high-throughput ingestion")]
    return []


def _cycles(model, graph) -> List[Decision]:
    return [
        Decision("Circular dependency: " + " -> ".join(cycle + cycle[:1]), warning=True)
        for cycle in dependency_cycles(graph, ConnectionKind.DEPENDENCY.value)
    ]


def _unresolved(model, graph) -> List[Decision]:
    missing = unresolved_references(graph)
    if not missing:
        return []
    return [
        Decision(
            f"{len(missing)} connection reference(s) match no diagram element: "
            + ", ".join(missing),
            warning=True,
        )
    ]


DecisionCheck = Callable[[ArchitectureModel, object], List[Decision]]

DECISION_CHECKS: Tuple[DecisionCheck, ...] = (
    _multiple_environments,
    _memory_optimized_nodes,
    _large_nodes,
    _multiple_clusters,
    _feed_nodes,
    _cycles,
    _unresolved,
)


def derive_decisions(model: ArchitectureModel) -> List[Decision]:
    """Run every decision check against the model, in order."""
    graph = build_topology(model)
    decisions: List[Decision] = []
    for check in DECISION_CHECKS:
        decisions.extend(check(model, graph))
    return decisions


@dataclass
class DocumentationResult:
    """
    A rendered report.

    Attributes:
        overview: Title block, summary sections and overview statistics.
        inventory: Node and endpoint tables.
        environment_details: Per-environment details and infrastructure
            sections.
        decisions: Architectural decisions and future-state sections.
        total_height: Height consumed from the report's first line.
        elements: Every primitive in drawing order (section backgrounds,
            then text, then diagram placeholders).
    """

    overview: List[Primitive] = field(default_factory=list)
    inventory: List[Primitive] = field(default_factory=list)
    environment_details: List[Primitive] = field(default_factory=list)
    decisions: List[Primitive] = field(default_factory=list)
    total_height: float = 0
    elements: List[Primitive] = field(default_factory=list)


class _ReportBuilder:
    """Running cursor plus the three drawing layers of a report."""

    def __init__(self, flow: TextFlow, x: float, y: float, width: float):
        self.flow = flow
        self.x = x
        self.y = y
        self.width = width
        self.backgrounds: List[Tuple[str, Primitive]] = []
        self.texts: List[Tuple[str, Primitive]] = []
        self.placeholders: List[Tuple[str, Primitive]] = []

    def emit(
        self, text: str, indent: float, style: TextStyle, group: str, gap: float = 0
    ) -> FlowResult:
        result = self.flow.flow(
            text, self.x + indent, self.y, self.width - indent, style
        )
        self._advance(result, group, gap)
        return result

    def emit_table(self, rows, columns, indent: float, group: str, gap: float) -> None:
        result = self.flow.flow_table(
            rows, columns, self.x + indent, self.y, self.width - indent
        )
        self._advance(result, group, gap)

    def _advance(self, result: FlowResult, group: str, gap: float) -> None:
        self.texts.extend((group, element) for element in result.elements)
        self.y += result.total_height + gap


class DocumentationGenerator:
    """
    Builds the documentation report for a model.

    Args:
        doc_x: Left edge of the report.
        doc_width: Report width.
        sections: Section templates; defaults to DEFAULT_SECTIONS.
        offset_y: Distance between the diagram bottom and the report.

    Raises:
        ValueError: If two sections share an id.
    """

    def __init__(
        self,
        doc_x: float = DOC_X,
        doc_width: float = DOC_WIDTH,
        sections: Optional[Sequence[SectionTemplate]] = None,
        offset_y: float = DOC_OFFSET_Y,
    ):
        self.doc_x = doc_x
        self.doc_width = doc_width
        self.offset_y = offset_y
        self.sections: List[SectionTemplate] = list(
            DEFAULT_SECTIONS if sections is None else sections
        )
        ids = [section.id for section in self.sections]
        duplicates = sorted({item for item in ids if ids.count(item) > 1})
        if duplicates:
            raise ValueError(f"Duplicate section ids: {', '.join(duplicates)}")

    def enabled_sections(self) -> List[SectionTemplate]:
        return sorted(
            (section for section in self.sections if section.enabled),
            key=lambda section: section.order,
        )

    def set_section_enabled(self, section_id: str, enabled: bool) -> None:
        """
        Enable or disable a section by id.

        Raises:
            ValueError: If no section has that id.
        """
        for position, section in enumerate(self.sections):
            if section.id == section_id:
                self.sections[position] = replace(section, enabled=enabled)
                return
        raise ValueError(f"Unknown section id: {section_id!r}")

    def generate(
        self,
        model: ArchitectureModel,
        diagram_bottom: float = 800,
        generated_at: Optional[datetime] = None,
    ) -> DocumentationResult:
        """
        Render the report below ``diagram_bottom``.

        Args:
            model: Model to document.
            diagram_bottom: Lowest y of the diagram above the report.
            generated_at: Timestamp shown in the title; defaults to now.

        Returns:
            DocumentationResult with partitioned primitives.
        """
        if generated_at is None:
            generated_at = datetime.now()

        start_y = diagram_bottom + self.offset_y
        report = _ReportBuilder(
            TextFlow(IdSequence("doc")), self.doc_x, start_y, self.doc_width
        )
        values = self._template_values(model, generated_at)

        title = f"{model.title} Documentation\n\nGenerated: {values['generated_at']}"
        report.emit(title, 0, MAIN_TITLE_STYLE, OVERVIEW, TITLE_GAP)

        for section in self.enabled_sections():
            self._render_section(report, section, model, values)

        result = DocumentationResult(total_height=report.y - start_y)
        for layer in (report.backgrounds, report.texts, report.placeholders):
            for group, element in layer:
                getattr(result, group).append(element)
                result.elements.append(element)

        logger.info(
            "Generated documentation: %d sections, %d elements, height %.1f",
            len(self.enabled_sections()),
            len(result.elements),
            result.total_height,
        )
        return result

    def _template_values(
        self, model: ArchitectureModel, generated_at: datetime
    ) -> Dict:
        return {
            "title": model.title,
            "description": model.description,
            "environment_count": len(model.environments),
            "cluster_count": sum(1 for _ in model.iter_clusters()),
            "node_count": model.total_nodes,
            "endpoint_count": len(model.endpoints),
            "connection_count": len(model.connections),
            "generated_at": generated_at.strftime("%Y-%m-%d %H:%M"),
            "review_date": generated_at.strftime("%Y-%m-%d"),
        }

    def _render_section(
        self,
        report: _ReportBuilder,
        section: SectionTemplate,
        model: ArchitectureModel,
        values: Dict,
    ) -> None:
        section_start = report.y
        report.emit(
            f"{section.order}. {section.title}",
            0,
            SECTION_TITLE_STYLE,
            section.group,
            HEADING_GAP,
        )

        if section.kind == CURRENT_STATE:
            self._render_current_state(report, section, model)
        elif section.kind == DECISIONS:
            self._render_decisions(report, section, model, values)
        elif section.subsections:
            for number, subsection in enumerate(section.subsections, start=1):
                report.emit(
                    f"{section.order}.{number}. {subsection.title}",
                    INDENT,
                    SUBSECTION_TITLE_STYLE,
                    section.group,
                    SUBSECTION_TITLE_GAP,
                )
                self._render_body(
                    report,
                    subsection.template,
                    subsection.fields,
                    section.group,
                    values,
                )
        else:
            self._render_body(
                report, section.template, section.fields, section.group, values
            )

        for position, diagram in enumerate(section.diagrams, start=1):
            self._render_diagram(report, section, position, diagram)

        height = report.y - section_start
        if height > CONTAINER_MIN_HEIGHT:
            report.backgrounds.append(
                (section.group, self._container(section, section_start, height))
            )
        report.y += SECTION_SPACING

    def _render_body(self, report, template, fields, group, values) -> None:
        if template:
            text = fill_template(template, values)
            report.emit(text, INDENT, STANDARD_STYLE, group, 2)
        if fields:
            bullets = "\n".join(f"• {fill_template(item, values)}" for item in fields)
            report.emit(bullets, 2 * INDENT, STANDARD_STYLE, group, SUBSECTION_SPACING)

    def _render_current_state(
        self, report: _ReportBuilder, section: SectionTemplate, model: ArchitectureModel
    ) -> None:
        number = section.order

        report.emit(
            f"{number}.1. Overview",
            INDENT,
            SUBSECTION_TITLE_STYLE,
            OVERVIEW,
            SUBSECTION_TITLE_GAP,
        )
        overview = "\n".join(
            [
                f"• Environments: {len(model.environments)}",
                f"• Total Nodes: {model.total_nodes}",
                f"• Endpoints: {len(model.endpoints)}",
                f"• Connections: {len(model.connections)}",
            ]
        )
        report.emit(overview, 2 * INDENT, STANDARD_STYLE, OVERVIEW, HEADING_GAP)
        report.emit("• Status: Active", 2 * INDENT, SUCCESS_STYLE, OVERVIEW, 4)
        report.emit(
            "• Compliance: [to be completed]",
            2 * INDENT,
            PLACEHOLDER_STYLE,
            OVERVIEW,
            SUBSECTION_SPACING,
        )

        report.emit(
            f"{number}.2. Environment Details",
            INDENT,
            SUBSECTION_TITLE_STYLE,
            ENVIRONMENT_DETAILS,
            SUBSECTION_TITLE_GAP,
        )
        for env in model.environments:
            report.emit(
                f"Environment: {env.name}",
                2 * INDENT,
                HIGHLIGHT_STYLE,
                ENVIRONMENT_DETAILS,
                6,
            )
            details = "\n".join(
                [
                    f"• Type: {env.classification.value}",
                    f"• Region: {env.region or '[unknown]'}",
                    f"• Snaplexes: {len(env.clusters)}",
                    f"• Nodes: {env.node_count}",
                ]
            )
            report.emit(
                details, 2 * INDENT, STANDARD_STYLE, ENVIRONMENT_DETAILS, HEADING_GAP
            )
            placeholders = "\n".join(
                [
                    "• Hosting Strategy: [to be completed]",
                    "• CI/CD: [to be completed]",
                    "• Disaster Recovery: [to be completed]",
                ]
            )
            report.emit(
                placeholders,
                2 * INDENT,
                PLACEHOLDER_STYLE,
                ENVIRONMENT_DETAILS,
                SUBSECTION_SPACING,
            )

        report.emit(
            f"{number}.3. Node Inventory",
            INDENT,
            SUBSECTION_TITLE_STYLE,
            INVENTORY,
            SUBSECTION_TITLE_GAP,
        )
        report.emit_table(node_rows(model), NODE_COLUMNS, 2 * INDENT, INVENTORY, 30)

        if model.endpoints:
            report.emit(
                f"{number}.4. Network Endpoints",
                INDENT,
                SUBSECTION_TITLE_STYLE,
                INVENTORY,
                SUBSECTION_TITLE_GAP,
            )
            report.emit_table(
                endpoint_rows(model), ENDPOINT_COLUMNS, 2 * INDENT, INVENTORY, 30
            )

    def _render_decisions(
        self,
        report: _ReportBuilder,
        section: SectionTemplate,
        model: ArchitectureModel,
        values: Dict,
    ) -> None:
        group = section.group
        decisions = derive_decisions(model)
        if not decisions:
            report.emit(
                "No specific architectural decisions detected in current "
                "configuration.",
                INDENT,
                STANDARD_STYLE,
                group,
                HEADING_GAP,
            )
            report.emit(
                "Decision records to be completed during architecture review.",
                INDENT,
                STANDARD_STYLE,
                group,
                SUBSECTION_SPACING,
            )
            return

        report.emit(
            "Current architectural decisions based on deployment:",
            INDENT,
            STANDARD_STYLE,
            group,
            HEADING_GAP,
        )
        findings = [d for d in decisions if not d.warning]
        warnings = [d for d in decisions if d.warning]
        if findings:
            text = "\n".join(f"• {d.text}" for d in findings)
            report.emit(text, INDENT, HIGHLIGHT_STYLE, group, HEADING_GAP)
        if warnings:
            text = "\n".join(f"• {d.text}" for d in warnings)
            report.emit(text, INDENT, WARNING_STYLE, group, HEADING_GAP)
        report.emit(
            f"Implementation Status: Active\nReview Date: {values['review_date']}",
            INDENT,
            STATUS_STYLE,
            group,
            HEADING_GAP,
        )
        report.emit(
            "Risk Level: [to be assessed]",
            INDENT,
            PLACEHOLDER_STYLE,
            group,
            SUBSECTION_SPACING,
        )

    def _render_diagram(
        self,
        report: _ReportBuilder,
        section: SectionTemplate,
        position: int,
        diagram: DiagramTemplate,
    ) -> None:
        x = self.doc_x
        y = report.y + SUBSECTION_SPACING
        prefix = f"doc-diagram-{section.id}-{position}"
        group = ["documentation-placeholders"]
        box = Primitive(
            id=prefix,
            type=PrimitiveType.RECTANGLE,
            x=x,
            y=y,
            width=diagram.width,
            height=diagram.height,
            stroke_color=PLACEHOLDER_STROKE,
            background_color=PLACEHOLDER_FILL,
            stroke_width=2,
            stroke_style="dashed",
            roughness=0,
            group_ids=group,
            roundness=3,
        )
        title = make_text(
            f"{prefix}-title",
            f"[DIAGRAM: {diagram.title}]",
            x + CONTAINER_PADDING,
            y + CONTAINER_PADDING,
            diagram.width - 2 * CONTAINER_PADDING,
            20,
            DIAGRAM_TITLE_STYLE,
        )
        description = make_text(
            f"{prefix}-description",
            diagram.description,
            x + CONTAINER_PADDING,
            y + 40,
            diagram.width - 2 * CONTAINER_PADDING,
            diagram.height - 55,
            DIAGRAM_TEXT_STYLE,
        )
        report.placeholders.extend(
            (section.group, element) for element in (box, title, description)
        )
        report.y += diagram.height + SECTION_SPACING

    def _container(
        self, section: SectionTemplate, y: float, height: float
    ) -> Primitive:
        return Primitive(
            id=f"doc-container-{section.id}",
            type=PrimitiveType.RECTANGLE,
            x=self.doc_x - CONTAINER_PADDING,
            y=y - CONTAINER_PADDING,
            width=self.doc_width + 2 * CONTAINER_PADDING,
            height=height + 2 * CONTAINER_PADDING,
            stroke_color=CONTAINER_STROKE,
            background_color=CONTAINER_COLORS.get(
                section.container, CONTAINER_COLORS["default"]
            ),
            roughness=0,
            opacity=CONTAINER_OPACITY,
            group_ids=["documentation-containers"],
            roundness=3,
        )


def node_rows(model: ArchitectureModel) -> List[Dict]:
    """Node inventory table rows, one per node in model order."""
    return [
        {
            "name": node.name,
            "type": ROLE_LABELS[node.role],
            "size": SIZE_LABELS[node.size],
            "memory_optimized": node.is_memory_optimized_control,
            "os": None,
            "status": node.status.value,
            "environment": env.name,
        }
        for env, _, node in model.iter_nodes()
    ]


def endpoint_rows(model: ArchitectureModel) -> List[Dict]:
    return [
        {"name": endpoint.name, "type": endpoint.protocol.value, "url": endpoint.url}
        for endpoint in model.endpoints
    ]

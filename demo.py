#!/usr/bin/env python3
"""
Demo script for plexscene.

Generates the bundled sample architecture, prints a summary of the scene and
the derived decisions, and writes an Excalidraw scene plus a PNG preview to
the current directory.
"""

import logging

from plexscene import DiagramGenerator, SceneExporter
from plexscene.documentation import derive_decisions
from plexscene.samples import sample_model
from plexscene.topology import build_topology, isolated_components


def print_header(title):
    """Print a formatted header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70 + "\n")


def demo_scene(model):
    """Demo 1: Diagram and documentation"""
    print_header("Demo 1: Sample Architecture Scene")

    result = DiagramGenerator().generate(model, with_documentation=True)
    print(f"Rendering mode: {result.rendering_mode}")
    print(f"Elements:       {len(result.elements)}")
    print(f"Report height:  {result.documentation.total_height:.0f}")
    for key, size in result.layout.dimensions.items():
        if key.startswith(("env-", "snaplex-")):
            print(f"  {key:<28} {size.width:>6.0f} x {size.height:<6.0f}")
    return result


def demo_analysis(model):
    """Demo 2: Topology analysis"""
    print_header("Demo 2: Decisions and Unconnected Components")

    for decision in derive_decisions(model):
        marker = "!" if decision.warning else "-"
        print(f" {marker} {decision.text}")

    print("\nNot referenced by any connection:")
    for key, kind in isolated_components(build_topology(model)):
        print(f"  {key:<28} {kind}")


def demo_export(result):
    """Demo 3: Export"""
    print_header("Demo 3: Export")

    exporter = SceneExporter()
    exporter.save_json(result.elements, "architecture.excalidraw")
    print("Wrote architecture.excalidraw")
    width, height = exporter.save_png(result.elements, "architecture.png")
    print(f"Wrote architecture.png ({width} x {height})")


def main():
    """Run all demos."""
    logging.basicConfig(
        level=logging.INFO, format="%(levelname)s %(name)s: %(message)s"
    )
    model = sample_model()
    result = demo_scene(model)
    demo_analysis(model)
    demo_export(result)


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""
Complete Pipeline Demo: CSV -> DecisionTree -> Choices -> Analysis -> Diagram

Shows the full workflow:
1. Load a tree table from CSV and compile it
2. Decide a choice for every subject
3. Analyze the tree
4. Generate a Graphviz diagram

Usage:
    python demo_complete_pipeline.py [tree.csv]

Without an argument the example grading tree is written to
example_tree.csv and used.
"""

import sys

from tdtree.action import DecisionTreeAction
from tdtree.analyzer import analyze_tree
from tdtree.backends import DotMode, save_dot_file
from tdtree.config import configure_logging
from tdtree.examples import GRADING_CSV, build_example_model
from tdtree.table import parse_table_file


def main():
    configure_logging()

    if len(sys.argv) > 1:
        csv_path = sys.argv[1]
    else:
        csv_path = "example_tree.csv"
        with open(csv_path, "w", encoding="utf-8") as f:
            f.write(GRADING_CSV)

    model = build_example_model()
    subjects = sorted(model.subjects())

    print("=" * 80)
    print("COMPLETE PIPELINE DEMO: CSV -> Tree -> Choices -> Analysis -> Diagram")
    print("=" * 80)

    # =========================================================================
    # STEP 1: Load and compile
    # =========================================================================
    print("\n1. COMPILING TREE...")
    action = DecisionTreeAction(csv_path, model)
    tree = action.initialise()
    print(f"   ✓ Root: {tree.root.id}")
    print(f"   ✓ Branches: {len(tree.nodes)}")
    print(f"   ✓ Outcome type: {tree.inferred_type.value}")

    # =========================================================================
    # STEP 2: Decide
    # =========================================================================
    print("\n2. DECIDING...")
    failures = action.run(subjects)
    for subject in subjects:
        if subject in failures:
            print(f"   ✗ {subject}: {failures[subject]}")
        else:
            print(f"   ✓ {subject}: {model.get_value(subject, action.choice_attribute)}")

    # =========================================================================
    # STEP 3: Analyze
    # =========================================================================
    print("\n3. ANALYZING TREE...")
    report = analyze_tree(tree, parse_table_file(csv_path))
    print(f"   ✓ Max depth: {report.max_depth}")
    print(f"   ✓ Attributes: {sorted(report.attribute_usage)}")
    print(f"   ✓ Unreachable rows: {sorted(report.unreachable_rows)}")
    for warning in report.warnings:
        print(f"      - {warning}")

    # =========================================================================
    # STEP 4: Diagram
    # =========================================================================
    print("\n4. GENERATING DIAGRAM...")
    save_dot_file(tree, "tree_detailed.dot", mode=DotMode.DETAILED)
    print("   ✓ Saved tree_detailed.dot")

    print("\n" + "=" * 80)
    print("PIPELINE COMPLETE!")
    print("\nTo visualize the diagram:")
    print("  dot -Tpng tree_detailed.dot -o tree_detailed.png")
    print("=" * 80)


if __name__ == "__main__":
    main()

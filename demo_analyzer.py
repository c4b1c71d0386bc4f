"""
Demo: Run analyzer on the example grading tree and output the report.
"""

from tdtree.examples import build_example_table, build_example_tree
from tdtree.analyzer import analyze_tree
from tdtree.serialization import tree_to_yaml


def print_report(report):
    """Pretty-print a TreeReport."""
    print()
    print("=" * 70)
    print(f"DECISION TREE ANALYSIS REPORT ({report.inferred_type})")
    print("=" * 70)
    print()

    print("📊 BASIC METRICS")
    print(f"  Table Rows:            {report.total_rows}")
    print(f"  Branches:              {report.total_branches}")
    print(f"  Leaves:                {report.total_leaves}")
    print(f"  Max Depth:             {report.max_depth}")
    print()

    print("📈 ATTRIBUTE USAGE")
    for identifier, count in sorted(report.attribute_usage.items()):
        print(f"    {identifier}: {count} decision(s)")
    print()

    print("🔗 STRUCTURE")
    print(f"  Outcomes:              {sorted(report.outcomes)}")
    print(f"  Shared Nodes:          {sorted(report.shared_nodes) if report.shared_nodes else 'None'}")
    print(f"  Unreachable Rows:      {sorted(report.unreachable_rows) if report.unreachable_rows else 'None'}")
    print(f"  Shape Mismatches:      {len(report.shape_mismatches)}")
    print()

    if report.warnings:
        print("⚠️  WARNINGS")
        for i, warning in enumerate(report.warnings, 1):
            print(f"  {i}. {warning}")
    else:
        print("✨ NO WARNINGS - Tree looks clean!")
    print()


if __name__ == "__main__":
    tree = build_example_tree()

    report = analyze_tree(tree, build_example_table())
    print_report(report)

    # Also save to YAML for inspection
    with open("example_tree_output.yaml", "w") as f:
        f.write(tree_to_yaml(tree))
    print("✅ Tree exported to example_tree_output.yaml")

#!/usr/bin/env python3
"""
Demo: Generate Graphviz DOT diagrams from a compiled decision tree.

Shows both visualization modes (SIMPLE, DETAILED).
"""

from tdtree.examples import build_example_tree
from tdtree.backends import generate_dot, save_dot_file, DotMode


def main():
    # Build example tree
    tree = build_example_tree()

    print("=" * 80)
    print("DOT GENERATOR DEMO")
    print("=" * 80)

    for mode in [DotMode.SIMPLE, DotMode.DETAILED]:
        print(f"\n{mode.value.upper()} MODE:")
        print("-" * 80)

        print(generate_dot(tree, mode=mode))

        filename = f"tree_{mode.value}.dot"
        save_dot_file(tree, filename, mode=mode)
        print(f"\nSaved to: {filename}")

    print("\n" + "=" * 80)
    print("To visualize the diagrams:")
    print("  dot -Tpng tree_simple.dot -o tree_simple.png")
    print("  dot -Tpng tree_detailed.dot -o tree_detailed.png")
    print("=" * 80)


if __name__ == "__main__":
    main()

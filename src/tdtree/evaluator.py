"""
Tree evaluator (Layer 3: DecisionTree + subject -> TypedLiteral).

Walks from the root. At each branch the subject's existing value for the
branch attribute is fetched and the operator decides which child to
follow. The literal of the leaf reached is the result.

The tree is only read. A failed evaluation (missing value, wrong
attribute shape, bad operand) aborts that one call; the tree stays
valid for other subjects.
"""

import logging
from typing import Dict, Hashable, Iterable, Optional, Union

from tdtree.attributes import AttributeModel
from tdtree.errors import EvaluationError
from tdtree.literals import TypedLiteral
from tdtree.model import Branch, DecisionTree

logger = logging.getLogger(__name__)


def evaluate(
    tree: DecisionTree,
    subject: Hashable,
    attribute_model: Optional[AttributeModel] = None,
) -> TypedLiteral:
    """
    Decide the outcome of the tree for one subject.

    Args:
        tree: Compiled tree
        subject: Subject whose attribute values are tested
        attribute_model: Source of values (defaults to the model the
            tree was compiled against)

    Returns:
        TypedLiteral of the leaf reached

    Raises:
        MissingValueError: If the subject has no value for a tested attribute
        ShapeViolationError: If an operator does not suit its attribute
        OperandError: If an operand cannot be interpreted
    """
    model = attribute_model or tree.attribute_model
    if model is None:
        raise ValueError("No attribute model to read subject values from")

    node = tree.root
    while isinstance(node, Branch):
        decision = node.decision
        value = model.current_value(decision.attribute, subject)
        outcome = decision.operator.decide(value, decision.operand)
        logger.debug("%s: node %s [%s] -> %s", subject, node.id, decision, outcome)
        node = node.on_true if outcome else node.on_false

    return node.literal


def evaluate_many(
    tree: DecisionTree,
    subjects: Iterable[Hashable],
    attribute_model: Optional[AttributeModel] = None,
) -> Dict[Hashable, Union[TypedLiteral, EvaluationError]]:
    """
    Evaluate the tree for several subjects.

    A subject whose evaluation fails maps to the EvaluationError raised
    for it; the other subjects are still evaluated.
    """
    results: Dict[Hashable, Union[TypedLiteral, EvaluationError]] = {}
    for subject in subjects:
        try:
            results[subject] = evaluate(tree, subject, attribute_model)
        except EvaluationError as e:
            logger.warning("Evaluation failed for %s: %s", subject, e)
            results[subject] = e
    return results


__all__ = ["evaluate", "evaluate_many"]

"""Accuracy evaluation against ground truth."""

from .metrics import compute_accuracy, evaluate_parts, print_accuracy_table
from .ground_truth import load_document, load_parts_file, load_samples_file

__all__ = [
    "compute_accuracy",
    "evaluate_parts",
    "print_accuracy_table",
    "load_document",
    "load_parts_file",
    "load_samples_file",
]

# ACA Scan Module
# Local discovery of commands, agents, and skill bundles

from aca.scan.classifier import Classification, EntryKind, classify_entry
from aca.scan.scanner import ScanResult, ScanRoot, default_roots, scan_root
from aca.scan.skills import package_skills
from aca.scan.walker import walk_directory

__all__ = [
    # Classifier
    "Classification",
    "EntryKind",
    "classify_entry",
    # Walker
    "walk_directory",
    # Skills
    "package_skills",
    # Orchestrator
    "ScanResult",
    "ScanRoot",
    "scan_root",
    "default_roots",
]

from .audit import AuditReport, preflight_check, run_audit
from .export import export_findings, print_report, read_findings_csv, write_findings_csv

__all__ = [
    "AuditReport",
    "preflight_check",
    "run_audit",
    "export_findings",
    "print_report",
    "read_findings_csv",
    "write_findings_csv",
]

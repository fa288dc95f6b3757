from __future__ import annotations

import csv
import os
from datetime import datetime
from pathlib import Path
from typing import IO, Iterable

from colorama import Fore, Style
from openpyxl import Workbook

from ..errors import ExportError
from ..models import AuditFinding, format_rights, object_type_label, parse_rights
from ..utils.dn import dn_first_component_value
from .audit import AuditReport

CSV_COLUMNS = [
    "IdentityReference",
    "ActiveDirectoryRights",
    "IsInherited",
    "ObjectType",
    "Owner",
    "DistinguishedName",
]

FILE_PREFIX = "OU_ACE_Audit"


def finding_to_row(f: AuditFinding) -> list[str]:
    return [
        f.identity,
        format_rights(f.rights),
        "True" if f.is_inherited else "False",
        f.object_type or "",
        f.owner,
        f.distinguished_name,
    ]


def _parse_bool(v: str) -> bool:
    s = (v or "").strip().lower()
    if s in ("true", "1", "yes"):
        return True
    if s in ("false", "0", "no", ""):
        return False
    raise ValueError(f"not a boolean: {v!r}")


def row_to_finding(row: dict[str, str]) -> AuditFinding:
    return AuditFinding(
        identity=row["IdentityReference"],
        rights=parse_rights(row["ActiveDirectoryRights"]),
        is_inherited=_parse_bool(row["IsInherited"]),
        object_type=(row.get("ObjectType") or None),
        owner=row["Owner"],
        distinguished_name=row["DistinguishedName"],
    )


def export_filename(ext: str, now: datetime | None = None) -> str:
    ts = (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
    return f"{FILE_PREFIX}_{ts}.{ext.lstrip('.')}"


def claim_path(directory: str | os.PathLike, name: str) -> Path:
    """Create an empty file under a free name (adds _1, _2, ... on collision).

    The file is created with mode "x", so a name taken by another run in the
    meantime is skipped instead of overwritten.
    """
    base = Path(directory) / name
    stem, suffix = base.stem, base.suffix
    n = 0
    while True:
        candidate = base if n == 0 else base.with_name(f"{stem}_{n}{suffix}")
        try:
            with open(candidate, "x"):
                pass
        except FileExistsError:
            n += 1
            continue
        except OSError as e:
            raise ExportError(f"Не удалось создать файл {candidate}: {e}") from e
        return candidate


def write_findings_csv(findings: Iterable[AuditFinding], path: str | os.PathLike) -> Path:
    p = Path(path)
    try:
        with open(p, "w", encoding="utf-8-sig", newline="") as f:
            w = csv.writer(f)
            w.writerow(CSV_COLUMNS)
            for finding in findings:
                w.writerow(finding_to_row(finding))
    except OSError as e:
        raise ExportError(f"Не удалось записать CSV {p}: {e}") from e
    return p


def read_findings_csv(path: str | os.PathLike) -> list[AuditFinding]:
    with open(path, "r", encoding="utf-8-sig", newline="") as f:
        return [row_to_finding(row) for row in csv.DictReader(f)]


def write_findings_xlsx(findings: Iterable[AuditFinding], path: str | os.PathLike) -> Path:
    p = Path(path)

    wb = Workbook()
    ws = wb.active
    ws.title = "OU ACE"

    ws.append(CSV_COLUMNS)
    for cell in ws[1]:
        cell.font = cell.font.copy(bold=True)

    for finding in findings:
        ws.append(finding_to_row(finding))

    for i, w in enumerate([34, 30, 12, 38, 30, 60], start=1):
        ws.column_dimensions[chr(ord("A") + i - 1)].width = w

    try:
        wb.save(p)
    except OSError as e:
        raise ExportError(f"Не удалось записать XLSX {p}: {e}") from e
    return p


def export_findings(
    findings: list[AuditFinding],
    output_dir: str | os.PathLike = "",
    *,
    to_csv: bool = True,
    to_xlsx: bool = False,
    now: datetime | None = None,
) -> list[Path]:
    """Write timestamped export files; returns the written paths."""
    out_dir = Path(output_dir or os.getcwd())
    try:
        out_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ExportError(f"Не удалось создать каталог {out_dir}: {e}") from e

    now = now or datetime.now()
    written: list[Path] = []
    writers = []
    if to_csv:
        writers.append(("csv", write_findings_csv))
    if to_xlsx:
        writers.append(("xlsx", write_findings_xlsx))

    for ext, write in writers:
        path = claim_path(out_dir, export_filename(ext, now))
        try:
            written.append(write(findings, path))
        except ExportError:
            # не оставляем пустой зарезервированный файл
            path.unlink(missing_ok=True)
            raise
    return written


def render_finding(f: AuditFinding, color: bool = True) -> str:
    label = format_rights(f.rights)
    if color:
        label = f"{Fore.RED}{Style.BRIGHT}{label}{Style.RESET_ALL}"
    lines = [
        f"OU                : {dn_first_component_value(f.distinguished_name)}",
        f"IdentityReference : {f.identity}",
        f"Rights            : {label}",
        f"IsInherited       : {f.is_inherited}",
        f"ObjectType        : {object_type_label(f.object_type)}",
        f"Owner             : {f.owner}",
        f"DistinguishedName : {f.distinguished_name}",
    ]
    return "\n".join(lines)


def print_report(report: AuditReport, stream: IO[str], color: bool = True) -> None:
    for f in report.findings:
        stream.write(render_finding(f, color=color))
        stream.write("\n\n")
    summary = f"OU проверено: {report.ou_count}; находок (GenericAll/CreateChild): {len(report.findings)}"
    if color:
        tint = Fore.YELLOW if report.has_findings else Fore.GREEN
        summary = f"{tint}{summary}{Style.RESET_ALL}"
    stream.write(summary + "\n")

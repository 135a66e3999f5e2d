import logging
import re
from datetime import datetime
from pathlib import Path
from typing import List, NamedTuple, Optional

import pandas as pd
from sqlalchemy.orm import Session, selectinload

from shared.core.config import settings
from shared.core.schemas import ExportResult
from shared.exporthelper import build_frame, export_to_excel
from ...enum.contract_enum import ContractType
from ...models.contracts import Contract

logger = logging.getLogger(__name__)

SUMMARY_SHEET = "Résumé"
BILLABLE_SHEET = "Interventions comptées"
NON_BILLABLE_SHEET = "Interventions non comptées"

BILLABLE_COLUMNS = {
    "date": "Date",
    "description": "Description",
    "technician": "Technicien",
    "hours": "Heures",
    "location": "Localisation",
}

NON_BILLABLE_COLUMNS = {
    "date": "Date",
    "description": "Description",
    "technician": "Technicien",
    "minutes": "Minutes",
    "location": "Localisation",
}

UNSAFE_PATH_CHARS = re.compile(r'[/\\?%*:|"<>]')


def _fr_date(value: Optional[datetime]) -> str:
    return value.strftime("%d/%m/%Y") if value else ""


def _hours_label(hours: float) -> str:
    # 10.0 -> "10", 7.5 -> "7.5"
    return f"{hours:g}"


def client_folder_name(client_name: str) -> str:
    return UNSAFE_PATH_CHARS.sub("-", client_name)


def backup_file_name(contract: Contract) -> str:
    if contract.is_archived:
        status_prefix = "archive"
    elif contract.contract_type == ContractType.quote.value:
        status_prefix = "devis"
    else:
        status_prefix = "actif"

    signed = contract.signed_date.strftime(
        "%d-%m-%Y") if contract.signed_date else "non-signe"
    folder = client_folder_name(contract.client_name)
    return f"[{status_prefix}]{folder}_{_hours_label(contract.total_hours)}h_{signed}.xlsx"


def contract_sheets(contract: Contract) -> dict:
    remaining = contract.total_hours - contract.used_hours
    progress = (contract.used_hours / contract.total_hours *
                100) if contract.total_hours else 0.0

    summary = pd.DataFrame([
        ["Client", contract.client_name],
        ["Contrat N°", contract.contract_number or contract.id],
        ["Date de création", _fr_date(contract.created_date)],
        ["Heures totales", contract.total_hours],
        ["Heures utilisées", contract.used_hours],
        ["Heures restantes", round(remaining, 1)],
        ["Progression", f"{progress:.1f}%"],
        ["Statut", "Archivé" if contract.is_archived else contract.status],
    ])
    sheets = {SUMMARY_SHEET: summary}

    billable = [
        {
            "date": _fr_date(i.date),
            "description": i.description,
            "technician": i.technician,
            "hours": i.hours_used,
            "location": i.location or "Non spécifié",
        }
        for i in contract.interventions if i.is_billable
    ]
    non_billable = [
        {
            "date": _fr_date(i.date),
            "description": i.description,
            "technician": i.technician,
            "minutes": round(i.hours_used * 60),
            "location": i.location or "Non spécifié",
        }
        for i in contract.interventions if not i.is_billable
    ]

    if billable:
        sheets[BILLABLE_SHEET] = build_frame(billable, BILLABLE_COLUMNS)
    if non_billable:
        sheets[NON_BILLABLE_SHEET] = build_frame(
            non_billable, NON_BILLABLE_COLUMNS)
    return sheets


class ContractBackup(NamedTuple):
    folder: str
    file_name: str
    stale_prefix: str
    sheets: dict


def contract_backup(contract: Contract) -> ContractBackup:
    folder = client_folder_name(contract.client_name)
    return ContractBackup(
        folder=folder,
        file_name=backup_file_name(contract),
        # earlier backups of the same contract (same client + same budget)
        stale_prefix=f"{folder}_{_hours_label(contract.total_hours)}h_",
        sheets=contract_sheets(contract),
    )


def write_backup(backup: ContractBackup, backup_dir: Path) -> Path:
    folder = backup_dir / backup.folder
    folder.mkdir(parents=True, exist_ok=True)

    for existing in folder.glob("*.xlsx"):
        if backup.stale_prefix in existing.name:
            try:
                existing.unlink()
            except OSError as e:
                logger.error(f"Error deleting old backup {existing}: {e}")

    return export_to_excel(
        folder / backup.file_name,
        backup.sheets,
        headerless=[SUMMARY_SHEET],
    )


def export_all_contracts(db: Session, backup_dir: Optional[Path] = None) -> ExportResult:
    backup_dir = Path(backup_dir or settings.BACKUP_DIR)
    contracts: List[Contract] = (
        db.query(Contract)
        .options(selectinload(Contract.interventions))
        .order_by(Contract.created_date.desc())
        .all()
    )
    backups = [contract_backup(contract) for contract in contracts]
    # release the session before the workbooks hit the disk
    db.rollback()

    for backup in backups:
        write_backup(backup, backup_dir)

    logger.info("Excel backup: %d contract(s) exported to %s",
                len(backups), backup_dir)
    return ExportResult(success=True, count=len(backups), path=str(backup_dir))

from contract_service.app.crud import contracts_crud
from contract_service.app.crud.scheduler import scheduler_service
from contract_service.app.schemas.contracts_schemas import ContractCreate
from shared.core.config import settings


def test_scheduled_jobs_use_their_own_session(db_session, session_factory, clock, ids, monkeypatch):
    contracts_crud.create_contract(
        db_session, ContractCreate(client_name="CronCorp", total_hours=4), clock, ids)
    monkeypatch.setattr(scheduler_service, "SessionLocal", session_factory)

    backup, notifications = scheduler_service.run_scheduled_jobs()

    assert backup.count == 1
    assert backup.path == str(settings.BACKUP_DIR)
    # no SMTP host configured in the test environment
    assert notifications.sent == 0
    assert list((settings.BACKUP_DIR / "CronCorp").glob("*CronCorp_4h_*.xlsx"))


def test_console_script(db_session, session_factory, monkeypatch):
    monkeypatch.setattr(scheduler_service, "SessionLocal", session_factory)

    assert scheduler_service.main() == 0

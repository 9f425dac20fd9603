from fastapi import BackgroundTasks

from outthedoor.core.exceptions import QuoteServiceError
from outthedoor.core.logger import get_logger
from outthedoor.models.contract_request import ContractDiffInput
from outthedoor.services.contract_service import check_contract_against_quote
from outthedoor.services.notification_service import notify_contract_mismatch
from outthedoor.services.record_store import RecordStore

logger = get_logger(__name__)

CONTRACT_DIFF_JOB = "contract_diff"


async def run_contract_diff_job(store: RecordStore, contract_id: str, diff_input: ContractDiffInput) -> None:
    """Worker side of a queued contract re-check; failures are logged, never raised."""
    logger.info(f"{CONTRACT_DIFF_JOB} job started for contract {contract_id}")
    try:
        contract = check_contract_against_quote(store, contract_id, diff_input)
    except QuoteServiceError as e:
        logger.error(f"{CONTRACT_DIFF_JOB} job failed for contract {contract_id}: {e.message}")
        return
    except Exception:
        logger.exception(f"{CONTRACT_DIFF_JOB} job crashed for contract {contract_id}")
        return

    logger.info(f"{CONTRACT_DIFF_JOB} job completed for contract {contract_id}: {contract.status.value}")
    await notify_contract_mismatch(store, contract)


def enqueue_contract_diff(
    background_tasks: BackgroundTasks,
    store: RecordStore,
    contract_id: str,
    diff_input: ContractDiffInput,
) -> None:
    background_tasks.add_task(run_contract_diff_job, store, contract_id, diff_input)
    logger.info(f"Queued {CONTRACT_DIFF_JOB} job for contract {contract_id}")

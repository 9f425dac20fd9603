from fastapi import APIRouter, BackgroundTasks, Depends, status

from outthedoor.core.exceptions import NotFoundError
from outthedoor.core.logger import get_logger
from outthedoor.models.contract import Contract, ContractStatus
from outthedoor.models.contract_request import ContractDiffInput, ContractUploadRequest
from outthedoor.models.response import ContractUploadResponse, MessageResponse
from outthedoor.services.contract_service import check_contract_against_quote, upload_contract
from outthedoor.services.jobs_service import enqueue_contract_diff
from outthedoor.services.notification_service import notify_contract_mismatch
from outthedoor.services.record_store import RecordStore, get_store

contract_router = APIRouter(prefix="/contracts", tags=["Contract"])
logger = get_logger(__name__)


@contract_router.post("/upload", response_model=ContractUploadResponse)
def upload(payload: ContractUploadRequest, store: RecordStore = Depends(get_store)):
    """
    Register a signed contract upload for an accepted quote.
    File bytes go to object storage; only the names are received here.
    """
    contract = upload_contract(store, payload.quote_id, payload.file_names)
    return ContractUploadResponse(contract_id=contract.id, status=contract.status)


@contract_router.get("/{contract_id}", response_model=Contract)
def get_contract(contract_id: str, store: RecordStore = Depends(get_store)):
    contract = store.get_contract(contract_id)
    if contract is None:
        raise NotFoundError("Contract not found")
    return contract


@contract_router.post("/{contract_id}/check", response_model=Contract)
def check_contract(
    contract_id: str,
    diff_input: ContractDiffInput,
    background_tasks: BackgroundTasks,
    store: RecordStore = Depends(get_store),
):
    """
    Diff the contract against its accepted quote and persist the verdict.
    On mismatch the dealer is emailed the failing checks after the response.
    """
    logger.info(f"Checking contract {contract_id} against its quote")
    contract = check_contract_against_quote(store, contract_id, diff_input)

    if contract.status == ContractStatus.MISMATCH:
        background_tasks.add_task(notify_contract_mismatch, store, contract)

    return contract


@contract_router.post("/{contract_id}/recheck", response_model=MessageResponse, status_code=status.HTTP_202_ACCEPTED)
def recheck_contract(
    contract_id: str,
    diff_input: ContractDiffInput,
    background_tasks: BackgroundTasks,
    store: RecordStore = Depends(get_store),
):
    if store.get_contract(contract_id) is None:
        raise NotFoundError("Contract not found")
    enqueue_contract_diff(background_tasks, store, contract_id, diff_input)
    return MessageResponse(message=f"Contract {contract_id} queued for re-check")

from typing import Dict, List, Optional

import aiohttp

from outthedoor.core.config import settings
from outthedoor.core.logger import get_logger
from outthedoor.models.contract import CheckResult
from outthedoor.models.quote_request import CounterRequest

logger = get_logger(__name__)

EMAIL_TIMEOUT_SECONDS = 15


def dealer_link(invite_token: Optional[str]) -> str:
    return f"{settings.APP_URL}/d/{invite_token or ''}"


# -------------------------------------------------------------------
# Templates
# -------------------------------------------------------------------
def contract_mismatch_subject() -> str:
    return "OutTheDoor | Contract needs updates before signing"


def contract_mismatch_content(dealer_name: str, quote_summary: str, diff_results: List[CheckResult], link: str) -> Dict[str, str]:
    text_items = "\n".join(
        f"- {result.field}{f': {result.notes}' if result.notes else ''}" for result in diff_results
    )
    html_items = "".join(
        f"<li><strong>{result.field}</strong>{f' - {result.notes}' if result.notes else ''}</li>"
        for result in diff_results
    )
    text = (
        f"Hi {dealer_name},\n\n"
        f"We compared your contract against the accepted quote ({quote_summary}) and found mismatches:\n"
        f"{text_items}\n\n"
        f"Please correct these items and upload a revised contract: {link}\n\n"
        "Thanks,\nOutTheDoor Ops"
    )
    html = (
        f"<!doctype html><html><body><p>Hi {dealer_name},</p>"
        f"<p>We compared your contract against the accepted quote (<strong>{quote_summary}</strong>) "
        f"and found the following mismatches:</p><ul>{html_items}</ul>"
        f'<p><a href="{link}">Upload revised contract</a></p>'
        "<p>Thanks,<br/>OutTheDoor Ops</p></body></html>"
    )
    return {"text": text, "html": html}


def counter_subject(counter: CounterRequest) -> str:
    if counter.type == "remove_addons":
        return "OutTheDoor | Buyer asked to remove add-ons"
    return "OutTheDoor | Buyer counter-offer on OTD price"


def counter_content(dealer_name: str, quote_summary: str, counter: CounterRequest, link: str) -> Dict[str, str]:
    if counter.type == "remove_addons":
        ask = "remove the following add-ons: " + ", ".join(counter.addon_names)
    else:
        ask = f"match an out-the-door total of ${counter.target_otd:,.2f}"
    text = (
        f"Hi {dealer_name},\n\n"
        f"The buyer reviewed your quote ({quote_summary}) and asked you to {ask}.\n\n"
        f"Respond with an updated quote here: {link}\n\n"
        "Thanks,\nOutTheDoor Ops"
    )
    html = (
        f"<!doctype html><html><body><p>Hi {dealer_name},</p>"
        f"<p>The buyer reviewed your quote (<strong>{quote_summary}</strong>) and asked you to {ask}.</p>"
        f'<p><a href="{link}">Update your quote</a></p>'
        "<p>Thanks,<br/>OutTheDoor Ops</p></body></html>"
    )
    return {"text": text, "html": html}


# -------------------------------------------------------------------
# Delivery
# -------------------------------------------------------------------
async def send_email(to: str, subject: str, content: Dict[str, str]) -> Optional[str]:
    """
    Post one email to the delivery API and return its id.

    Never raises: a missing API key skips delivery, and delivery errors are
    logged. Callers run this after their own state is already persisted.
    """
    if not settings.EMAIL_API_KEY:
        logger.info(f"Email '{subject}' to {to} skipped (missing EMAIL_API_KEY)")
        return None

    request_payload = {
        "from": settings.EMAIL_FROM,
        "to": to,
        "subject": subject,
        "html": content["html"],
        "text": content["text"],
    }
    headers = {
        "Authorization": f"Bearer {settings.EMAIL_API_KEY}",
        "Content-Type": "application/json",
    }

    logger.info(f"Sending email '{subject}' to {to}")
    try:
        timeout = aiohttp.ClientTimeout(total=EMAIL_TIMEOUT_SECONDS)
        async with aiohttp.ClientSession(headers=headers, timeout=timeout) as session:
            async with session.post(settings.EMAIL_API_URL, json=request_payload) as response:
                response.raise_for_status()
                data = await response.json()
    except Exception as e:
        logger.error(f"Failed to send email '{subject}' to {to}: {e}")
        return None

    email_id = data.get("id")
    logger.info(f"Email delivered to {to} (id={email_id})")
    return email_id


async def send_contract_mismatch_email(
    dealer_email: str,
    dealer_name: str,
    quote_summary: str,
    diff_results: List[CheckResult],
    link: str,
) -> Optional[str]:
    content = contract_mismatch_content(dealer_name, quote_summary, diff_results, link)
    return await send_email(dealer_email, contract_mismatch_subject(), content)


async def send_counter_email(
    dealer_email: str,
    dealer_name: str,
    quote_summary: str,
    counter: CounterRequest,
    link: str,
) -> Optional[str]:
    content = counter_content(dealer_name, quote_summary, counter, link)
    return await send_email(dealer_email, counter_subject(counter), content)
